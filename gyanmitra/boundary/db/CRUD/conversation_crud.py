"""
Conversation CRUD operations.

Every read is scoped to the owner so that a conversation belonging to
someone else is indistinguishable from one that does not exist.

Dependencies: sqlalchemy, gyanmitra.boundary.db.models
System role: Conversation persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gyanmitra.boundary.db.CRUD.base_crud import BaseCRUD
from gyanmitra.boundary.db.models.conversation_model import ConversationModel


class ConversationCRUD(BaseCRUD[ConversationModel]):
    """
    CRUD operations for ConversationModel.

    Extends BaseCRUD with owner-scoped lookups that eagerly load messages.
    """

    def __init__(self) -> None:
        super().__init__(ConversationModel)

    async def get_for_owner(
        self,
        session: AsyncSession,
        id: UUID,
        user_id: UUID,
    ) -> ConversationModel | None:
        """
        Retrieve a conversation with its messages if owned by user_id.

        Args:
            session: Async database session
            id: Conversation UUID
            user_id: Requesting user

        Returns:
            ConversationModel with messages loaded, None if missing or not owned
        """
        stmt = (
            select(ConversationModel)
            .where(ConversationModel.id == id, ConversationModel.user_id == user_id)
            .options(selectinload(ConversationModel.messages))
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_owner(
        self,
        session: AsyncSession,
        user_id: UUID,
        status: str,
        subject: str | None = None,
        grade: int | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[Sequence[ConversationModel], int]:
        """
        Page through a user's conversations, most recently updated first.

        The id tie-breaker keeps page boundaries stable when timestamps collide.

        Args:
            session: Async database session
            user_id: Owner
            status: "active" or "archived"
            subject: Optional subject filter
            grade: Optional grade filter
            limit: Page size
            offset: Rows to skip

        Returns:
            tuple: (conversations with messages loaded, total matching count)
        """
        filters = [ConversationModel.user_id == user_id, ConversationModel.status == status]
        if subject:
            filters.append(ConversationModel.subject == subject)
        if grade is not None:
            filters.append(ConversationModel.grade == grade)

        count_stmt = select(func.count()).select_from(ConversationModel).where(*filters)
        total = (await session.execute(count_stmt)).scalar_one()

        stmt = (
            select(ConversationModel)
            .where(*filters)
            .options(selectinload(ConversationModel.messages))
            .order_by(ConversationModel.updated_at.desc(), ConversationModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all(), total


conversation_crud = ConversationCRUD()
