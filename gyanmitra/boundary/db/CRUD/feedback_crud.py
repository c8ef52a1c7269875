"""
Feedback CRUD operations.

Dependencies: sqlalchemy, gyanmitra.boundary.db.models
System role: Feedback persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gyanmitra.boundary.db.CRUD.base_crud import BaseCRUD
from gyanmitra.boundary.db.models.feedback_model import FeedbackModel


class FeedbackCRUD(BaseCRUD[FeedbackModel]):
    """CRUD operations for FeedbackModel."""

    def __init__(self) -> None:
        super().__init__(FeedbackModel)

    async def get_for_owner(
        self,
        session: AsyncSession,
        id: UUID,
        user_id: UUID,
    ) -> FeedbackModel | None:
        """Retrieve feedback by id if it was submitted by user_id."""
        stmt = select(FeedbackModel).where(
            FeedbackModel.id == id,
            FeedbackModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_message(
        self,
        session: AsyncSession,
        conversation_id: UUID,
        message_index: int,
        user_id: UUID,
    ) -> FeedbackModel | None:
        """Retrieve the record occupying a (conversation, message, user) slot."""
        stmt = select(FeedbackModel).where(
            FeedbackModel.conversation_id == conversation_id,
            FeedbackModel.message_index == message_index,
            FeedbackModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_owner(
        self,
        session: AsyncSession,
        user_id: UUID,
        rating: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[Sequence[FeedbackModel], int]:
        """
        Page through a user's feedback, newest first, with conversations loaded.

        Returns:
            tuple: (feedback records, total matching count)
        """
        filters = [FeedbackModel.user_id == user_id]
        if rating:
            filters.append(FeedbackModel.rating == rating)

        count_stmt = select(func.count()).select_from(FeedbackModel).where(*filters)
        total = (await session.execute(count_stmt)).scalar_one()

        stmt = (
            select(FeedbackModel)
            .where(*filters)
            .options(selectinload(FeedbackModel.conversation))
            .order_by(FeedbackModel.created_at.desc(), FeedbackModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all(), total


feedback_crud = FeedbackCRUD()
