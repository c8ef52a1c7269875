"""
CRUD operations for database models.

Exports the base CRUD class and model-specific implementations with
pre-instantiated singletons for direct use.

Usage:
    from gyanmitra.boundary.db.CRUD import conversation_crud

    conversation = await conversation_crud.get_for_owner(db, conversation_id, user_id)
"""

from gyanmitra.boundary.db.CRUD.base_crud import BaseCRUD
from gyanmitra.boundary.db.CRUD.user_crud import UserCRUD, user_crud
from gyanmitra.boundary.db.CRUD.conversation_crud import ConversationCRUD, conversation_crud
from gyanmitra.boundary.db.CRUD.feedback_crud import FeedbackCRUD, feedback_crud

__all__ = [
    "BaseCRUD",
    "UserCRUD",
    "ConversationCRUD",
    "FeedbackCRUD",
    "user_crud",
    "conversation_crud",
    "feedback_crud",
]
