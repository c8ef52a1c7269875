"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Connection management
  - init_models(), dispose_engine(): Start-up and shutdown hooks
  - UserModel, ConversationModel, MessageModel, FeedbackModel: Domain entities
  - user_crud, conversation_crud, feedback_crud: CRUD operation singletons

Dependencies: sqlalchemy, gyanmitra.configs
System role: Database adapter for users, conversations and feedback
"""

from gyanmitra.boundary.db.base import Base, TimestampMixin, UUIDMixin
from gyanmitra.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    init_models,
)
from gyanmitra.boundary.db.models import (
    ConversationModel,
    FeedbackModel,
    MessageModel,
    UserModel,
)
from gyanmitra.boundary.db.CRUD import (
    BaseCRUD,
    ConversationCRUD,
    FeedbackCRUD,
    UserCRUD,
    conversation_crud,
    feedback_crud,
    user_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "init_models",
    "dispose_engine",
    # Models
    "UserModel",
    "ConversationModel",
    "MessageModel",
    "FeedbackModel",
    # CRUD classes
    "BaseCRUD",
    "UserCRUD",
    "ConversationCRUD",
    "FeedbackCRUD",
    # CRUD singletons
    "user_crud",
    "conversation_crud",
    "feedback_crud",
]
