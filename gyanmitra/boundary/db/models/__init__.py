"""
Database models package.

Exports:
  - UserModel: Account and profile preferences
  - ConversationModel: Conversation aggregate root
  - MessageModel: Ordered conversation turns
  - FeedbackModel: Per-message ratings

Dependencies: sqlalchemy, gyanmitra.boundary.db.base
System role: Database model definitions for domain entities
"""

from gyanmitra.boundary.db.models.user_model import UserModel
from gyanmitra.boundary.db.models.message_model import MessageModel
from gyanmitra.boundary.db.models.conversation_model import ConversationModel
from gyanmitra.boundary.db.models.feedback_model import FeedbackModel

__all__ = [
    "UserModel",
    "ConversationModel",
    "MessageModel",
    "FeedbackModel",
]
