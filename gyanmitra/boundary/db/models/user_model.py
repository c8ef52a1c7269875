"""
User ORM model.

Minimal account record: the query flow reads the preferred language from
here, and the profile endpoints read and update it.

Dependencies: sqlalchemy, gyanmitra.boundary.db.base
System role: User profile persistence
"""

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from gyanmitra.boundary.db.base import Base, TimestampMixin, UUIDMixin


class UserModel(Base, UUIDMixin, TimestampMixin):
    """
    User ORM model.

    Attributes:
        id: UUID primary key
        name: Display name
        email: Unique login email
        grade: School grade 5-10, optional
        preferred_language: Sticky answer language, None means no preference
        subjects: Client subject values the student follows
        role: "user" or "admin"
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    grade: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)

    preferred_language: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        default=None,
        doc="One of english/hindi/marathi/urdu",
    )

    subjects: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
