"""
NoteVault Backend — User SQLAlchemy Model
===========================================

What:  ORM model for the `users` table (the credential store).
Who:   Written by AuthService.register, read by AuthService.login.

Table Design:
    - UUID primary key generated in Python at construction time
    - username and email each carry a UNIQUE constraint; registration races
      are settled by the database, not by the application check alone
    - password_hash only ever holds output of PasswordHasher.hash()

There is no pre-save hook and no verification method on this model: the
password is hashed exactly once in AuthService.register, and verification
lives on PasswordHasher.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from notevault.database import Base


class User(Base):
    """A registered account. Immutable after creation."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(String(64), nullable=False)

    # Stored normalized (trimmed, lower-case); used as the login key.
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("username", name="uq_users_username"),
    )

    def __repr__(self) -> str:
        # no password_hash
        return f"<User(id={self.id}, username='{self.username}')>"
