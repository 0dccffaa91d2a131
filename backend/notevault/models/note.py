"""
NoteVault Backend — Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteService for owner-scoped CRUD and by Alembic.

Table Design:
    - UUID primary key: non-sequential, so IDs cannot be enumerated
    - owner_id: set once from the authenticated identity, never updated
    - title/content: empty strings allowed
    - created_at/updated_at: UTC with timezone

Query Patterns:
    - List own notes: WHERE owner_id = :owner ORDER BY created_at DESC
      → idx_notes_owner_created
    - Get/update/delete: WHERE id = :id AND owner_id = :owner
      → primary key lookup with the ownership filter in the same predicate
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from notevault.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A text note owned by exactly one user.

    Lifecycle:
        1. Created via an authenticated POST /notes (owner_id = requester)
        2. title/content mutated via authenticated PUT by the owner only
        3. Removed via authenticated DELETE by the owner only
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        server_default=text("''"),
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    # Reference to the owning user; no cascade rules are defined.
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_notes_owner_created", "owner_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, owner_id={self.owner_id})>"
