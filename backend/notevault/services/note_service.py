"""
NoteVault Backend — Note Service (Resource Access Controller)
===============================================================

What:  Owner-scoped create/list/get/update/delete for notes.
How:   Every statement that touches an existing note carries
       `owner_id = :requester` in its WHERE clause next to `id = :id`.
       Update and delete are single UPDATE/DELETE ... RETURNING statements,
       so there is no fetch-then-check window.
Who:   Called by the /notes route handlers with the Identity produced by
       the auth gate.

Error Handling:
    - No row matched            → NotFoundOrUnauthorizedError (404); missing
                                  and foreign notes are indistinguishable
    - Any SQLAlchemy failure    → StorageFaultError (500), details logged only

NoteService is stateless; each call receives its session and identity.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, desc, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.exceptions import NotFoundOrUnauthorizedError, StorageFaultError
from notevault.models.note import Note
from notevault.schemas.note import NoteDeleteResponse, NoteResponse
from notevault.services.token_service import Identity

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - create_note(): persist a note owned by the requester
        - list_notes():  every note owned by the requester, newest first
        - get_note():    one owned note
        - update_note(): change title/content of one owned note
        - delete_note(): remove one owned note, returning its prior state
    """

    async def _storage_fault(
        self, db: AsyncSession, operation: str, error: Exception, note_id: Optional[uuid.UUID] = None
    ) -> StorageFaultError:
        await db.rollback()
        context = {"operation": operation, "error_type": type(error).__name__}
        if note_id is not None:
            context["note_id"] = str(note_id)
        logger.error("Database error in %s: %s", operation, type(error).__name__, exc_info=True)
        return StorageFaultError(context=context)

    async def create_note(
        self,
        db: AsyncSession,
        identity: Identity,
        title: str = "",
        content: str = "",
    ) -> NoteResponse:
        """
        Create a note owned by `identity.user_id`.

        Raises:
            StorageFaultError: insert failed
        """
        now = datetime.now(timezone.utc)
        note = Note(
            id=uuid.uuid4(),
            title=title,
            content=content,
            owner_id=identity.user_id,
            created_at=now,
            updated_at=now,
        )
        db.add(note)
        try:
            await db.commit()
        except SQLAlchemyError as e:
            raise await self._storage_fault(db, "create_note", e)

        logger.info("Note %s created by user %s", note.id, identity.user_id)
        return NoteResponse.model_validate(note)

    async def list_notes(self, db: AsyncSession, identity: Identity) -> List[NoteResponse]:
        """
        Return every note owned by the requester, newest first.

        Query plan:
            SELECT * FROM notes WHERE owner_id = :owner ORDER BY created_at DESC
            → idx_notes_owner_created
        """
        try:
            result = await db.execute(
                select(Note)
                .where(Note.owner_id == identity.user_id)
                .order_by(desc(Note.created_at), desc(Note.id))
            )
            notes = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise await self._storage_fault(db, "list_notes", e)

        return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(
        self, db: AsyncSession, identity: Identity, note_id: uuid.UUID
    ) -> NoteResponse:
        """
        Return one note if, and only if, the requester owns it.

        Raises:
            NotFoundOrUnauthorizedError: no note with this ID owned by the requester
            StorageFaultError: query failed
        """
        try:
            result = await db.execute(
                select(Note).where(Note.id == note_id, Note.owner_id == identity.user_id)
            )
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise await self._storage_fault(db, "get_note", e, note_id)

        if note is None:
            raise NotFoundOrUnauthorizedError(resource="note", resource_id=str(note_id))
        return NoteResponse.model_validate(note)

    async def update_note(
        self,
        db: AsyncSession,
        identity: Identity,
        note_id: uuid.UUID,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> NoteResponse:
        """
        Update title and/or content of an owned note.

        `None` leaves a field unchanged. `updated_at` is always bumped.

        Query plan:
            UPDATE notes SET ... WHERE id = :id AND owner_id = :owner RETURNING *

        Raises:
            NotFoundOrUnauthorizedError: no note with this ID owned by the requester
            StorageFaultError: statement failed
        """
        values = {"updated_at": datetime.now(timezone.utc)}
        if title is not None:
            values["title"] = title
        if content is not None:
            values["content"] = content

        try:
            result = await db.execute(
                update(Note)
                .where(Note.id == note_id, Note.owner_id == identity.user_id)
                .values(**values)
                .returning(Note)
            )
            note = result.scalar_one_or_none()
            if note is None:
                await db.rollback()
                raise NotFoundOrUnauthorizedError(resource="note", resource_id=str(note_id))
            response = NoteResponse.model_validate(note)
            await db.commit()
        except SQLAlchemyError as e:
            raise await self._storage_fault(db, "update_note", e, note_id)

        logger.info("Note %s updated by user %s", note_id, identity.user_id)
        return response

    async def delete_note(
        self, db: AsyncSession, identity: Identity, note_id: uuid.UUID
    ) -> NoteDeleteResponse:
        """
        Delete an owned note and return its state before deletion.

        Query plan:
            DELETE FROM notes WHERE id = :id AND owner_id = :owner RETURNING *

        Raises:
            NotFoundOrUnauthorizedError: no note with this ID owned by the requester
            StorageFaultError: statement failed
        """
        try:
            result = await db.execute(
                delete(Note)
                .where(Note.id == note_id, Note.owner_id == identity.user_id)
                .returning(Note)
            )
            note = result.scalar_one_or_none()
            if note is None:
                await db.rollback()
                raise NotFoundOrUnauthorizedError(resource="note", resource_id=str(note_id))
            deleted = NoteResponse.model_validate(note)
            await db.commit()
        except SQLAlchemyError as e:
            raise await self._storage_fault(db, "delete_note", e, note_id)

        logger.info("Note %s deleted by user %s", note_id, identity.user_id)
        return NoteDeleteResponse(deleted_note=deleted)


note_service = NoteService()
