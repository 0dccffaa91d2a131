"""
NoteVault Backend — Notes Route Handlers
==========================================

What:  Owner-scoped note CRUD under /notes.
How:   Every handler takes the Identity resolved by the auth gate and passes
       it to NoteService; the router never sees another user's notes.

Routes:
    POST   /notes          create a note              201
    GET    /notes          list the requester's notes 200
    GET    /notes/{id}     fetch one owned note       200 / 404
    PUT    /notes/{id}     update one owned note      200 / 404
    DELETE /notes/{id}     delete one owned note      200 / 404

Note IDs are UUIDs; a malformed ID is rejected by FastAPI with 422 before
any query runs.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.database import get_db_session
from notevault.middleware.auth import require_identity
from notevault.schemas.common import ErrorResponse
from notevault.schemas.note import (
    NoteCreate,
    NoteDeleteResponse,
    NoteResponse,
    NoteUpdate,
)
from notevault.services.note_service import note_service
from notevault.services.token_service import Identity

logger = logging.getLogger(__name__)

_AUTH_RESPONSES = {
    401: {"description": "Missing, invalid or expired bearer token", "model": ErrorResponse},
    500: {"description": "Storage fault", "model": ErrorResponse},
}
_OWNED_RESPONSES = {
    **_AUTH_RESPONSES,
    404: {"description": "No such note owned by the requester", "model": ErrorResponse},
}

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.post(
    "",
    status_code=201,
    response_model=NoteResponse,
    responses=_AUTH_RESPONSES,
    summary="Create a note",
)
async def create_note(
    body: NoteCreate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """Create a note owned by the authenticated user."""
    return await note_service.create_note(
        db, identity, title=body.title, content=body.content
    )


@router.get(
    "",
    response_model=List[NoteResponse],
    responses=_AUTH_RESPONSES,
    summary="List your notes",
)
async def list_notes(
    response: Response,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    """
    Every note owned by the authenticated user, newest first.

    `X-Total-Count` carries the number of notes returned.
    """
    notes = await note_service.list_notes(db, identity)
    response.headers["X-Total-Count"] = str(len(notes))
    return notes


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_OWNED_RESPONSES,
    summary="Get one of your notes",
)
async def get_note(
    note_id: UUID,
    response: Response,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """Fetch a single note. Notes of other users answer 404."""
    result = await note_service.get_note(db, identity, note_id)
    # User-specific content: never cache in shared caches.
    response.headers["Cache-Control"] = "private, no-cache"
    return result


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_OWNED_RESPONSES,
    summary="Update one of your notes",
)
async def update_note(
    note_id: UUID,
    body: NoteUpdate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """Change title and/or content. Omitted fields keep their value."""
    return await note_service.update_note(
        db, identity, note_id, title=body.title, content=body.content
    )


@router.delete(
    "/{note_id}",
    response_model=NoteDeleteResponse,
    responses=_OWNED_RESPONSES,
    summary="Delete one of your notes",
)
async def delete_note(
    note_id: UUID,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> NoteDeleteResponse:
    """Delete a note and return its state before deletion."""
    return await note_service.delete_note(db, identity, note_id)
