"""
NoteVault Backend — Note Request/Response Schemas
===================================================

What:  Pydantic models defining the /notes API contract.
How:   FastAPI validates request bodies against these models and serializes
       ORM objects through the response models (`from_attributes`).

`owner_id` never appears in a request model: ownership always comes from the
verified token, never from the client.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /notes. Both fields may be empty."""
    title: str = Field(default="", max_length=255, description="Note title")
    content: str = Field(default="", description="Note body")


class NoteUpdate(BaseModel):
    """
    Body of PUT /notes/{id}.

    Omitted fields are left unchanged; an explicit empty string clears the field.
    """
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = Field(default=None)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Full representation of a note."""
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str
    content: str
    owner_id: uuid.UUID = Field(description="ID of the owning user")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class NoteDeleteResponse(BaseModel):
    """Confirmation returned by DELETE /notes/{id}, with the note's prior state."""
    message: str = Field(default="Note deleted successfully")
    deleted_note: NoteResponse
