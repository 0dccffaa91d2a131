"""
NoteVault Backend — Authentication Schemas
============================================

What:  Pydantic models for /register and /login request and response bodies.
How:   FastAPI validates request bodies against these models (422 on schema
       violations) and serializes responses through them.

None of the response models has a password or hash field, so neither can
leak through serialization.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class RegisterRequest(BaseModel):
    """Body of POST /register."""
    username: str = Field(min_length=1, max_length=64, description="Unique display name")
    email: EmailStr = Field(description="Unique email address, used to log in")
    password: str = Field(min_length=1, max_length=72, description="Plaintext password")

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("username must not be blank")
        return stripped

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class LoginRequest(BaseModel):
    """
    Body of POST /login.

    `email` is a plain string rather than EmailStr: a malformed address is
    just another unknown email and must fail the same way.
    """
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class UserResponse(BaseModel):
    """Public view of a user record."""
    id: uuid.UUID
    username: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    """Acknowledgment returned by POST /register with HTTP 201."""
    message: str = Field(default="User registered successfully")
    user: UserResponse


class TokenResponse(BaseModel):
    """Bearer token returned by POST /login."""
    token: str = Field(description="Signed bearer token; send as `Authorization: Bearer <token>`")
    token_type: str = Field(default="bearer")
    expires_at: datetime = Field(description="Absolute expiry (UTC)")
