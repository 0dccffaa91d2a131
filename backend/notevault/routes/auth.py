"""
NoteVault Backend — Authentication Route Handlers
===================================================

What:  POST /register and POST /login. Both are public (no auth gate).
How:   Validate the body, delegate to AuthService, shape the response.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.database import get_db_session
from notevault.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)
from notevault.schemas.common import ErrorResponse
from notevault.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


@router.post(
    "/register",
    status_code=201,
    response_model=RegisterResponse,
    responses={
        201: {"description": "User registered", "model": RegisterResponse},
        400: {"description": "Email or username already registered", "model": ErrorResponse},
        500: {"description": "Storage fault", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """
    Create an account. The response never includes the password or its hash.
    """
    user = await auth.register(
        db,
        username=body.username,
        email=body.email,
        password=body.password,
    )
    return RegisterResponse(user=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        200: {"description": "Signed bearer token", "model": TokenResponse},
        400: {"description": "Invalid email or password", "model": ErrorResponse},
        500: {"description": "Storage fault", "model": ErrorResponse},
    },
    summary="Log in and receive a bearer token",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Exchange email and password for a token valid for one hour.

    Send it on protected routes as `Authorization: Bearer <token>`.
    """
    issued = await auth.login(db, email=body.email, password=body.password)
    return TokenResponse(token=issued.token, expires_at=issued.expires_at)
