"""
NoteVault Backend — Authentication Service
============================================

What:  Registration and login: the only paths that touch the credential store.
How:   Composes PasswordHasher (hash/verify) and TokenService (issue) with
       owner-agnostic queries on the `users` table.
Who:   Called by the /register and /login route handlers.

Registration Flow:
    lookup email ──▶ hash password ──▶ INSERT user ──▶ ack
        │ exists                          │ unique violation (race)
        ▼                                 ▼
    DuplicateCredentialError        DuplicateCredentialError

Login Flow:
    lookup email ──▶ verify password ──▶ issue token
        │ absent          │ mismatch
        ▼                 ▼
    InvalidCredentialsError (identical for both causes; logs differ)
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from notevault.exceptions import (
    DuplicateCredentialError,
    InvalidCredentialsError,
    StorageFaultError,
)
from notevault.models.user import User
from notevault.services.password_service import PasswordHasher
from notevault.services.token_service import IssuedToken, TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """
    Registration and login.

    The password is hashed exactly once, here in `register()`; the User
    model has no hashing hook. Hashing and verification run in Starlette's
    threadpool so a slow bcrypt call never blocks the event loop.
    """

    def __init__(self, hasher: PasswordHasher, tokens: TokenService):
        self.hasher = hasher
        self.tokens = tokens

    async def register(
        self,
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
    ) -> User:
        """
        Create a new user.

        Args:
            db:       Async database session
            username: Display name (unique)
            email:    Normalized email (unique, login key)
            password: Plaintext password; hashed before it reaches the model

        Returns:
            The persisted User.

        Raises:
            DuplicateCredentialError: email or username already registered
            ValidationError: password rejected by the hasher
            StorageFaultError: database failure
        """
        try:
            result = await db.execute(select(User.id).where(User.email == email))
            email_taken = result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error("Database error checking email uniqueness: %s", type(e).__name__)
            raise StorageFaultError(context={"operation": "register", "error_type": type(e).__name__})

        if email_taken:
            logger.info("Registration rejected: email already registered")
            raise DuplicateCredentialError(context={"field": "email"})

        password_hash = await run_in_threadpool(self.hasher.hash, password)

        user = User(
            id=uuid.uuid4(),
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            # A concurrent registration won the unique constraint on email or username.
            await db.rollback()
            logger.info("Registration rejected by unique constraint")
            raise DuplicateCredentialError(context={"field": "email_or_username"})
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error creating user: %s", type(e).__name__)
            raise StorageFaultError(context={"operation": "register", "error_type": type(e).__name__})

        logger.info("Registered user %s", user.id)
        return user

    async def login(self, db: AsyncSession, email: str, password: str) -> IssuedToken:
        """
        Exchange email + password for a signed access token.

        Raises:
            InvalidCredentialsError: unknown email or wrong password
            StorageFaultError: database failure
        """
        try:
            result = await db.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user for login: %s", type(e).__name__)
            raise StorageFaultError(context={"operation": "login", "error_type": type(e).__name__})

        if user is None:
            await run_in_threadpool(self.hasher.verify, password, self.hasher.dummy_hash)
            logger.warning("Login failed: no account for the supplied email")
            raise InvalidCredentialsError(context={"reason": "unknown_email"})

        if not await run_in_threadpool(self.hasher.verify, password, user.password_hash):
            logger.warning("Login failed: wrong password for user %s", user.id)
            raise InvalidCredentialsError(context={"reason": "wrong_password"})

        issued = self.tokens.issue(user.id)
        logger.info("User %s logged in", user.id)
        return issued
