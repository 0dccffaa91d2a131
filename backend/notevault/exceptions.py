"""
NoteVault Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for every failure the API can report.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) translate them
       into structured JSON responses with the right HTTP status code.
Who:   Raised by services and the auth gate; caught by the global handlers.

Exception Hierarchy:
    NoteVaultError (base)
    ├── ValidationError              → 400 Bad Request
    ├── DuplicateCredentialError     → 400 Bad Request
    ├── InvalidCredentialsError      → 400 Bad Request
    ├── UnauthenticatedError         → 401 Unauthorized (no bearer token)
    ├── InvalidTokenError            → 401 Unauthorized (bad/expired token)
    ├── NotFoundOrUnauthorizedError  → 404 Not Found
    └── StorageFaultError            → 500 Internal Server Error

The `context` dict is logged server-side and is never part of a response
body for authentication or storage errors.
"""

from typing import Any, Dict, Optional


class NoteVaultError(Exception):
    """
    Base exception for all NoteVault application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned for sensitive errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NoteVaultError):
    """
    Raised when client input fails a business rule that schema validation
    cannot express (e.g. a password longer than bcrypt's 72-byte limit).

    HTTP: 400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DuplicateCredentialError(NoteVaultError):
    """
    Raised when registration collides with an existing email or username.

    Raised both by the pre-insert lookup and when the storage layer's unique
    constraint rejects a concurrent insert.

    HTTP: 400 Bad Request
    """

    def __init__(
        self,
        message: str = "A user with this email or username already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(NoteVaultError):
    """
    Raised when login fails, whether the email is unknown or the password is
    wrong. Callers cannot tell the two apart; `context["reason"]` records the
    real cause for server logs.

    HTTP: 400 Bad Request
    """

    def __init__(
        self,
        message: str = "Invalid email or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthenticatedError(NoteVaultError):
    """
    Raised by the auth gate when a protected request carries no bearer token.

    HTTP: 401 Unauthorized (with `WWW-Authenticate: Bearer`)
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidTokenError(NoteVaultError):
    """
    Raised when a bearer token is malformed, has a bad signature, is expired,
    or does not carry a usable subject.

    HTTP: 401 Unauthorized (with `WWW-Authenticate: Bearer`)
    """

    def __init__(
        self,
        message: str = "Invalid or expired token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundOrUnauthorizedError(NoteVaultError):
    """
    Raised when a note lookup scoped to the requester matches nothing.

    "Does not exist" and "belongs to someone else" produce the same error so
    that note IDs of other users cannot be probed.

    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageFaultError(NoteVaultError):
    """
    Raised when a database operation fails unexpectedly.

    The client always receives a generic message; the underlying error type
    and identifiers are logged server-side only.

    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
