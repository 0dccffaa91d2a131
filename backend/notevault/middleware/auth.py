"""
NoteVault Backend — Auth Gate
===============================

What:  Verifies the bearer token on protected routes and injects the
       verified identity into the request.
How:   A FastAPI dependency built on `HTTPBearer(auto_error=False)`, so a
       missing token and a bad token can be reported separately:

           no `Authorization: Bearer <token>`  → UnauthenticatedError (401)
           token fails verification            → InvalidTokenError (401)
           token valid                         → Identity(user_id)

       Routers that need authentication declare
       `dependencies=[Depends(require_identity)]` or take
       `identity: Identity = Depends(require_identity)`, so the handler never
       runs for a rejected request.

The gate trusts the signature only; it never queries the users table.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notevault.exceptions import UnauthenticatedError
from notevault.services.token_service import Identity, TokenService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="Access token from POST /login")


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def require_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """
    Resolve the requester's identity from the bearer token.

    The identity is also stored on `request.state.identity` for middleware
    and handlers that read request state.

    Raises:
        UnauthenticatedError: no bearer token on the request
        InvalidTokenError: token expired, malformed, or wrongly signed
    """
    if credentials is None or not credentials.credentials:
        logger.debug("Rejected %s %s: no bearer token", request.method, request.url.path)
        raise UnauthenticatedError()

    identity = tokens.verify(credentials.credentials)
    request.state.identity = identity
    return identity
