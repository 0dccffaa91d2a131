"""
NoteVault Backend — Token Issuer / Verifier
=============================================

What:  Signs and validates time-bounded bearer tokens carrying a user ID.
How:   PyJWT with an HMAC algorithm and a server-held secret. Claims:
           sub  user ID (string form of the UUID)
           iat  issued-at (seconds since epoch)
           exp  absolute expiry, `iat` + ACCESS_TOKEN_EXPIRE_MINUTES
Who:   AuthService issues tokens at login; the auth gate verifies them.

Tokens are stateless: nothing is stored server-side, and a token stays
valid until `exp` (no refresh, no revocation).
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from notevault.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The verified identity the auth gate attaches to a request."""
    user_id: uuid.UUID


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


class TokenService:
    """
    Issues and verifies signed access tokens.

    Args:
        secret:      HMAC signing key
        algorithm:   HS256, HS384 or HS512
        expires_in:  token lifetime from issuance
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=1),
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, user_id: uuid.UUID, now: Optional[datetime] = None) -> IssuedToken:
        """
        Create a signed token for `user_id`.

        `now` overrides the issuance time; the expiry is always
        `now + expires_in`.
        """
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + self.expires_in
        payload = {
            "sub": str(user_id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self.algorithm)
        logger.debug("Issued access token for user %s (expires %s)", user_id, expires_at.isoformat())
        return IssuedToken(token=token, expires_at=expires_at)

    def verify(self, token: str) -> Identity:
        """
        Validate signature, expiry and subject of `token`.

        Raises:
            InvalidTokenError: expired, bad signature, malformed, or no usable `sub`
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise InvalidTokenError(message="Token has expired", context={"reason": "expired"})
        except jwt.InvalidTokenError as e:
            logger.info("Rejected invalid token: %s", type(e).__name__)
            raise InvalidTokenError(context={"reason": type(e).__name__})

        try:
            user_id = uuid.UUID(payload["sub"])
        except (TypeError, ValueError):
            logger.info("Rejected token with unusable subject")
            raise InvalidTokenError(context={"reason": "bad_subject"})

        return Identity(user_id=user_id)
