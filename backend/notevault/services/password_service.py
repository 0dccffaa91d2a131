"""
NoteVault Backend — Password Hasher
=====================================

What:  One-way salted password hashing and verification.
How:   pwdlib's bcrypt hasher with a configurable cost factor. Every call to
       `hash()` draws a fresh random salt, which bcrypt embeds in its output;
       `verify()` reads the salt back out of the stored hash.
Who:   AuthService (registration and login).

Verification takes `(plaintext, hashed)` and knows nothing about the User
model. Both operations are CPU-bound; async callers run them in
a worker thread (see AuthService).
"""

import logging

from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError
from pwdlib.hashers.bcrypt import BcryptHasher

from notevault.exceptions import ValidationError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """
    bcrypt password hasher with a fixed cost factor.

    Args:
        rounds: bcrypt cost factor (log2 iterations), 4-31. Default 10.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._hasher = PasswordHash((BcryptHasher(rounds=rounds),))
        # Verified against when the login email is unknown, so both failure
        # paths cost one bcrypt computation.
        self.dummy_hash = self._hasher.hash("notevault-timing-equalizer")

    def hash(self, plaintext: str) -> str:
        """
        Hash a plaintext password.

        Raises:
            ValidationError: empty password or longer than 72 bytes (UTF-8)
        """
        if not plaintext:
            raise ValidationError(message="Password must not be empty", field="password")
        if len(plaintext.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationError(
                message=f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes",
                field="password",
            )
        return self._hasher.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        """
        Check a plaintext password against a stored hash.

        Returns False on mismatch and on empty, unrecognized or malformed
        input. Never raises.
        """
        if not plaintext or not hashed:
            return False
        try:
            return self._hasher.verify(plaintext, hashed)
        except (UnknownHashError, ValueError) as e:
            logger.warning("Password verification rejected malformed input: %s", type(e).__name__)
            return False
