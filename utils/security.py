"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JTI generation for token identifiers
"""
from __future__ import annotations

import uuid

from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

from utils.exceptions import InternalError


class PasswordHasher:
    """One-way salted password hashing.

    The salt and cost parameters are embedded in the encoded hash, so verify()
    only needs the stored hash and the candidate plaintext.
    """

    def __init__(self, time_cost: int | None = None, memory_cost: int | None = None,
                 parallelism: int | None = None):
        params = {
            "time_cost": time_cost,
            "memory_cost": memory_cost,
            "parallelism": parallelism,
        }
        self._ph = Argon2Hasher(**{k: v for k, v in params.items() if v is not None})

    def hash(self, password: str) -> str:
        """Hash a plaintext password using Argon2
        """
        try:
            return self._ph.hash(password)
        except HashingError as exc:
            raise InternalError("Failed to hash password") from exc

    def verify(self, password_hash: str, password: str) -> bool:
        """ Verify a plaintext password against a stored argon2 hash
        """
        try:
            return self._ph.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())
