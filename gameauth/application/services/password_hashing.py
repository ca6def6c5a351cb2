"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from gameauth.domain.users.exceptions import HashingError
from gameauth.domain.users.repositories import PasswordHasher
from gameauth.shared.logging import logger


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted, work-factor hashing backed by ``werkzeug.security``.

    Stored hashes carry their own method and salt (``method$salt$digest``), so
    changing ``method`` only affects newly created hashes.
    """

    def __init__(self, method: str = "scrypt", salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        try:
            return str(
                generate_password_hash(
                    password, method=self._method, salt_length=self._salt_length
                )
            )
        except (ValueError, OSError, MemoryError) as exc:
            logger.error(f"password_hashing: {type(exc).__name__} using method={self._method}")
            raise HashingError() from exc

    def verify(self, password: str, hashed: str) -> bool:
        # check_password_hash compares digests with hmac.compare_digest.
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError, AttributeError):
            return False
