"""Password hashing with bcrypt."""

import logging

import bcrypt

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Hash and verify passwords; every hash carries its own salt."""

    def __init__(self, rounds: int = 12) -> None:
        """Initialize hasher.

        Args:
            rounds: bcrypt work factor
        """
        self._rounds = rounds

    def hash_password(self, password: str) -> str:
        """Hash a password.

        Raises:
            ValueError: If the password is empty or whitespace
        """
        if not password or not password.strip():
            raise ValueError("Password must not be empty")

        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, hashed_password: str) -> bool:
        """Check a password against a stored hash; malformed hashes never match."""
        if not password or not password.strip() or not hashed_password or not hashed_password.strip():
            return False

        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False
