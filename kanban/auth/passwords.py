"""Password hashing capability, consumed by the services through the PasswordHasher protocol."""

import secrets
from typing import Protocol

import bcrypt

from kanban.core.config import Settings


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str:
        """One-way hash of a clear password."""
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time check of a clear password against a stored hash."""
        ...

    def random_token(self, n_chars: int = 22) -> str:
        """Unguessable hexadecimal string of n_chars characters."""
        ...


class BcryptPasswordHasher:
    """bcrypt hashes + a CSPRNG for random codes."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    @classmethod
    def from_settings(cls, settings: Settings) -> "BcryptPasswordHasher":
        return cls(rounds=settings.bcrypt_rounds)

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash (or the password is too long for bcrypt).
            return False

    def random_token(self, n_chars: int = 22) -> str:
        return secrets.token_hex(n_chars // 2)
