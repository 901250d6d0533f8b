"""Port definition for PasswordHasher."""

from typing import Protocol


class PasswordHasher(Protocol):
    def hash(self, plaintext: str) -> str: ...
