from typing import Protocol

from domain.model.user import Country, User, UserChanges


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations raise StorageError when the store rejects an operation.
    """
    def create(
        self,
        first_name: str,
        last_name: str,
        nickname: str,
        email: str,
        password_hash: str,
        country: Country,
    ) -> User:
        """Create a new user, assigning its id and both timestamps."""
        ...

    def find_paginated(
        self,
        filter_country: Country | None,
        skip: int,
        limit: int,
    ) -> list[User]:
        """Return up to ``limit`` users after skipping ``skip``, in a stable order."""
        ...

    def update(self, user_id: str, changes: UserChanges) -> User:
        """Apply the set fields of ``changes``, refresh updated_at, return the merged user."""
        ...

    def delete(self, user_id: str) -> int:
        """Delete a user. Return the number of removed documents."""
        ...
