"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace

from domain.model.errors import StorageError
from domain.model.user import Country, User, UserChanges, now_timestamp


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        first_name: str,
        last_name: str,
        nickname: str,
        email: str,
        password_hash: str,
        country: Country,
    ) -> User:
        user_id = str(uuid.uuid4())
        now = now_timestamp()

        user = User(
            id=user_id,
            first_name=first_name,
            last_name=last_name,
            nickname=nickname,
            email=email,
            password_hash=password_hash,
            country=country,
            created_at=now,
            updated_at=now,
        )
        self.store[user_id] = user
        return replace(user)

    def update(self, user_id: str, changes: UserChanges) -> User:
        user = self.store.get(user_id)
        if not user:
            raise StorageError(f"user {user_id} not found")

        for name, value in changes.set_fields().items():
            setattr(user, name, value)
        user.updated_at = now_timestamp()
        return replace(user)

    def delete(self, user_id: str) -> int:
        if user_id in self.store:
            del self.store[user_id]
            return 1
        return 0

    # ── read operations ──────────────────────────────────────

    def find_paginated(
        self,
        filter_country: Country | None,
        skip: int,
        limit: int,
    ) -> list[User]:
        if skip < 0 or limit < 0:
            raise StorageError("skip and limit must be non-negative")

        results = list(self.store.values())
        if filter_country is not None:
            results = [u for u in results if u.country == filter_country]

        # limit=0 means no limit, as with MongoDB
        end = skip + limit if limit else None
        return [replace(u) for u in results[skip:end]]

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None
