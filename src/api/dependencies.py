import os
from functools import lru_cache

from fastapi import Depends, HTTPException

from adapter.events.redis_event_publisher import RedisEventPublisher
from adapter.mongodb.connection import get_users_database
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.security.hmac_hasher import HmacPasswordHasher
from port.event_publisher import EventPublisher
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository
from services.user_service import UserService

SECRET_KEY = os.getenv("SECRET_KEY")


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    db = get_users_database()
    if db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return db


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


@lru_cache
def get_event_publisher() -> EventPublisher:
    # Single instance so the Redis connection cache survives across requests
    return RedisEventPublisher()


def get_password_hasher() -> PasswordHasher:
    if not SECRET_KEY:
        raise HTTPException(status_code=503, detail="Password hashing not configured")
    return HmacPasswordHasher(SECRET_KEY)


def get_user_service(
    repo: UserRepository = Depends(get_user_repo),
    publisher: EventPublisher = Depends(get_event_publisher),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(repo, publisher, hasher)
