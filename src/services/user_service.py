"""User service: create, list, update and delete users.

Flow for every mutation: validate → persist → notify → respond.
Persistence is authoritative; the change notification is best-effort and
never alters the outcome returned to the caller.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

from domain.model.errors import (
    InternalError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from domain.model.user import (
    CreateUserRequest,
    DeleteUserRequest,
    GetUsersRequest,
    ServiceStatus,
    UpdateUserRequest,
    UserChanges,
    UserPage,
    UserProfile,
    is_valid_country,
)
from port.event_publisher import EventPublisher
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

INVALID_COUNTRY_MESSAGE = "Received country is not valid"
STATUS_UP = "UP"


class UserService:
    def __init__(
        self,
        repo: UserRepository,
        publisher: EventPublisher,
        hasher: PasswordHasher,
    ):
        self.repo = repo
        self.publisher = publisher
        self.hasher = hasher

    @staticmethod
    def get_status() -> ServiceStatus:
        """Liveness probe. Touches no collaborator and always succeeds."""
        return ServiceStatus(status=STATUS_UP, message="User service up and running")

    def create_user(self, request: CreateUserRequest) -> UserProfile:
        """Create a user and announce it.

        Raises:
            ValidationError: country is missing or the UNKNOWN sentinel
            InternalError: the repository failed to store the user
        """
        logger.info("Starting create user", extra={"firstName": request.first_name})
        if not is_valid_country(request.country):
            logger.info(INVALID_COUNTRY_MESSAGE, extra={"country": str(request.country)})
            raise ValidationError(INVALID_COUNTRY_MESSAGE)

        password_hash = self.hasher.hash(request.password)
        try:
            user = self.repo.create(
                first_name=request.first_name,
                last_name=request.last_name,
                nickname=request.nickname,
                email=request.email,
                password_hash=password_hash,
                country=request.country,
            )
        except StorageError as e:
            logger.error("Failed to create user", extra={"error": str(e)})
            raise InternalError(str(e)) from e

        self._notify("Created user " + user.id)
        logger.info("User created", extra={"userId": user.id})
        return user.to_profile()

    def get_users(self, request: GetUsersRequest) -> UserPage:
        """Return one page of users, optionally filtered by country.

        Raises:
            InternalError: the repository failed to read users
        """
        logger.info("Starting get paginated users", extra={
            "page": request.page,
            "pageSize": request.page_size,
            "filterCountry": request.filter_country.value if request.filter_country else None,
        })
        try:
            users = self.repo.find_paginated(
                filter_country=request.filter_country,
                skip=request.page,
                limit=request.page_size,
            )
        except StorageError as e:
            logger.error("Failed to retrieve paginated users", extra={"error": str(e)})
            raise InternalError(str(e)) from e

        results = [user.to_profile() for user in users]
        logger.info("Completed get paginated users", extra={"count": len(results)})
        return UserPage(
            results=results,
            page=request.page,
            page_size=request.page_size,
            total_count=len(results),
        )

    def update_user(self, request: UpdateUserRequest) -> None:
        """Apply a partial update to a user and announce it.

        Raises:
            ValidationError: country supplied as the UNKNOWN sentinel
            InternalError: the user does not exist or the repository failed
        """
        logger.info("Starting update user", extra={"userId": request.id})
        if request.country is not None and not is_valid_country(request.country):
            logger.info(INVALID_COUNTRY_MESSAGE, extra={"country": str(request.country)})
            raise ValidationError(INVALID_COUNTRY_MESSAGE)

        changes = self._build_changes(request)
        try:
            user = self.repo.update(request.id, changes)
        except StorageError as e:
            logger.error("Failed to update user", extra={"userId": request.id, "error": str(e)})
            raise InternalError(str(e)) from e

        self._notify("Updated user " + user.id)
        logger.info("User updated", extra={"userId": user.id})

    def delete_user(self, request: DeleteUserRequest) -> None:
        """Delete a user and announce it.

        Raises:
            NotFoundError: nothing was deleted, whatever the repository reported
        """
        logger.info("Starting delete user", extra={"userId": request.id})
        try:
            deleted = self.repo.delete(request.id)
        except StorageError as e:
            logger.error("Failed to delete user", extra={"userId": request.id, "error": str(e)})
            deleted = 0

        if deleted == 0:
            raise NotFoundError(f"user {request.id} not found")

        self._notify("Deleted user " + request.id)
        logger.info("User deleted", extra={"userId": request.id})

    # ── helpers ──────────────────────────────────────────────

    def _build_changes(self, request: UpdateUserRequest) -> UserChanges:
        password_hash = None
        if request.password is not None:
            password_hash = self.hasher.hash(request.password)

        return UserChanges(
            first_name=request.first_name,
            last_name=request.last_name,
            nickname=request.nickname,
            email=request.email,
            password_hash=password_hash,
            country=request.country,
        )

    def _notify(self, message: str) -> None:
        """Publish a change event. Failures are logged and never propagated."""
        try:
            delivered = self.publisher.publish(message)
        except Exception:
            logger.warning("Event publisher raised", extra={"eventMessage": message}, exc_info=True)
            return

        if not delivered:
            logger.warning("Failed to publish event", extra={"eventMessage": message})
