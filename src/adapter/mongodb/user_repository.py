"""MongoDB implementation of UserRepository."""

import uuid
from logging import getLogger

from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import StorageError
from domain.model.user import Country, User, UserChanges, now_timestamp

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        try:
            self.collection.create_index([('country', ASCENDING)], name='idx_users_country')
            self.collection.create_index(
                [('created_at', ASCENDING), ('_id', ASCENDING)], name='idx_users_created_at'
            )
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model.

        Raises:
            StorageError: the document is missing a field or holds an unknown country
        """
        try:
            return User(
                id=doc['_id'],
                first_name=doc['first_name'],
                last_name=doc['last_name'],
                nickname=doc['nickname'],
                email=doc['email'],
                password_hash=doc['password_hash'],
                country=Country(doc['country']),
                created_at=doc['created_at'],
                updated_at=doc['updated_at'],
            )
        except (KeyError, ValueError) as e:
            logger.error("Malformed user document", extra={"userId": doc.get('_id'), "error": repr(e)})
            raise StorageError(f"malformed user document {doc.get('_id')}: {e!r}") from e

    @staticmethod
    def _to_document(changes: UserChanges) -> dict:
        doc = changes.set_fields()
        if 'country' in doc:
            doc['country'] = doc['country'].value
        return doc

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
        """Insert a new user and return it."""
        user_id = str(uuid.uuid4())
        now = now_timestamp()
        user_doc = {
            '_id': user_id,
            'first_name': first_name,
            'last_name': last_name,
            'nickname': nickname,
            'email': email,
            'password_hash': password_hash,
            'country': country.value,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"userId": user_id, "error": str(e)})
            raise StorageError(str(e)) from e

        logger.debug("User document inserted", extra={"userId": user_id})
        return self._to_domain(user_doc)

    def update(self, user_id: str, changes: UserChanges) -> User:
        """Set the supplied fields and updated_at in a single atomic update."""
        update_doc = self._to_document(changes)
        update_doc['updated_at'] = now_timestamp()
        logger.debug("Updating user", extra={"userId": user_id, "fields": sorted(update_doc)})

        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': update_doc},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise StorageError(str(e)) from e

        if doc is None:
            logger.warning("User not found for update", extra={"userId": user_id})
            raise StorageError(f"user {user_id} not found")

        return self._to_domain(doc)

    def delete(self, user_id: str) -> int:
        """Hard delete a user. Return the number of removed documents."""
        try:
            result = self.collection.delete_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to delete user", extra={"userId": user_id, "error": str(e)})
            raise StorageError(str(e)) from e

        if result.deleted_count == 0:
            logger.warning("User not present in the database", extra={"userId": user_id})
        return result.deleted_count

    # ── read operations ──────────────────────────────────────

    def find_paginated(
        self,
        filter_country: Country | None,
        skip: int,
        limit: int,
    ) -> list[User]:
        """Return a page of users, optionally restricted to one country."""
        if skip < 0 or limit < 0:
            raise StorageError("skip and limit must be non-negative")

        query = {}
        if filter_country is not None:
            query['country'] = filter_country.value

        try:
            cursor = (
                self.collection.find(query)
                .sort([('created_at', ASCENDING), ('_id', ASCENDING)])
                .skip(skip)
                .limit(limit)
            )
            docs = list(cursor)
        except PyMongoError as e:
            logger.error("Failed to retrieve paginated users", extra={"error": str(e)})
            raise StorageError(str(e)) from e

        return [self._to_domain(doc) for doc in docs]

    def drop(self) -> None:
        """Remove every user document (development resets only)."""
        self.collection.drop()
