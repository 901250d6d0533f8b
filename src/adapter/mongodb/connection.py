import os
import logging
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'users_service')
USERS_COLLECTION_NAME = 'users'

_client = None
_connected_once = False
_misconfigured = False


def get_mongodb_client() -> MongoClient | None:
    """Return a pinged MongoClient, or None while the store is unreachable.

    A healthy cached client is reused. A client that stops answering pings is
    replaced on the next call. A missing MONGO_URL or a failed first connect is
    treated as configuration and is not retried.
    """
    global _client, _connected_once, _misconfigured

    if _client is not None:
        try:
            _client.admin.command('ping')
            return _client
        except PyMongoError as e:
            logger.warning("MongoDB ping failed, reconnecting", extra={"error": str(e)[:200]})
            _client = None

    if _misconfigured:
        return None

    if not MONGO_URL:
        logger.error("MONGO_URL not configured")
        _misconfigured = True
        return None

    try:
        client = MongoClient(
            MONGO_URL,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
            maxPoolSize=10,
            retryWrites=True,
            retryReads=True,
            uuidRepresentation='standard',
        )
        client.admin.command('ping')
    except PyMongoError as e:
        if not _connected_once:
            logger.error("Initial MongoDB connection failed", extra={"error": str(e)[:200]})
            _misconfigured = True
        else:
            logger.warning("MongoDB reconnection failed", extra={"error": str(e)[:200]})
        return None

    if not _connected_once:
        logger.info("Connected to MongoDB", extra={"database": DATABASE_NAME})
    _connected_once = True
    _client = client
    return client


def get_users_database() -> Database | None:
    """Database holding the users collection, or None if MongoDB is unreachable."""
    client = get_mongodb_client()
    if client is None:
        return None
    return client[DATABASE_NAME]
