"""HMAC-SHA256 implementation of PasswordHasher."""

import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)


def keyed_hash(secret_key: str, plaintext: str) -> str:
    """Return the hex HMAC-SHA256 digest of ``plaintext`` keyed with ``secret_key``."""
    digest = hmac.new(secret_key.encode('utf-8'), plaintext.encode('utf-8'), hashlib.sha256)
    return digest.hexdigest()


class HmacPasswordHasher:
    def __init__(self, secret_key: str):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key

    def hash(self, plaintext: str) -> str:
        logger.debug("Hashing password")
        return keyed_hash(self._secret_key, plaintext)
