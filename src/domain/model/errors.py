"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class InternalError(DomainError):
    """The persistence layer failed while serving the request."""


class StorageError(DomainError):
    """Raised by repositories when the underlying store rejects an operation."""
