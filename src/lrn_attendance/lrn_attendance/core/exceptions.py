class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StudentNotFound(DomainError):
    """Raised when no student matches an LRN or id."""


class AlreadyScanned(DomainError):
    """Raised when the student already has an attendance record today."""


class SetupIncomplete(DomainError):
    """Raised when a required table or function has not been created yet."""


class ConflictError(DomainError):
    """Raised when a write collides with an existing unique value (e.g. LRN)."""


class UnknownProvider(DomainError):
    """Raised when no notification transport is registered for a provider name."""


class StorageError(Exception):
    """Base exception for failures reported by the storage backend."""


class SchemaObjectMissing(StorageError):
    """The table or function a statement depends on does not exist."""


class UniqueViolation(StorageError):
    """An insert/update hit a unique key."""
