"""Shared error taxonomy.

Domain modules subclass these so the API layer can translate any
failure by its *kind* (not by message text) into an HTTP response.

- ``DomainError``: recoverable outcomes a caller is expected to branch on.
- ``StorageFailure``: unrecoverable failures surfaced by a storage adapter.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for business-rule outcomes raised by the Service Layer."""

    code = "DOMAIN_ERROR"


class NotFound(DomainError):
    """The operation targets an entity that does not exist."""

    code = "NOT_FOUND"


class Conflict(DomainError):
    """The operation would violate a uniqueness rule."""

    code = "CONFLICT"


class InvalidArgument(DomainError):
    """An argument is well-typed but semantically unusable."""

    code = "INVALID_ARGUMENT"


class StorageFailure(Exception):
    """A storage adapter failed (connection loss, timeout, constraint).

    Never retried by the core; the original driver exception is chained
    as ``__cause__``.
    """

    code = "STORAGE_FAILURE"


class DuplicateKeyError(StorageFailure):
    """A storage-level unique constraint rejected a write."""

    code = "DUPLICATE_KEY"

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"Duplicate value {value!r} for unique field {field!r}.")
        self.field = field
        self.value = value
