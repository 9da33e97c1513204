"""Domain error taxonomy and storage error classification."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.exc import DBAPIError, IntegrityError, NoResultFound, SQLAlchemyError

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

# Raised by drivers without SQLAlchemy wrapping them, e.g. aiosqlite for an
# integer outside the 64-bit range
STORAGE_EXCEPTIONS: tuple[type[Exception], ...] = (SQLAlchemyError, OverflowError)


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class DomainError(Exception):
    """Base exception for all errors surfaced by the service layer."""

    code = "internal_error"
    default_message = "internal error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidInputError(DomainError):
    """One or more fields failed structural or existence validation."""

    code = "invalid_input"
    default_message = "one or more fields are invalid"

    def __init__(self, field_errors: Iterable[FieldError], message: str | None = None):
        self.field_errors: list[FieldError] = list(field_errors)
        super().__init__(message)

    @classmethod
    def single(cls, field: str, message: str) -> InvalidInputError:
        return cls([FieldError(field, message)])

    @property
    def fields(self) -> list[str]:
        return [fe.field for fe in self.field_errors]


class NotFoundError(DomainError):
    """A lookup by id found no matching row."""

    code = "not_found"
    default_message = "not found"


class AlreadyExistsError(DomainError):
    """A uniqueness constraint rejected a create."""

    code = "already_exists"
    default_message = "already exists"


class ConflictError(DomainError):
    """A foreign-key constraint rejected a write."""

    code = "conflict"
    default_message = "conflict"


class StorageError(DomainError):
    """Any other storage or infrastructure failure. Opaque to API callers."""


def raise_if_any(field_errors: list[FieldError]) -> None:
    """Raise an aggregated InvalidInputError when any field errors were collected."""
    if field_errors:
        raise InvalidInputError(field_errors)


def classify_storage_error(exc: BaseException) -> DomainError:
    """
    Translate a SQLAlchemy/driver exception into the domain taxonomy.

    Domain errors are returned unchanged so classification can be applied at
    more than one boundary without losing the original kind.
    """
    if isinstance(exc, DomainError):
        return exc
    if isinstance(exc, NoResultFound):
        return NotFoundError()
    if isinstance(exc, IntegrityError):
        code = _sqlstate(exc)
        text = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
        if code == UNIQUE_VIOLATION or "unique constraint failed" in text:
            return AlreadyExistsError()
        if code == FOREIGN_KEY_VIOLATION or "foreign key constraint failed" in text:
            return ConflictError()
    if isinstance(exc, SQLAlchemyError):
        return StorageError(f"storage failure: {exc}")
    return StorageError(f"unexpected failure: {exc!r}")


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    if orig is None:
        return None
    # asyncpg adapter exposes both, psycopg exposes sqlstate
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
