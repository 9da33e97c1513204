"""Unit tests for the error taxonomy and storage error classification."""

import pytest
from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError

from hoopstats.errors import (
    AlreadyExistsError,
    ConflictError,
    FieldError,
    InvalidInputError,
    NotFoundError,
    StorageError,
    classify_storage_error,
    raise_if_any,
)


class _DriverError(Exception):
    """Mimics a driver exception exposing a PostgreSQL SQLSTATE."""

    def __init__(self, message: str, sqlstate: str | None = None):
        super().__init__(message)
        self.sqlstate = sqlstate


def _integrity(message: str, sqlstate: str | None = None) -> IntegrityError:
    return IntegrityError("INSERT INTO teams ...", {}, _DriverError(message, sqlstate))


class TestTaxonomy:
    @pytest.mark.parametrize(
        "error,code",
        [
            (InvalidInputError([]), "invalid_input"),
            (NotFoundError(), "not_found"),
            (AlreadyExistsError(), "already_exists"),
            (ConflictError(), "conflict"),
            (StorageError(), "internal_error"),
        ],
    )
    def test_codes(self, error, code):
        assert error.code == code

    def test_default_and_custom_messages(self):
        assert NotFoundError().message == "not found"
        assert NotFoundError("team 3 not found").message == "team 3 not found"
        assert str(NotFoundError("team 3 not found")) == "team 3 not found"

    def test_invalid_input_carries_all_field_errors(self):
        error = InvalidInputError(
            [FieldError("name", "must not be empty"), FieldError("position", "bad")]
        )

        assert error.fields == ["name", "position"]
        assert error.message == "one or more fields are invalid"

    def test_single(self):
        error = InvalidInputError.single("query", "conflicting parameters")

        assert error.field_errors == [FieldError("query", "conflicting parameters")]

    def test_field_error_to_dict(self):
        assert FieldError("id", "must be > 0").to_dict() == {"field": "id", "message": "must be > 0"}

    def test_raise_if_any(self):
        raise_if_any([])
        with pytest.raises(InvalidInputError):
            raise_if_any([FieldError("id", "must be > 0")])


class TestClassifyStorageError:
    def test_postgres_unique_violation(self):
        error = classify_storage_error(_integrity("duplicate key value", sqlstate="23505"))

        assert isinstance(error, AlreadyExistsError)

    def test_postgres_foreign_key_violation(self):
        error = classify_storage_error(_integrity("violates foreign key", sqlstate="23503"))

        assert isinstance(error, ConflictError)

    def test_sqlite_unique_violation(self):
        error = classify_storage_error(_integrity("UNIQUE constraint failed: teams.name"))

        assert isinstance(error, AlreadyExistsError)

    def test_sqlite_foreign_key_violation(self):
        error = classify_storage_error(_integrity("FOREIGN KEY constraint failed"))

        assert isinstance(error, ConflictError)

    def test_other_integrity_error_is_internal(self):
        error = classify_storage_error(_integrity("NOT NULL constraint failed: teams.name"))

        assert isinstance(error, StorageError)

    def test_no_result_is_not_found(self):
        assert isinstance(classify_storage_error(NoResultFound()), NotFoundError)

    def test_operational_error_is_internal(self):
        exc = OperationalError("SELECT 1", {}, _DriverError("connection refused"))

        assert isinstance(classify_storage_error(exc), StorageError)

    def test_unknown_exception_is_internal(self):
        assert isinstance(classify_storage_error(ValueError("boom")), StorageError)

    def test_domain_errors_pass_through_unchanged(self):
        original = ConflictError("race")

        assert classify_storage_error(original) is original
