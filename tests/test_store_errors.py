"""
Tests for SQLSTATE classification and its mapping onto the error taxonomy.
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError, TimeoutError

from auth.errors import (
    ConflictError,
    ConstraintViolationError,
    InternalError,
    ServiceUnavailableError,
    from_store_error,
)
from database.errors import StoreErrorKind, classify_store_error, store_error_detail


class _PgError(Exception):
    """Stand-in for a driver exception carrying a SQLSTATE."""

    def __init__(self, sqlstate, detail=None):
        super().__init__(f"pg error {sqlstate}")
        self.sqlstate = sqlstate
        self.detail = detail


def _wrapped(cls, sqlstate, detail=None):
    return cls("INSERT ...", {}, _PgError(sqlstate, detail))


class TestClassify:
    @pytest.mark.parametrize(
        "sqlstate, kind",
        [
            ("23505", StoreErrorKind.UNIQUE_VIOLATION),
            ("23503", StoreErrorKind.FOREIGN_KEY_VIOLATION),
            ("23502", StoreErrorKind.NOT_NULL_VIOLATION),
            ("23514", StoreErrorKind.CONSTRAINT_VIOLATION),
            ("42P01", StoreErrorKind.SYNTAX_ERROR),
            ("08006", StoreErrorKind.CONNECTION),
            ("XX000", StoreErrorKind.GENERIC),
        ],
    )
    def test_postgres_sqlstate(self, sqlstate, kind):
        assert classify_store_error(_wrapped(IntegrityError, sqlstate)) is kind

    def test_sqlite_messages(self):
        exc = IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed: auth_users.email"))
        assert classify_store_error(exc) is StoreErrorKind.UNIQUE_VIOLATION

    @pytest.mark.parametrize(
        "exc",
        [
            ConnectionRefusedError(),
            TimeoutError(),
            OperationalError("SELECT 1", {}, ConnectionRefusedError("refused")),
        ],
    )
    def test_connection_failures(self, exc):
        assert classify_store_error(exc) is StoreErrorKind.CONNECTION

    def test_generic(self):
        assert classify_store_error(RuntimeError("boom")) is StoreErrorKind.GENERIC

    def test_detail_prefers_driver_detail(self):
        exc = _wrapped(IntegrityError, "23505", "Key (email)=(a@b.com) already exists.")
        assert store_error_detail(exc) == "Key (email)=(a@b.com) already exists."


class TestFromStoreError:
    def test_unique_during_signup_is_email_conflict(self):
        err = from_store_error(_wrapped(IntegrityError, "23505"), email="a@b.com")
        assert isinstance(err, ConflictError)
        assert err.code == "EMAIL_ALREADY_EXISTS"
        assert err.meta == {"email": "a@b.com"}

    def test_unique_without_email_is_duplicate_entry(self):
        err = from_store_error(_wrapped(IntegrityError, "23505"))
        assert err.code == "DUPLICATE_ENTRY"
        assert err.status_code == 409

    @pytest.mark.parametrize(
        "sqlstate, code",
        [
            ("23503", "FOREIGN_KEY_VIOLATION"),
            ("23502", "NOT_NULL_VIOLATION"),
            ("23514", "DATABASE_VALIDATION_ERROR"),
        ],
    )
    def test_constraint_classes(self, sqlstate, code):
        err = from_store_error(_wrapped(IntegrityError, sqlstate))
        assert isinstance(err, ConstraintViolationError)
        assert err.code == code
        assert err.status_code == 400

    def test_connection_is_retryable_503(self):
        err = from_store_error(TimeoutError())
        assert isinstance(err, ServiceUnavailableError)
        assert err.retryable is True
        assert err.status_code == 503

    def test_syntax_error_is_internal(self):
        err = from_store_error(_wrapped(ProgrammingError, "42601"))
        assert isinstance(err, InternalError)
        assert err.code == "DATABASE_SYNTAX_ERROR"

    def test_details_only_rendered_in_debug(self):
        err = from_store_error(RuntimeError("driver exploded"))
        assert err.code == "INTERNAL_SERVER_ERROR"
        assert "details" not in err.to_dict()
        assert err.to_dict(debug=True)["details"]["message"] == "driver exploded"
