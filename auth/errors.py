"""
Error taxonomy for the auth core.

Every failure surfaced by signup, login, or the profile operations is an
``AuthError`` subclass carrying a machine-readable ``code``, a short
``error`` title, a human-readable ``message``, the offending ``field`` (if
any) and kind-specific metadata (e.g. ``currentLength`` / ``minLength``).

The HTTP layer maps ``status_code`` straight onto the response and renders
the body with :meth:`AuthError.to_dict`.  ``details`` holds driver/stack
text and is only rendered in debug mode.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from database.errors import StoreErrorKind, classify_store_error, get_sqlstate, store_error_detail


class AuthError(Exception):
    status_code: int = 500
    retryable: bool = False

    def __init__(
        self,
        code: str,
        message: str,
        *,
        error: Optional[str] = None,
        field: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.error = error or message
        self.field = field
        self.meta = meta or {}
        self.details = details

    def to_dict(self, debug: bool = False) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "error": self.error,
            "code": self.code,
            "message": self.message,
        }
        if self.field is not None:
            body["field"] = self.field
        body.update(self.meta)
        if debug and self.details is not None:
            body["details"] = self.details
        return body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, field={self.field!r})"


class ValidationError(AuthError):
    """Client-fixable input problem (400)."""

    status_code = 400


class ConstraintViolationError(ValidationError):
    """Store rejected the row on a foreign-key / not-null / check constraint."""


class ConflictError(AuthError):
    """Resource already exists (409)."""

    status_code = 409


class AuthenticationError(AuthError):
    """Bad credentials, missing account state, or an unusable token (401)."""

    status_code = 401


class NotFoundError(AuthError):
    status_code = 404


class ServiceUnavailableError(AuthError):
    """Store unreachable or connection checkout timed out (503).

    Safe for the caller to retry with backoff; nothing is retried here.
    """

    status_code = 503
    retryable = True


class InternalError(AuthError):
    """Hashing, signing, or unclassified store failure (500)."""

    status_code = 500


def email_conflict(email: str, details: Any = None) -> ConflictError:
    return ConflictError(
        "EMAIL_ALREADY_EXISTS",
        f"An account with the email {email} already exists. "
        "Please use a different email or try logging in.",
        error="Email already registered",
        field="email",
        meta={"email": email},
        details=details,
    )


def from_store_error(exc: BaseException, *, email: Optional[str] = None) -> AuthError:
    """Translate a store exception into the taxonomy using its SQLSTATE class."""
    kind = classify_store_error(exc)
    detail = store_error_detail(exc)

    if kind is StoreErrorKind.UNIQUE_VIOLATION:
        if email is not None:
            # Both unique keys touched by signup (users.email and the
            # credential account id) hold the email.
            return email_conflict(email, details=detail)
        return ConflictError(
            "DUPLICATE_ENTRY",
            "A user with this information already exists",
            error="Database constraint violation",
            details=detail,
        )
    if kind is StoreErrorKind.FOREIGN_KEY_VIOLATION:
        return ConstraintViolationError(
            "FOREIGN_KEY_VIOLATION",
            "Invalid reference in database. Please contact support.",
            error="Database foreign key violation",
            details=detail,
        )
    if kind is StoreErrorKind.NOT_NULL_VIOLATION:
        return ConstraintViolationError(
            "NOT_NULL_VIOLATION",
            "Required field is missing. Please check your input.",
            error="Database not null violation",
            details=detail,
        )
    if kind is StoreErrorKind.CONSTRAINT_VIOLATION:
        return ConstraintViolationError(
            "DATABASE_VALIDATION_ERROR",
            "The provided data violates database constraints",
            error="Database validation error",
            details=detail,
        )
    if kind is StoreErrorKind.CONNECTION:
        return ServiceUnavailableError(
            "DATABASE_CONNECTION_ERROR",
            "Unable to connect to the database. Please try again later.",
            error="Database connection failed",
            details=str(exc),
        )
    if kind is StoreErrorKind.SYNTAX_ERROR:
        return InternalError(
            "DATABASE_SYNTAX_ERROR",
            "A database error occurred. Please contact support.",
            error="Database syntax error",
            details=detail,
        )
    return InternalError(
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred. Please try again later.",
        error="Internal server error",
        details={"message": str(exc), "code": get_sqlstate(exc), "detail": detail},
    )
