"""
Classify store failures by SQLSTATE.

PostgreSQL reports constraint and connection problems through five-char
SQLSTATE codes.  SQLAlchemy wraps the driver exception in a
``DBAPIError`` whose ``orig`` carries the code (``sqlstate`` / ``pgcode``,
or on the underlying asyncpg exception).  SQLite has no SQLSTATE, so its
message text is matched instead.
"""

from __future__ import annotations

import asyncio
import enum
from typing import Optional

from sqlalchemy import exc as sa_exc


class StoreErrorKind(str, enum.Enum):
    UNIQUE_VIOLATION = "unique_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    NOT_NULL_VIOLATION = "not_null_violation"
    CONSTRAINT_VIOLATION = "constraint_violation"
    SYNTAX_ERROR = "syntax_error"
    CONNECTION = "connection"
    GENERIC = "generic"


_SQLSTATE_KINDS = {
    "23505": StoreErrorKind.UNIQUE_VIOLATION,
    "23503": StoreErrorKind.FOREIGN_KEY_VIOLATION,
    "23502": StoreErrorKind.NOT_NULL_VIOLATION,
    "57P03": StoreErrorKind.CONNECTION,  # cannot_connect_now
}

_SQLITE_MESSAGES = (
    ("UNIQUE constraint failed", StoreErrorKind.UNIQUE_VIOLATION),
    ("FOREIGN KEY constraint failed", StoreErrorKind.FOREIGN_KEY_VIOLATION),
    ("NOT NULL constraint failed", StoreErrorKind.NOT_NULL_VIOLATION),
    ("constraint failed", StoreErrorKind.CONSTRAINT_VIOLATION),
    ("syntax error", StoreErrorKind.SYNTAX_ERROR),
    ("no such table", StoreErrorKind.SYNTAX_ERROR),
    ("unable to open database", StoreErrorKind.CONNECTION),
)

_CONNECTION_EXCEPTIONS = (
    sa_exc.TimeoutError,        # pool checkout timed out
    sa_exc.DisconnectionError,
    ConnectionError,            # includes ConnectionRefusedError
    asyncio.TimeoutError,
    TimeoutError,
)


def get_sqlstate(exc: BaseException) -> Optional[str]:
    """Dig the SQLSTATE out of a (possibly wrapped) driver exception."""
    candidates = [exc]
    orig = getattr(exc, "orig", None)
    if orig is not None:
        candidates.append(orig)
        if orig.__cause__ is not None:
            candidates.append(orig.__cause__)
    for candidate in candidates:
        for attr in ("sqlstate", "pgcode"):
            code = getattr(candidate, attr, None)
            if isinstance(code, str) and code:
                return code
    return None


def classify_store_error(exc: BaseException) -> StoreErrorKind:
    if isinstance(exc, _CONNECTION_EXCEPTIONS):
        return StoreErrorKind.CONNECTION

    code = get_sqlstate(exc)
    if code:
        if code in _SQLSTATE_KINDS:
            return _SQLSTATE_KINDS[code]
        if code.startswith("08"):
            return StoreErrorKind.CONNECTION
        if code.startswith("23"):
            return StoreErrorKind.CONSTRAINT_VIOLATION
        if code.startswith("42"):
            return StoreErrorKind.SYNTAX_ERROR
        return StoreErrorKind.GENERIC

    if isinstance(exc, sa_exc.DBAPIError):
        message = str(exc.orig)
        for needle, kind in _SQLITE_MESSAGES:
            if needle in message:
                return kind
        if exc.connection_invalidated or isinstance(exc, sa_exc.InterfaceError):
            return StoreErrorKind.CONNECTION
        if isinstance(exc, sa_exc.IntegrityError):
            return StoreErrorKind.CONSTRAINT_VIOLATION
        if isinstance(exc.orig, (OSError, ConnectionError)):
            return StoreErrorKind.CONNECTION
        if isinstance(exc, sa_exc.OperationalError):
            return StoreErrorKind.CONNECTION

    if isinstance(exc, OSError):
        return StoreErrorKind.CONNECTION

    return StoreErrorKind.GENERIC


def store_error_detail(exc: BaseException) -> str:
    """Driver-level detail (``DETAIL:`` line on PostgreSQL) or the message."""
    orig = getattr(exc, "orig", exc)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        detail = getattr(candidate, "detail", None)
        if isinstance(detail, str) and detail:
            return detail
    return str(orig)
