"""
Auth core — signup, login, and profile read/update.

``AuthService`` orchestrates the credential store, the password hasher and
the token issuer.  All three are passed in; the service holds no other
state, so one instance is shared by every concurrent request.

Failure handling:
  • Validation runs first and short-circuits before any I/O.
  • Store exceptions are translated via :func:`auth.errors.from_store_error`
    (SQLSTATE → Conflict / ConstraintViolation / ServiceUnavailable /
    Internal).  Nothing is retried here.
  • Signup's user + credential inserts share one transaction; any failure
    rolls both back before the error propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from auth.errors import (
    AuthError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
    email_conflict,
    from_store_error,
)
from auth.jwt import TokenIssuer
from auth.password import PasswordHasher
from auth.validation import normalize_email, validate_login, validate_signup
from database.helpers import (
    UNSET,
    create_user_with_credential,
    get_credential,
    get_user_by_email,
    get_user_by_id,
    record_login,
    update_user_profile,
)
from database.models import CREDENTIALS_PROVIDER
from database.session import Database

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    token: str
    user: Dict[str, Any] = field(default_factory=dict)


class AuthService:
    def __init__(
        self,
        db: Database,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        *,
        audit_strict: bool = True,
    ) -> None:
        self._db = db
        self._hasher = hasher
        self._tokens = tokens
        # When True a failed login-audit insert fails the login itself.
        self._audit_strict = audit_strict

    # ── signup ────────────────────────────────────────────────────────

    async def signup(
        self,
        email: Optional[str],
        password: Optional[str],
        name: Optional[str] = None,
    ) -> AuthResult:
        validate_signup(email, password)
        email = normalize_email(email)

        try:
            async with self._db.session() as session:
                existing = await get_user_by_email(session, email)
        except Exception as exc:
            raise self._store_failure(exc, "Signup lookup") from exc
        if existing is not None:
            raise email_conflict(email)

        password_hash = await self._hasher.hash_async(password)

        try:
            async with self._db.session() as session:
                async with session.begin():
                    user = await create_user_with_credential(
                        session,
                        email=email,
                        password_hash=password_hash,
                        name=name,
                    )
        except Exception as exc:
            # session.begin() has already rolled back both inserts.
            raise self._store_failure(exc, "Signup", email=email) from exc

        token = self._tokens.issue_for(user)
        logger.info("Registered user %s (%s)", user.email, user.id)
        return AuthResult(token=token, user=user.public())

    # ── login ─────────────────────────────────────────────────────────

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        validate_login(email, password)
        email = normalize_email(email)

        try:
            async with self._db.session() as session:
                user = await get_user_by_email(session, email)
                credential = (
                    await get_credential(session, user.id, CREDENTIALS_PROVIDER)
                    if user is not None
                    else None
                )
        except Exception as exc:
            raise self._store_failure(exc, "Login lookup") from exc

        if user is None:
            raise self._rejected(
                "USER_NOT_FOUND",
                "No account found with this email address. Please check your email or sign up.",
                "email",
            )
        if credential is None:
            raise self._rejected(
                "ACCOUNT_NOT_FOUND",
                "No credentials account found for this user. Please contact support.",
                "account",
            )
        if not credential.password:
            raise self._rejected(
                "PASSWORD_NOT_SET",
                "Password is not set for this account. Please reset your password or contact support.",
                "password",
            )
        if not await self._hasher.verify_async(credential.password, password):
            raise self._rejected(
                "INVALID_PASSWORD",
                "The password you entered is incorrect. Please try again.",
                "password",
            )

        token = self._tokens.issue_for(user)
        await self._audit_login(user.id)

        logger.info("Login: %s (%s)", user.email, user.id)
        return AuthResult(token=token, user=user.public())

    async def _audit_login(self, user_id: int) -> None:
        try:
            async with self._db.session() as session:
                async with session.begin():
                    await record_login(session, user_id, CREDENTIALS_PROVIDER)
        except Exception as exc:
            error = self._store_failure(exc, "Login audit")
            if self._audit_strict:
                raise error from exc
            logger.warning("Login audit dropped for user %s (%s)", user_id, error.code)

    # ── profile ───────────────────────────────────────────────────────

    async def get_profile(self, user_id: int) -> Dict[str, Any]:
        try:
            async with self._db.session() as session:
                user = await get_user_by_id(session, user_id)
        except Exception as exc:
            raise self._store_failure(exc, "Get user") from exc
        if user is None:
            raise _user_not_found()
        return user.profile()

    async def update_profile(
        self,
        user_id: int,
        *,
        name: Any = UNSET,
        phone: Any = UNSET,
    ) -> Dict[str, Any]:
        """Update only the supplied fields; at least one must be given."""
        if name is UNSET and phone is UNSET:
            raise ValidationError(
                "NO_FIELDS_TO_UPDATE",
                "Provide at least one of: name, phone",
                error="No fields to update",
            )
        try:
            async with self._db.session() as session:
                async with session.begin():
                    user = await update_user_profile(session, user_id, name=name, phone=phone)
        except Exception as exc:
            raise self._store_failure(exc, "Update profile") from exc
        if user is None:
            raise _user_not_found()

        logger.info("Profile updated for user %s", user_id)
        return user.profile()

    # ── helpers ───────────────────────────────────────────────────────

    @staticmethod
    def _rejected(code: str, message: str, field_name: str) -> AuthenticationError:
        logger.warning("Authentication rejected: %s", code)
        return AuthenticationError(code, message, error="Invalid credentials", field=field_name)

    @staticmethod
    def _store_failure(exc: Exception, operation: str, *, email: Optional[str] = None) -> AuthError:
        error = from_store_error(exc, email=email)
        if error.status_code >= 500:
            logger.exception("%s failed (%s)", operation, error.code)
        else:
            logger.warning("%s rejected by store: %s", operation, error.code)
        return error


def _user_not_found() -> NotFoundError:
    return NotFoundError("USER_NOT_FOUND", "User not found", error="User not found")
