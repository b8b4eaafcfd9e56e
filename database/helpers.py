"""
Database helper functions — user / credential lookups and writes.

Helpers take an ``AsyncSession`` and only ``flush``; the caller owns the
transaction boundary.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import CREDENTIALS_PROVIDER, DEFAULT_ROLE, Credential, LoginEvent, User

logger = logging.getLogger(__name__)

UNSET: Any = object()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    """Exact match; callers pass the already-lowercased email."""
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_credential(
    session: AsyncSession,
    user_id: int,
    provider: str = CREDENTIALS_PROVIDER,
) -> Optional[Credential]:
    result = await session.execute(
        select(Credential)
        .where(Credential.user_id == user_id, Credential.provider == provider)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def create_user_with_credential(
    session: AsyncSession,
    *,
    email: str,
    password_hash: str,
    name: Optional[str] = None,
) -> User:
    """
    Insert a ``User`` and its password ``Credential``.

    Must run inside a transaction the caller commits or rolls back as a
    whole; a user without a matching credential must never become visible.
    """
    user = User(email=email, name=name or None, role=DEFAULT_ROLE)
    session.add(user)
    await session.flush()

    session.add(
        Credential(
            user_id=user.id,
            type=CREDENTIALS_PROVIDER,
            provider=CREDENTIALS_PROVIDER,
            provider_account_id=email,
            password=password_hash,
        )
    )
    await session.flush()
    logger.debug("Inserted user %s with %s credential", user.id, CREDENTIALS_PROVIDER)
    return user


async def record_login(
    session: AsyncSession,
    user_id: int,
    provider: str = CREDENTIALS_PROVIDER,
) -> LoginEvent:
    event = LoginEvent(user_id=str(user_id), provider=provider)
    session.add(event)
    await session.flush()
    return event


async def update_user_profile(
    session: AsyncSession,
    user_id: int,
    *,
    name: Any = UNSET,
    phone: Any = UNSET,
) -> Optional[User]:
    """Set only the supplied fields; ``None`` clears a field.  Returns None if no such user."""
    user = await get_user_by_id(session, user_id)
    if user is None:
        return None
    if name is not UNSET:
        user.name = name
    if phone is not UNSET:
        user.phone = phone
    await session.flush()
    return user
