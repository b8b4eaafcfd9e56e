"""
SQLAlchemy ORM models for users, their credentials, and login history.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship

CREDENTIALS_PROVIDER = "credentials"
DEFAULT_ROLE = "free"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "auth_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=True)
    role = Column(String(32), nullable=False, default=DEFAULT_ROLE, server_default=DEFAULT_ROLE)
    phone = Column(String(32), nullable=True)
    image = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    credentials = relationship("Credential", back_populates="user", cascade="all, delete-orphan")

    def public(self) -> dict:
        """Projection safe to hand to clients; never includes a password hash."""
        return {"id": self.id, "email": self.email, "name": self.name, "role": self.role}

    def profile(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "phone": self.phone,
            "image": self.image,
        }


class Credential(Base):
    """Provider-scoped login record; ``password`` is null for non-password providers."""

    __tablename__ = "auth_accounts"
    __table_args__ = (
        UniqueConstraint("provider", "providerAccountId", name="uq_auth_accounts_provider_account"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        "userId",
        Integer,
        ForeignKey("auth_users.id", ondelete="CASCADE"),
        nullable=False,
    )
    type = Column(String(32), nullable=False)
    provider = Column(String(32), nullable=False)
    provider_account_id = Column("providerAccountId", String(255), nullable=False)
    password = Column(Text, nullable=True)

    user = relationship("User", back_populates="credentials")


class LoginEvent(Base):
    """Append-only audit row written after each successful login."""

    __tablename__ = "user_logins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False)
    provider = Column(String(32), nullable=False)
    login_time = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
