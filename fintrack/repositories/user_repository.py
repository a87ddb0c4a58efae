"""Credential store backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fintrack.db.models import ROLE_USER, User


class EmailTakenError(Exception):
    """Raised when the users.email unique constraint rejects an insert."""


class UserRepository:
    """CRUD helpers for user records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_user(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        return self.session.execute(stmt).scalar_one_or_none()

    def email_exists(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email).limit(1)
        return self.session.execute(stmt).first() is not None

    def create_user(self, user_id: str, email: str, name: str, password_hash: str, role: str = ROLE_USER) -> User:
        entity = User(id=user_id, email=email, name=name, password=password_hash, role=role)
        self.session.add(entity)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if self.get_user_by_email(email) is not None:
                raise EmailTakenError(email) from exc
            raise
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(entity)
        return entity

    def update_user(self, user_id: str, fields: Mapping[str, Any]) -> Optional[User]:
        entity = self.session.get(User, user_id)
        if entity is None:
            return None
        for name, value in fields.items():
            setattr(entity, name, value)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(entity)
        return entity

    def update_user_password(self, user_id: str, password_hash: str) -> None:
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(password=password_hash, updated_at=datetime.now(timezone.utc))
        )
        self.session.execute(stmt)
        self.session.commit()

    def list_users(self) -> list[User]:
        """All users, oldest first (used by the admin CLI)."""
        return list(self.session.execute(select(User).order_by(User.created_at)).scalars().all())
