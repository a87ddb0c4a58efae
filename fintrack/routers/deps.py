"""Shared FastAPI dependencies: bearer authentication and admin guard."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from fintrack.core.config import get_settings
from fintrack.core.errors import ForbiddenError, UnauthorizedError
from fintrack.core.tokens import TokenError, decode_token
from fintrack.db.session import get_db
from fintrack.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    id: str
    email: Optional[str]
    role: Optional[str]


def current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer)) -> CurrentUser:
    if credentials is None or (credentials.scheme or "").lower() != "bearer":
        raise UnauthorizedError("Unauthorized")
    settings = get_settings()
    try:
        claims = decode_token(
            credentials.credentials,
            secret=settings.jwt_secret,
            issuer=settings.jwt_issuer,
            algorithms=[settings.jwt_algorithm],
        )
    except TokenError as exc:
        logger.info("rejected bearer token: %s", exc)
        raise UnauthorizedError("Unauthorized") from exc
    user_claims = claims.get("user_claims") or {}
    return CurrentUser(id=str(claims["id"]), email=user_claims.get("email"), role=user_claims.get("role"))


def require_admin(user: CurrentUser = Depends(current_user), db: Session = Depends(get_db)) -> CurrentUser:
    """The role is read from the store, not from the token, so demotions apply immediately."""
    entity = UserRepository(db).get_user(user.id)
    if not entity:
        raise UnauthorizedError("Unauthorized")
    if not entity.is_admin:
        raise ForbiddenError("Access denied")
    return user
