"""
Authentication and identity related use cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from fintrack.core.config import get_settings
from fintrack.core.errors import (
    DuplicateEmailError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
    internal_errors,
)
from fintrack.core.security import hash_password, needs_rehash, verify_password
from fintrack.core.tokens import issue_token
from fintrack.db.models import ROLE_USER, User
from fintrack.domain.slugs import new_token
from fintrack.domain.validation import validate_all
from fintrack.repositories.user_repository import EmailTakenError, UserRepository

logger = logging.getLogger(__name__)

TOKEN_TYPE = "Bearer"
DUPLICATE_EMAIL_MESSAGE = "Email already registered."
EMAIL_NOT_FOUND_MESSAGE = "Email not found!"
PASSWORD_MISMATCH_MESSAGE = "Password did not match"
ACCESS_DENIED_MESSAGE = "Access denied"
USER_NOT_FOUND_MESSAGE = "User not found."

REGISTER_RULES = {
    "name": "required|string",
    "email": "required|email",
    "password": "required|string",
}
LOGIN_RULES = {
    "email": "required|string",
    "password": "required|string",
}
PROFILE_RULES = {
    "name": "string",
    "picture": "string",
}


@dataclass
class AuthResult:
    token: str
    user: dict
    type: str = TOKEN_TYPE


@dataclass
class AdminLoginResult:
    token: str
    type: str = TOKEN_TYPE


@dataclass
class AuthService:
    """Handles registration, login (user and admin) and profile flows."""

    session: Session

    def __post_init__(self):
        self.settings = get_settings()
        self.repository = UserRepository(self.session)

    # -------------------------------------- helpers --------------------------------------
    def _validate(self, data: Mapping[str, Any], rules: Mapping[str, str]) -> None:
        errors = validate_all(data, rules)
        if errors:
            raise ValidationError(errors)

    def _issue(self, user: User, claims: Mapping[str, Any]) -> str:
        payload = {"id": user.id, "user_claims": dict(claims)}
        return issue_token(
            payload,
            secret=self.settings.jwt_secret,
            issuer=self.settings.jwt_issuer,
            algorithm=self.settings.jwt_algorithm,
            expires_in=self.settings.jwt_expires_seconds or None,
        )

    def _create_user(self, email: str, name: str, password: str) -> User:
        if self.repository.email_exists(email):
            raise DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE)
        password_hash = hash_password(password)
        try:
            # the unique constraint on users.email is the authoritative check
            return self.repository.create_user(new_token(), email, name, password_hash, role=ROLE_USER)
        except EmailTakenError as exc:
            raise DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE) from exc

    def _authenticate(self, email: str, password: str, *, admin_only: bool = False) -> User:
        user = self.repository.get_user_by_email(email)
        if not user:
            raise NotFoundError(EMAIL_NOT_FOUND_MESSAGE)
        if admin_only and not user.is_admin:
            logger.info("admin login refused for non-admin user %s", user.id)
            raise ForbiddenError(ACCESS_DENIED_MESSAGE)
        if not verify_password(password, user.password):
            raise InvalidCredentialsError(PASSWORD_MISMATCH_MESSAGE)
        if needs_rehash(user.password):
            self.repository.update_user_password(user.id, hash_password(password))
        return user

    # -------------------------------------- registration --------------------------------------
    def register(self, email: str, name: str, password: str) -> AuthResult:
        self._validate({"email": email, "name": name, "password": password}, REGISTER_RULES)
        email = email.strip()
        with internal_errors("register"):
            user = self._create_user(email, name, password)
        token = self._issue(user, {"id": user.id, "email": user.email, "name": user.name})
        logger.info("user %s registered", user.id)
        return AuthResult(token=token, user=user.to_dict())

    def add_user(self, email: str, name: str, password: str) -> dict:
        """Administrative user creation: same rules as register, no token."""
        self._validate({"email": email, "name": name, "password": password}, REGISTER_RULES)
        email = email.strip()
        with internal_errors("add_user"):
            user = self._create_user(email, name, password)
        logger.info("user %s created by an administrator", user.id)
        return user.to_dict()

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str) -> AuthResult:
        self._validate({"email": email, "password": password}, LOGIN_RULES)
        with internal_errors("login"):
            user = self._authenticate(email.strip(), password)
        token = self._issue(user, {"id": user.id, "email": user.email, "role": user.role})
        return AuthResult(token=token, user=user.to_dict())

    def login_admin(self, email: str, password: str) -> AdminLoginResult:
        self._validate({"email": email, "password": password}, LOGIN_RULES)
        with internal_errors("login_admin"):
            user = self._authenticate(email.strip(), password, admin_only=True)
        token = self._issue(user, {"id": user.id, "email": user.email, "role": user.role})
        return AdminLoginResult(token=token)

    # -------------------------------------- profile --------------------------------------
    def profile(self, user_id: str) -> dict:
        with internal_errors("profile"):
            user = self.repository.get_user(user_id)
        if not user:
            raise NotFoundError(USER_NOT_FOUND_MESSAGE)
        return user.to_dict()

    def edit_profile(self, user_id: str, name: Optional[str] = None, picture: Optional[str] = None) -> dict:
        self._validate({"name": name, "picture": picture}, PROFILE_RULES)
        fields = {key: value for key, value in (("name", name), ("picture", picture)) if value is not None}
        with internal_errors("edit_profile"):
            user = self.repository.update_user(user_id, fields) if fields else self.repository.get_user(user_id)
        if not user:
            raise NotFoundError(USER_NOT_FOUND_MESSAGE)
        return user.to_dict()
