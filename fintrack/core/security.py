"""Security helpers (password hashing and verification)."""

from __future__ import annotations

import bcrypt
from argon2 import PasswordHasher, exceptions as argon_exc

from fintrack.core.config import get_settings

_ph = PasswordHasher()
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
_ARGON2_PREFIX = "$argon2"
# bcrypt only reads the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


class PasswordHashError(Exception):
    """Raised when a password cannot be hashed."""


def _bcrypt_secret(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_scheme(stored_hash: str | None) -> str | None:
    """Return the scheme name of a stored hash, or None when unknown."""
    stored = stored_hash or ""
    if stored.startswith(_BCRYPT_PREFIXES):
        return "bcrypt"
    if stored.startswith(_ARGON2_PREFIX):
        return "argon2"
    return None


def hash_password(password: str) -> str:
    """Create a salted hash using the configured scheme (bcrypt cost 10 by default)."""
    settings = get_settings()
    try:
        if settings.password_scheme == "argon2":
            return _ph.hash(password)
        salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
        return bcrypt.hashpw(_bcrypt_secret(password), salt).decode("utf-8")
    except (ValueError, argon_exc.HashingError) as exc:
        raise PasswordHashError(str(exc)) from exc


def verify_password(password: str, stored_hash: str | None) -> bool:
    scheme = hash_scheme(stored_hash)
    if scheme == "bcrypt":
        try:
            return bcrypt.checkpw(_bcrypt_secret(password), stored_hash.encode("utf-8"))
        except ValueError:
            return False
    if scheme == "argon2":
        try:
            return _ph.verify(stored_hash, password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False
    return False


def needs_rehash(stored_hash: str | None) -> bool:
    """True when the stored hash was produced by a scheme other than the configured one."""
    scheme = hash_scheme(stored_hash)
    if scheme != get_settings().password_scheme:
        return True
    if scheme == "argon2":
        return _ph.check_needs_rehash(stored_hash)
    return False
