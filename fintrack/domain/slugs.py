"""Domain helpers for slug and identifier generation."""
from __future__ import annotations

import re
import secrets

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")

TOKEN_BYTES = 16


def new_token(nbytes: int = TOKEN_BYTES) -> str:
    """URL-safe random identifier (22 chars for the default size)."""
    return secrets.token_urlsafe(nbytes)


def slugify(value: str | None) -> str:
    """Param-case a name: ``"Food & Drinks"`` -> ``"food-drinks"``, ``"eatingOut"`` -> ``"eating-out"``."""
    text = (value or "").strip()
    text = _ACRONYM_BOUNDARY.sub(r"\1-\2", text)
    text = _CAMEL_BOUNDARY.sub(r"\1-\2", text)
    return _NON_ALNUM.sub("-", text).strip("-").lower()


def unique_slug(name: str | None) -> str:
    """Slug made unique by a random prefix rather than by the name itself."""
    return f"{new_token()}-{slugify(name)}"
