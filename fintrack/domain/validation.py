"""Declarative input validation (``{"email": "required|email"}`` style rules)."""
from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z0-9-]{2,}$")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _email(value: Any) -> bool:
    return isinstance(value, str) and bool(EMAIL_PATTERN.fullmatch(value.strip()))


def _integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _string(value: Any) -> bool:
    return isinstance(value, str)


def _array(value: Any) -> bool:
    return isinstance(value, list)


def _date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return parse_datetime(value) is not None


_CHECKS: dict[str, tuple[Callable[[Any], bool], str]] = {
    "email": (_email, "The {field} field must be a valid email address."),
    "integer": (_integer, "The {field} field must be an integer."),
    "string": (_string, "The {field} field must be a string."),
    "array": (_array, "The {field} field must be an array."),
    "date": (_date, "The {field} field must be an ISO-8601 date."),
}


def parse_datetime(value: str | None) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def validate_all(data: Mapping[str, Any] | None, rules: Mapping[str, str]) -> Optional[dict[str, list[str]]]:
    """
    Validate ``data`` against every rule and collect all failures.

    Returns a map ``field -> [messages]`` or None when the input is valid.
    Rules other than ``required`` are skipped for absent/blank values.
    """
    payload = data or {}
    errors: dict[str, list[str]] = {}
    for field, rule in rules.items():
        names = [name.strip() for name in rule.split("|") if name.strip()]
        value = payload.get(field)
        if _is_blank(value):
            if "required" in names:
                errors.setdefault(field, []).append(f"The {field} field is required.")
            continue
        for name in names:
            if name == "required":
                continue
            check = _CHECKS.get(name)
            if check is None:
                raise KeyError(f"Unknown validation rule: {name}")
            fn, template = check
            if not fn(value):
                errors.setdefault(field, []).append(template.format(field=field))
    return errors or None
