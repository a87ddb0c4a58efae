"""
Error taxonomy shared by services and routers.

Services raise these exceptions; the application converts them into the
``{"success": false, "message": ...}`` envelope at the HTTP boundary.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Mapping, Union

from sqlalchemy.exc import SQLAlchemyError

from fintrack.core.security import PasswordHashError

logger = logging.getLogger(__name__)

Message = Union[str, Mapping[str, list[str]]]

GENERIC_ERROR_MESSAGE = "Something went wrong."


class ServiceError(Exception):
    """Base class for failures reported to the caller as success:false."""

    status_code = 200

    def __init__(self, message: Message):
        super().__init__(message if isinstance(message, str) else "validation failed")
        self.message = message


class ValidationError(ServiceError):
    def __init__(self, errors: Mapping[str, list[str]]):
        super().__init__(dict(errors))
        self.errors = dict(errors)


class DuplicateEmailError(ServiceError):
    pass


class NotFoundError(ServiceError):
    pass


class InvalidCredentialsError(ServiceError):
    pass


class ForbiddenError(ServiceError):
    pass


class UnauthorizedError(ServiceError):
    """Missing or invalid bearer token."""

    status_code = 401


class InternalError(ServiceError):
    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message)


@contextmanager
def internal_errors(action: str, message: str = GENERIC_ERROR_MESSAGE) -> Iterator[None]:
    """Log store, crypto and I/O failures and re-raise them as InternalError."""
    try:
        yield
    except (SQLAlchemyError, PasswordHashError, OSError, ValueError) as exc:
        logger.exception("%s failed: %s", action, exc)
        raise InternalError(message) from exc
