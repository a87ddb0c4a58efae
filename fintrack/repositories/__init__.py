"""
Persistence adapters.

Repositories receive a SQLAlchemy session from their caller; services depend on
them rather than building queries inline.
"""

from .category_repository import CategoryRepository
from .soft_delete import SoftDeleteRepository
from .transaction_repository import TransactionRepository
from .user_repository import EmailTakenError, UserRepository

__all__ = [
    "CategoryRepository",
    "EmailTakenError",
    "SoftDeleteRepository",
    "TransactionRepository",
    "UserRepository",
]
