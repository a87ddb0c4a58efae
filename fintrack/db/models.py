"""SQLAlchemy models for users, categories, transactions and their references."""
from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"

# BIGINT autoincrement does not work on SQLite; fall back to INTEGER there.
BigId = BigInteger().with_variant(Integer(), "sqlite")


def _json_value(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class SerializerMixin:
    """``to_dict()`` over table columns, skipping the names listed in ``__hidden__``."""

    __hidden__ = frozenset()

    def to_dict(self) -> dict:
        return {
            column.name: _json_value(getattr(self, column.key))
            for column in self.__table__.columns
            if column.name not in self.__hidden__
        }


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class SoftDeleteMixin:
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)


class User(SerializerMixin, TimestampMixin, Base):
    __tablename__ = "users"
    __hidden__ = frozenset({"password"})

    id = Column(String(255), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(Text, nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default=ROLE_USER)
    picture = Column(Text, nullable=True)

    categories = relationship("Category", back_populates="owner")
    transactions = relationship("Transaction", back_populates="owner")

    @property
    def is_admin(self) -> bool:
        return (self.role or "").upper() == ROLE_ADMIN


class Category(SerializerMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "categories"

    id = Column(BigId, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    type = Column(String(32), nullable=True)
    slug = Column(String(255), unique=True, nullable=False)
    picture = Column(Text, nullable=True)
    user_id = Column(String(255), ForeignKey("users.id"), nullable=True, index=True)

    owner = relationship("User", back_populates="categories")
    sub_category = relationship("BudgetCategory", viewonly=True)


class Wallet(SerializerMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "wallets"

    id = Column(BigId, primary_key=True, autoincrement=True)
    user_id = Column(String(255), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    balance = Column(BigInteger, nullable=False, default=0)


class Budget(SerializerMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "budgets"

    id = Column(BigId, primary_key=True, autoincrement=True)
    user_id = Column(String(255), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    amount = Column(BigInteger, nullable=False, default=0)

    categories = relationship("BudgetCategory", back_populates="budget", cascade="all,delete-orphan")


class BudgetCategory(SerializerMixin, Base):
    __tablename__ = "budget_categories"

    id = Column(BigId, primary_key=True, autoincrement=True)
    budget_id = Column(BigInteger, ForeignKey("budgets.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(BigInteger, ForeignKey("categories.id"), nullable=False)
    amount = Column(BigInteger, nullable=False, default=0)

    budget = relationship("Budget", back_populates="categories")
    category = relationship("Category")


class Transaction(SerializerMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "transactions"

    id = Column(BigId, primary_key=True, autoincrement=True)
    user_id = Column(String(255), ForeignKey("users.id"), nullable=False, index=True)
    wallet_id = Column(BigInteger, ForeignKey("wallets.id"), nullable=True)
    category_id = Column(BigInteger, ForeignKey("categories.id"), nullable=True)
    budget_id = Column(BigInteger, ForeignKey("budgets.id"), nullable=True)
    description = Column(Text, nullable=True)
    spent_at = Column(DateTime(timezone=True), nullable=True)
    amount = Column(Integer, nullable=False, default=0, server_default="0")
    date = Column(DateTime(timezone=True), nullable=True)

    owner = relationship("User", back_populates="transactions")
    category = relationship("Category")
