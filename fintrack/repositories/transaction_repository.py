"""Transaction persistence (soft-deletable, scoped by owner)."""
from __future__ import annotations

from typing import Any

from sqlalchemy import func, or_, select

from fintrack.db.models import Budget, Category, Transaction, Wallet
from .soft_delete import SoftDeleteRepository

# field -> (model, system rows with user_id NULL are visible to everyone)
REFERENCES = {
    "category_id": (Category, True),
    "wallet_id": (Wallet, False),
    "budget_id": (Budget, False),
}


class TransactionRepository(SoftDeleteRepository[Transaction]):
    model = Transaction

    def total_amount(self, user_id: str) -> int:
        """Sum of live transaction amounts owned by ``user_id``."""
        stmt = select(func.coalesce(func.sum(Transaction.amount), 0)).where(
            Transaction.user_id == user_id, self.live()
        )
        return int(self.session.execute(stmt).scalar_one())

    def reference_visible(self, field: str, ref_id: Any, user_id: str) -> bool:
        """True when ``field`` points at a live row owned by ``user_id``."""
        model, shared = REFERENCES[field]
        owner = model.user_id == user_id
        if shared:
            owner = or_(owner, model.user_id.is_(None))
        stmt = select(model.id).where(model.id == ref_id, model.deleted_at.is_(None), owner).limit(1)
        return self.session.execute(stmt).first() is not None
