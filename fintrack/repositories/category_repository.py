"""Category persistence (soft-deletable)."""
from __future__ import annotations

from fintrack.db.models import Category
from .soft_delete import SoftDeleteRepository


class CategoryRepository(SoftDeleteRepository[Category]):
    model = Category
