"""
Generic repository for tables carrying a ``deleted_at`` marker.

Every read goes through ``live()`` so logically deleted rows never leak into
listings or lookups; deletes are UPDATEs, not removals.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, Iterable, Mapping, Optional, Sequence, TypeVar

from sqlalchemy import select, update
from sqlalchemy.orm import Session

ModelT = TypeVar("ModelT")


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SoftDeleteRepository(Generic[ModelT]):
    """CRUD helpers over ``model`` using an explicitly injected session."""

    model: type[ModelT]

    def __init__(self, session: Session) -> None:
        self.session = session

    # -------------------------- helpers --------------------------
    def live(self):
        """Predicate selecting rows that are not soft-deleted."""
        return self.model.deleted_at.is_(None)

    def _filtered(self, stmt, filters: Mapping[str, Any]):
        for name, value in filters.items():
            stmt = stmt.where(getattr(self.model, name) == value)
        return stmt

    def _commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    # -------------------------- reads --------------------------
    def list(self, prefix_field: Optional[str] = None, prefix: Optional[str] = None, **filters: Any) -> list[ModelT]:
        stmt = self._filtered(select(self.model).where(self.live()), filters)
        if prefix_field and prefix:
            column = getattr(self.model, prefix_field)
            stmt = stmt.where(column.like(f"{escape_like(prefix)}%", escape="\\"))
        stmt = stmt.order_by(self.model.id.desc())
        return list(self.session.execute(stmt).scalars().all())

    def get(self, entity_id: Any, **filters: Any) -> Optional[ModelT]:
        stmt = self._filtered(select(self.model).where(self.model.id == entity_id, self.live()), filters)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_including_deleted(self, entity_id: Any) -> Optional[ModelT]:
        stmt = select(self.model).where(self.model.id == entity_id).execution_options(populate_existing=True)
        return self.session.execute(stmt).scalar_one_or_none()

    # -------------------------- writes --------------------------
    def create(self, **fields: Any) -> ModelT:
        entity = self.model(**fields)
        self.session.add(entity)
        self._commit()
        self.session.refresh(entity)
        return entity

    def create_many(self, items: Iterable[Mapping[str, Any]]) -> list[ModelT]:
        """Insert every item in one transaction: either all rows land or none."""
        entities = [self.model(**dict(item)) for item in items]
        if not entities:
            return []
        self.session.add_all(entities)
        self._commit()
        for entity in entities:
            self.session.refresh(entity)
        return entities

    def update(self, entity_id: Any, fields: Mapping[str, Any], **filters: Any) -> Optional[ModelT]:
        """Patch only ``fields`` on a live row; soft-deleted rows are left untouched."""
        entity = self.get(entity_id, **filters)
        if entity is None:
            return None
        for name, value in fields.items():
            setattr(entity, name, value)
        self._commit()
        self.session.refresh(entity)
        return entity

    def soft_delete(self, ids: Sequence[Any], **filters: Any) -> int:
        """Mark every live row in ``ids`` as deleted with a single UPDATE; returns the row count."""
        if not ids:
            return 0
        stmt = update(self.model).where(self.model.id.in_(list(ids)), self.live())
        stmt = self._filtered(stmt, filters).values(deleted_at=datetime.now(timezone.utc))
        result = self.session.execute(stmt)
        self._commit()
        return int(result.rowcount or 0)
