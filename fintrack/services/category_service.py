"""Category use cases (list, detail, create, bulk create, edit, soft delete)."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from sqlalchemy.orm import Session

from fintrack.core.errors import ValidationError, internal_errors
from fintrack.domain.slugs import unique_slug
from fintrack.domain.validation import validate_all
from fintrack.repositories import predefined_categories
from fintrack.repositories.category_repository import CategoryRepository

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Failed to save data!"
DELETE_FAILED_MESSAGE = "Failed to delete!"

CREATE_RULES = {
    "name": "required|string",
    "user_id": "string",
    "type": "string",
    "icon": "string",
}
EDIT_RULES = {
    "name": "string",
    "type": "string",
    "picture": "string",
}
DESTROY_RULES = {"ids": "required|array"}
IDS_MESSAGE = "The ids field must contain only integers."


def coerce_ids(values: Sequence[Any]) -> list[int]:
    """Turn ``[1, "2"]`` into ``[1, 2]``; floats, booleans and other values fail validation."""
    ids = []
    for value in values:
        if isinstance(value, int) and not isinstance(value, bool):
            ids.append(value)
        elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
            ids.append(int(value.strip()))
        else:
            raise ValidationError({"ids": [IDS_MESSAGE]})
    return ids


class CategoryService:
    """Thin CRUD orchestration over CategoryRepository."""

    def __init__(self, session: Session) -> None:
        self.repository = CategoryRepository(session)

    def list(self, name: Optional[str] = None) -> list[dict]:
        with internal_errors("list categories"):
            rows = self.repository.list(prefix_field="name", prefix=(name or "").strip() or None)
        return [row.to_dict() for row in rows]

    def detail(self, category_id: int) -> Optional[dict]:
        with internal_errors("category detail"):
            row = self.repository.get(category_id)
        return row.to_dict() if row else None

    def create(self, name: str, user_id: Optional[str] = None, type: Optional[str] = None, icon: Optional[str] = None) -> dict:
        errors = validate_all({"name": name, "user_id": user_id, "type": type, "icon": icon}, CREATE_RULES)
        if errors:
            raise ValidationError(errors)
        with internal_errors("create category", SAVE_FAILED_MESSAGE):
            row = self.repository.create(
                name=name,
                user_id=user_id,
                type=type,
                slug=unique_slug(name),
                picture=icon,
            )
        return row.to_dict()

    def bulk_create(self, user_id: str) -> Optional[list[dict]]:
        """Copy the predefined categories for ``user_id`` in a single transaction."""
        with internal_errors("bulk create categories", SAVE_FAILED_MESSAGE):
            predefined = predefined_categories.load()
            if not predefined:
                return None
            items = [
                {
                    "name": item.name,
                    "type": item.type,
                    "user_id": user_id,
                    "slug": unique_slug(item.name),
                    "picture": item.icon,
                }
                for item in predefined
            ]
            rows = self.repository.create_many(items)
        logger.info("created %d predefined categories for user %s", len(rows), user_id)
        return [row.to_dict() for row in rows]

    def edit(self, category_id: int, name: Optional[str] = None, type: Optional[str] = None, picture: Optional[str] = None) -> Optional[dict]:
        errors = validate_all({"name": name, "type": type, "picture": picture}, EDIT_RULES)
        if errors:
            raise ValidationError(errors)
        fields: dict[str, Any] = {}
        if name is not None and name.strip():
            fields["name"] = name
            fields["slug"] = unique_slug(name)
        if type is not None:
            fields["type"] = type
        if picture is not None:
            fields["picture"] = picture
        with internal_errors("edit category", SAVE_FAILED_MESSAGE):
            row = self.repository.update(category_id, fields) if fields else self.repository.get(category_id)
        return row.to_dict() if row else None

    def destroy(self, ids: Any) -> int:
        errors = validate_all({"ids": ids}, DESTROY_RULES)
        if errors:
            raise ValidationError(errors)
        with internal_errors("delete categories", DELETE_FAILED_MESSAGE):
            return self.repository.soft_delete(coerce_ids(ids))
