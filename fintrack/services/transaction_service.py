"""Transaction use cases, always scoped to the authenticated owner."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from fintrack.core.errors import ValidationError, internal_errors
from fintrack.domain.validation import parse_datetime, validate_all
from fintrack.repositories.transaction_repository import REFERENCES, TransactionRepository
from fintrack.services.category_service import DESTROY_RULES, coerce_ids

SAVE_FAILED_MESSAGE = "Failed to save data!"
DELETE_FAILED_MESSAGE = "Failed to delete!"

FIELD_RULES = {
    "wallet_id": "integer",
    "category_id": "integer",
    "budget_id": "integer",
    "description": "string",
    "spent_at": "date",
    "amount": "integer",
    "date": "date",
}
CREATE_RULES = dict(FIELD_RULES, amount="required|integer")

_DATE_FIELDS = ("spent_at", "date")


def _fields(data: Mapping[str, Any]) -> dict[str, Any]:
    values = {name: data[name] for name in FIELD_RULES if name in data and data[name] is not None}
    for name in _DATE_FIELDS:
        if name in values:
            values[name] = parse_datetime(values[name])
    return values


class TransactionService:
    """CRUD over a user's transactions following the soft-delete convention."""

    def __init__(self, session: Session) -> None:
        self.repository = TransactionRepository(session)

    def _validate(self, data: Mapping[str, Any], rules: Mapping[str, str]) -> None:
        errors = validate_all(data, rules)
        if errors:
            raise ValidationError(errors)

    def _check_references(self, user_id: str, fields: Mapping[str, Any]) -> None:
        errors = {
            name: [f"The selected {name} is invalid."]
            for name in REFERENCES
            if name in fields and not self.repository.reference_visible(name, fields[name], user_id)
        }
        if errors:
            raise ValidationError(errors)

    def list(self, user_id: str, description: Optional[str] = None) -> list[dict]:
        with internal_errors("list transactions"):
            rows = self.repository.list(
                prefix_field="description",
                prefix=(description or "").strip() or None,
                user_id=user_id,
            )
        return [row.to_dict() for row in rows]

    def total(self, user_id: str) -> int:
        with internal_errors("transaction total"):
            return self.repository.total_amount(user_id)

    def detail(self, user_id: str, transaction_id: int) -> Optional[dict]:
        with internal_errors("transaction detail"):
            row = self.repository.get(transaction_id, user_id=user_id)
        return row.to_dict() if row else None

    def create(self, user_id: str, data: Mapping[str, Any]) -> dict:
        self._validate(data, CREATE_RULES)
        fields = _fields(data)
        with internal_errors("create transaction", SAVE_FAILED_MESSAGE):
            self._check_references(user_id, fields)
            row = self.repository.create(user_id=user_id, **fields)
        return row.to_dict()

    def edit(self, user_id: str, transaction_id: int, data: Mapping[str, Any]) -> Optional[dict]:
        self._validate(data, FIELD_RULES)
        fields = _fields(data)
        with internal_errors("edit transaction", SAVE_FAILED_MESSAGE):
            self._check_references(user_id, fields)
            if fields:
                row = self.repository.update(transaction_id, fields, user_id=user_id)
            else:
                row = self.repository.get(transaction_id, user_id=user_id)
        return row.to_dict() if row else None

    def destroy(self, user_id: str, ids: Any) -> int:
        self._validate({"ids": ids}, DESTROY_RULES)
        with internal_errors("delete transactions", DELETE_FAILED_MESSAGE):
            return self.repository.soft_delete(coerce_ids(ids), user_id=user_id)
