"""
Read-only adapter for the predefined category list shipped as JSON.

The file lives in ``fintrack/data/categories.json``; PREDEFINED_CATEGORIES_PATH
points to another file with the same ``{"categories": [...]}`` shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import json

from fintrack.core.config import get_settings

DATA_FILE = Path(__file__).resolve().parents[1] / "data" / "categories.json"


@dataclass(frozen=True)
class PredefinedCategory:
    name: str
    type: str
    icon: str | None = None


def _data_file() -> Path:
    override = get_settings().predefined_categories_path
    return Path(override) if override else DATA_FILE


def load() -> list[PredefinedCategory]:
    path = _data_file()
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    items = raw.get("categories") if isinstance(raw, dict) else raw
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"{path}: expected a list of categories")
    result = []
    for item in items:
        name = item.get("name") if isinstance(item, dict) else None
        if not isinstance(name, str) or not name.strip():
            continue
        result.append(PredefinedCategory(name=name.strip(), type=item.get("type") or "", icon=item.get("icon")))
    return result
