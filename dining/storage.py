"""
Whole-document JSON persistence for the item list, registry and override table.

Documents are read once at start and rewritten once at the end. Writes go to
a temp file in the same directory and are swapped in with ``os.replace`` so a
failed write never leaves a half-written document behind.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from dining.models import Item, Restaurant

logger = logging.getLogger(__name__)

ITEMS_FILENAME = "videos.json"
RESTAURANTS_FILENAME = "restaurants.json"
OVERRIDES_FILENAME = "overrides.json"


class StorageError(Exception):
    pass


class MissingDocumentError(StorageError):
    pass


class MalformedDocumentError(StorageError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"Malformed document {path}: {reason}")
        self.path = path
        self.reason = reason


class DataStore:
    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    @property
    def items_path(self) -> Path:
        return self.data_dir / ITEMS_FILENAME

    @property
    def restaurants_path(self) -> Path:
        return self.data_dir / RESTAURANTS_FILENAME

    @property
    def overrides_path(self) -> Path:
        return self.data_dir / OVERRIDES_FILENAME

    def load_items(self) -> List[Item]:
        path = self.items_path
        if not path.exists():
            raise MissingDocumentError(f"No item list found at {path}")
        raw = _read_json(path)
        if not isinstance(raw, list):
            raise MalformedDocumentError(path, "expected a JSON array")
        try:
            return [Item.model_validate(entry) for entry in raw]
        except ValidationError as exc:
            raise MalformedDocumentError(path, str(exc)) from exc

    def load_restaurants(self) -> Dict[str, Restaurant]:
        path = self.restaurants_path
        if not path.exists():
            return {}
        raw = _read_json(path)
        if not isinstance(raw, dict):
            raise MalformedDocumentError(path, "expected a JSON object keyed by slug")
        try:
            registry = {key: Restaurant.model_validate(value) for key, value in raw.items()}
        except ValidationError as exc:
            raise MalformedDocumentError(path, str(exc)) from exc
        for key, restaurant in registry.items():
            if key != restaurant.slug:
                logger.warning("Registry key %r does not match restaurant slug %r", key, restaurant.slug)
        return registry

    def load_overrides(self) -> Dict[str, str]:
        path = self.overrides_path
        if not path.exists():
            return {}
        raw = _read_json(path)
        if isinstance(raw, dict) and isinstance(raw.get("overrides"), dict):
            raw = raw["overrides"]
        if not isinstance(raw, dict):
            raise MalformedDocumentError(path, "expected a JSON object of item id -> name")
        return {str(key): value for key, value in raw.items() if isinstance(value, str)}

    def save_items(self, items: List[Item]) -> None:
        write_json_atomic(self.items_path, [item.to_dict() for item in items])

    def save_restaurants(self, registry: Dict[str, Restaurant]) -> None:
        write_json_atomic(self.restaurants_path, {key: value.to_dict() for key, value in registry.items()})


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedDocumentError(path, str(exc)) from exc


def write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
