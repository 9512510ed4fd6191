"""JSON file collections for keys and history."""

from __future__ import annotations

import builtins
import json
import logging
from pathlib import Path
from typing import Callable, Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from risa_chain.models.saved_key import SavedKey

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class KeyCollection(Protocol):
    def list(self) -> builtins.list[SavedKey]: ...


class JsonCollection(Generic[ModelT]):
    """
    A list of pydantic records stored as one JSON array, keyed by their "id".
    Dates are written as ISO strings and revived by the model on read.
    """

    def __init__(self, path: Path, model: type[ModelT], *, newest_first: bool = False) -> None:
        self.path = path
        self._model = model
        self._newest_first = newest_first

    def list(self) -> builtins.list[ModelT]:
        if not self.path.exists():
            return []
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, builtins.list):
            raise ValueError(f"{self.path} must contain a JSON array.")
        items: builtins.list[ModelT] = []
        for index, record in enumerate(raw):
            try:
                items.append(self._model.model_validate(record))
            except ValidationError as exc:
                logger.warning("Skipped invalid record %d in %s: %s", index, self.path, exc)
        return items

    def get(self, item_id: str) -> ModelT | None:
        for item in self.list():
            if getattr(item, "id") == item_id:
                return item
        return None

    def save(self, item: ModelT) -> None:
        items = self.list()
        item_id = getattr(item, "id")
        for index, existing in enumerate(items):
            if getattr(existing, "id") == item_id:
                items[index] = item
                break
        else:
            if self._newest_first:
                items.insert(0, item)
            else:
                items.append(item)
        self._write(items)

    def remove(self, item_id: str) -> bool:
        items = self.list()
        kept = [item for item in items if getattr(item, "id") != item_id]
        if len(kept) == len(items):
            return False
        self._write(kept)
        return True

    def retain(self, keep: Callable[[ModelT], bool]) -> int:
        """Drop every record for which keep returns False; return how many were dropped."""
        items = self.list()
        kept = [item for item in items if keep(item)]
        dropped = len(items) - len(kept)
        if dropped:
            self._write(kept)
        return dropped

    def clear(self) -> None:
        self._write([])

    def _write(self, items: builtins.list[ModelT]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [item.model_dump(mode="json", by_alias=True) for item in items]
        self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
