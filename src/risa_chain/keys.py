"""Resolution of key identifiers against a snapshot of saved keys."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from risa_chain.models.saved_key import SavedKey


class KeyResolver:
    def __init__(self, keys: Iterable[SavedKey]) -> None:
        self._keys_by_id: Mapping[str, SavedKey] = MappingProxyType({key.id: key for key in keys})

    def __contains__(self, key_id: object) -> bool:
        return key_id in self._keys_by_id

    def __len__(self) -> int:
        return len(self._keys_by_id)

    def get(self, key_id: str) -> SavedKey | None:
        return self._keys_by_id.get(key_id)

    def resolve(self, key_id: str | None, *, operation: str = "RSA operation") -> SavedKey:
        if not key_id:
            raise ValueError(f"{operation} requires a key: keyId is not set.")
        key = self._keys_by_id.get(key_id)
        if key is None:
            raise LookupError(f"Key not found: {key_id!r}. It may have been deleted.")
        return key
