"""Input adaptors for chain runs."""

from __future__ import annotations

from pathlib import Path


class InputAdaptor:
    def load(self) -> str:
        raise NotImplementedError("InputAdaptor.load must be implemented by subclasses.")


class FileInput(InputAdaptor):
    def __init__(self, path: Path) -> None:
        if not path.exists():
            raise FileNotFoundError(path)
        self._text = path.read_text(encoding="utf-8")

    def load(self) -> str:
        return self._text


class TextInput(InputAdaptor):
    def __init__(self, text: str) -> None:
        self._text = text

    def load(self) -> str:
        return self._text
