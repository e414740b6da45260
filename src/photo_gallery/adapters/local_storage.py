"""JSON-file key/value storage for the persisted session."""

import json
import os
from dataclasses import dataclass
from pathlib import Path

from photo_gallery.services.auth import KeyValueStorage


@dataclass
class JsonFileStorage(KeyValueStorage):
    """Key/value storage persisted as a single JSON object on disk."""

    path: Path

    def get_item(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        entries = self._read()
        entries[key] = value
        self._write(entries)

    def remove_item(self, key: str) -> None:
        entries = self._read()
        if entries.pop(key, None) is not None:
            self._write(entries)

    def _read(self) -> dict[str, object]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, entries: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(entries), encoding="utf-8")
        os.replace(tmp_path, self.path)
