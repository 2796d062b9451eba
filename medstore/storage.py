"""JSON-file key-value store standing in for browser local storage."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from medstore import config
from medstore.errors import DeserializationError

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Outcome of reading one key: a value, or why there is none."""

    value: Any = None
    error: Optional[DeserializationError] = None
    missing: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.missing


class KeyValueStore:
    """Keeps serialized JSON strings under string keys in a single file."""

    def __init__(self, path: Path | str = None) -> None:
        self.path: Path = Path(path) if path else config.STORAGE_PATH
        self._entries: Dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Storage file %s unreadable, starting empty: %s", self.path, exc)
            return
        if not isinstance(raw, dict):
            logger.warning("Storage file %s is not a key-value object, starting empty", self.path)
            return
        self._entries = {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._entries, ensure_ascii=False), encoding="utf-8")

    def keys(self) -> List[str]:
        return list(self._entries)

    def read(self, key: str) -> LoadResult:
        """Parse the value under key without hiding failures."""
        if key not in self._entries:
            return LoadResult(missing=True)
        try:
            return LoadResult(value=json.loads(self._entries[key]))
        except ValueError as exc:
            return LoadResult(error=DeserializationError(key, str(exc)))

    def get(self, key: str, fallback: Any = None) -> Any:
        """Return the stored value, or fallback when missing, null or malformed."""
        result = self.read(key)
        if result.error is not None:
            logger.warning("Falling back to default for %s: %s", key, result.error.reason)
            return fallback
        if not result.ok or result.value is None:
            return fallback
        return result.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = json.dumps(value, ensure_ascii=False)
        self._flush()

    def remove(self, key: str) -> None:
        if self._entries.pop(key, None) is not None:
            self._flush()
