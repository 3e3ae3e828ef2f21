import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String-to-string store with localStorage semantics."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """All keys kept in one JSON object on disk, rewritten on every change.

    Reads go through an in-memory copy loaded once; a missing or unreadable
    file starts the store empty.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, str] = self._load()

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def keys(self) -> list[str]:
        return list(self._data)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("store.load_failed path=%s type=%s detail=%s", self.path, exc.__class__.__name__, exc)
            return {}
        if not isinstance(raw, dict):
            logger.error("store.load_failed path=%s detail=not a JSON object", self.path)
            return {}
        return {str(key): value for key, value in raw.items() if isinstance(value, str)}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)
