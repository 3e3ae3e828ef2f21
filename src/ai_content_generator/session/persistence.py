import json
import logging
from collections.abc import Iterable

from pydantic import TypeAdapter

from ai_content_generator.content.types import FontTheme, SavedItem, SessionSnapshot
from ai_content_generator.storage.local_store import KeyValueStore

logger = logging.getLogger(__name__)

SAVED_ITEMS_KEY = "savedContent"
FONT_THEME_KEY = "fontTheme"
SESSION_KEY = "ai-content-generator-session"
MAX_SAVED_ITEMS = 50

_saved_items_adapter = TypeAdapter(list[SavedItem])


class PersistenceManager:
    """Owns the three persisted keys: saved items, font theme, session snapshot.

    Reads never raise; a malformed value is logged and replaced by the
    caller's default. Every mutation rewrites the whole value.
    """

    def __init__(self, store: KeyValueStore, max_saved_items: int = MAX_SAVED_ITEMS) -> None:
        self.store = store
        self.max_saved_items = max_saved_items

    def load_saved_items(self, default: Iterable[SavedItem] = ()) -> list[SavedItem]:
        raw = self._read(SAVED_ITEMS_KEY)
        if raw is None:
            return list(default)
        try:
            return _saved_items_adapter.validate_json(raw)
        except ValueError as exc:
            logger.error("persist.read_failed key=%s type=%s detail=%s", SAVED_ITEMS_KEY, exc.__class__.__name__, exc)
            return list(default)

    def save_item(self, item: SavedItem) -> list[SavedItem]:
        items = [item, *self.load_saved_items()][: self.max_saved_items]
        self._write_saved_items(items)
        logger.info("persist.saved id=%s total=%d", item.id, len(items))
        return items

    def delete_item(self, item_id: str) -> list[SavedItem]:
        current = self.load_saved_items()
        items = [item for item in current if item.id != item_id]
        if len(items) != len(current):
            logger.info("persist.deleted id=%s total=%d", item_id, len(items))
        self._write_saved_items(items)
        return items

    def find_item(self, item_id: str) -> SavedItem | None:
        for item in self.load_saved_items():
            if item.id == item_id:
                return item
        return None

    def load_font_theme(self, default: FontTheme = FontTheme.CYBERPUNK) -> FontTheme:
        raw = self._read(FONT_THEME_KEY)
        if raw is None:
            return default
        try:
            return FontTheme(json.loads(raw))
        except (TypeError, ValueError) as exc:
            logger.error("persist.read_failed key=%s type=%s detail=%s", FONT_THEME_KEY, exc.__class__.__name__, exc)
            return default

    def save_font_theme(self, theme: FontTheme) -> None:
        self._write(FONT_THEME_KEY, json.dumps(FontTheme(theme).value))

    def load_session(self) -> SessionSnapshot | None:
        raw = self._read(SESSION_KEY)
        if raw is None:
            return None
        try:
            return SessionSnapshot.model_validate_json(raw)
        except ValueError as exc:
            logger.error("persist.session_discarded type=%s detail=%s", exc.__class__.__name__, exc)
            self.clear_session()
            return None

    def save_session(self, snapshot: SessionSnapshot) -> None:
        self._write(SESSION_KEY, snapshot.model_dump_json(by_alias=True))
        logger.debug("persist.session_saved chars=%d", len(snapshot.content))

    def clear_session(self) -> None:
        try:
            self.store.remove(SESSION_KEY)
        except OSError as exc:
            logger.error("persist.remove_failed key=%s detail=%s", SESSION_KEY, exc)

    def _write_saved_items(self, items: list[SavedItem]) -> None:
        self._write(SAVED_ITEMS_KEY, _saved_items_adapter.dump_json(items, by_alias=True).decode("utf-8"))

    def _read(self, key: str) -> str | None:
        try:
            return self.store.get(key)
        except OSError as exc:
            logger.error("persist.read_failed key=%s type=%s detail=%s", key, exc.__class__.__name__, exc)
            return None

    def _write(self, key: str, value: str) -> None:
        try:
            self.store.set(key, value)
        except (OSError, TypeError) as exc:
            logger.error("persist.write_failed key=%s type=%s detail=%s", key, exc.__class__.__name__, exc)
