import logging

from ai_content_generator.content.types import ContentType, FontTheme, ResponseLength, SavedItem, SessionSnapshot
from ai_content_generator.session.persistence import (
    FONT_THEME_KEY,
    SAVED_ITEMS_KEY,
    SESSION_KEY,
    PersistenceManager,
)
from ai_content_generator.storage.local_store import InMemoryStore, JsonFileStore


def _item(n: int) -> SavedItem:
    return SavedItem(
        id=f"id-{n}",
        prompt=f"prompt {n}",
        content_type=ContentType.SUMMARY,
        content=f"content {n}",
        creativity=0.3,
        length=ResponseLength.LONG,
    )


def test_save_then_load_round_trip() -> None:
    manager = PersistenceManager(InMemoryStore())
    item = _item(1)
    manager.save_item(item)

    loaded = manager.load_saved_items()
    assert loaded == [item]
    restored = loaded[0]
    assert restored.prompt == "prompt 1"
    assert restored.content_type is ContentType.SUMMARY
    assert restored.content == "content 1"
    assert restored.creativity == 0.3
    assert restored.length is ResponseLength.LONG


def test_saved_items_use_camel_case_keys() -> None:
    store = InMemoryStore()
    PersistenceManager(store).save_item(_item(1))
    raw = store.get(SAVED_ITEMS_KEY)
    assert raw is not None
    assert '"contentType":"Summary"' in raw
    assert '"creativityLevel":0.3' in raw
    assert '"responseLength":"long"' in raw


def test_saved_items_capped_newest_first() -> None:
    manager = PersistenceManager(InMemoryStore())
    for n in range(51):
        manager.save_item(_item(n))

    items = manager.load_saved_items()
    assert len(items) == 50
    assert items[0].id == "id-50"
    assert "id-0" not in [item.id for item in items]


def test_duplicates_are_kept() -> None:
    manager = PersistenceManager(InMemoryStore())
    manager.save_item(_item(1))
    manager.save_item(_item(1))
    assert [item.id for item in manager.load_saved_items()] == ["id-1", "id-1"]


def test_delete_unknown_id_is_noop() -> None:
    manager = PersistenceManager(InMemoryStore())
    for n in range(3):
        manager.save_item(_item(n))
    before = manager.load_saved_items()

    assert manager.delete_item("missing") == before
    assert manager.load_saved_items() == before


def test_delete_keeps_relative_order() -> None:
    manager = PersistenceManager(InMemoryStore())
    for n in range(4):
        manager.save_item(_item(n))

    items = manager.delete_item("id-2")
    assert [item.id for item in items] == ["id-3", "id-1", "id-0"]
    assert [item.id for item in manager.load_saved_items()] == ["id-3", "id-1", "id-0"]


def test_malformed_saved_items_fall_back_to_default(caplog) -> None:
    manager = PersistenceManager(InMemoryStore({SAVED_ITEMS_KEY: "{not json"}))
    fallback = [_item(9)]

    with caplog.at_level(logging.ERROR):
        assert manager.load_saved_items(default=fallback) == fallback

    assert any("persist.read_failed key=savedContent" in record.getMessage() for record in caplog.records)


def test_font_theme_round_trip_and_default() -> None:
    store = InMemoryStore()
    manager = PersistenceManager(store)
    assert manager.load_font_theme() is FontTheme.CYBERPUNK

    manager.save_font_theme(FontTheme.RETRO)
    assert store.get(FONT_THEME_KEY) == '"retro"'
    assert manager.load_font_theme() is FontTheme.RETRO


def test_malformed_font_theme_falls_back() -> None:
    manager = PersistenceManager(InMemoryStore({FONT_THEME_KEY: '"vaporwave"'}))
    assert manager.load_font_theme(default=FontTheme.MODERN) is FontTheme.MODERN


def test_session_round_trip_and_clear() -> None:
    store = InMemoryStore()
    manager = PersistenceManager(store)
    snapshot = SessionSnapshot(
        prompt="p",
        content_type=ContentType.PARAGRAPH,
        content="generated",
        creativity=0.9,
        length=ResponseLength.SHORT,
    )
    manager.save_session(snapshot)
    assert '"generatedContent":"generated"' in (store.get(SESSION_KEY) or "")
    assert manager.load_session() == snapshot

    manager.clear_session()
    assert store.get(SESSION_KEY) is None
    assert manager.load_session() is None


def test_malformed_session_is_discarded() -> None:
    store = InMemoryStore({SESSION_KEY: '{"prompt": 1'})
    manager = PersistenceManager(store)

    assert manager.load_session() is None
    assert store.get(SESSION_KEY) is None


def test_json_file_store_survives_reopen(tmp_path) -> None:
    path = tmp_path / "nested" / "local_storage.json"
    manager = PersistenceManager(JsonFileStore(path))
    manager.save_item(_item(1))
    manager.save_font_theme(FontTheme.MODERN)

    reopened = PersistenceManager(JsonFileStore(path))
    assert [item.id for item in reopened.load_saved_items()] == ["id-1"]
    assert reopened.load_font_theme() is FontTheme.MODERN


def test_json_file_store_ignores_corrupt_file(tmp_path, caplog) -> None:
    path = tmp_path / "local_storage.json"
    path.write_text("[[[", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        store = JsonFileStore(path)

    assert store.keys() == []
    assert any("store.load_failed" in record.getMessage() for record in caplog.records)
    store.set("fontTheme", '"retro"')
    assert JsonFileStore(path).get("fontTheme") == '"retro"'
