"""
Unit tests for session persistence.
"""
import json
import logging
from pathlib import Path

from polysweeper import GameEngine, Session, SessionStore


class TestSessionStore:
    """Test loading and saving sessions."""

    def test_missing_file_gives_default(self, tmp_path: Path) -> None:
        """No save file means a fresh session."""
        store = SessionStore(tmp_path / "save.json")
        assert store.load() == Session()

    def test_save_then_load(self, tmp_path: Path) -> None:
        """A saved session loads back unchanged."""
        store = SessionStore(tmp_path / "save.json")
        session = Session(level=4, max_level=6, total_cells=642, start_time=1.5)
        assert store.save(session) is True
        assert store.load() == session

    def test_save_writes_json(self, tmp_path: Path) -> None:
        """The file holds plain JSON fields."""
        path = tmp_path / "save.json"
        SessionStore(path).save(Session(level=2))
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["level"] == 2
        assert data["start_time"] is None

    def test_save_creates_parent_directories(self, tmp_path: Path) -> None:
        """Nested save paths are created on demand."""
        store = SessionStore(tmp_path / "a" / "b" / "save.json")
        assert store.save(Session()) is True
        assert store.path.exists()

    def test_corrupt_file_gives_default(self, tmp_path: Path, caplog) -> None:
        """Unparseable JSON is logged and replaced by a default session."""
        path = tmp_path / "save.json"
        path.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            session = SessionStore(path).load()
        assert session == Session()
        assert "unreadable save file" in caplog.text

    def test_invalid_fields_give_default(self, tmp_path: Path) -> None:
        """Well-formed JSON with bad values is also rejected."""
        path = tmp_path / "save.json"
        path.write_text(json.dumps({"level": "high"}), encoding="utf-8")
        assert SessionStore(path).load() == Session()

    def test_unwritable_path_is_not_fatal(self, tmp_path: Path, caplog) -> None:
        """Save failures are logged and reported, never raised."""
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        store = SessionStore(blocker / "save.json")
        with caplog.at_level(logging.WARNING):
            assert store.save(Session()) is False
        assert "Could not save session" in caplog.text

    def test_clear_removes_file(self, tmp_path: Path) -> None:
        """Clear deletes the save and tolerates a missing file."""
        store = SessionStore(tmp_path / "save.json")
        store.save(Session())
        store.clear()
        assert not store.path.exists()
        store.clear()

    def test_store_as_engine_save_hook(self, tmp_path: Path, small_board) -> None:
        """The engine keeps the save file current."""
        store = SessionStore(tmp_path / "save.json")
        engine = GameEngine(
            session=Session(level=3), board=small_board, on_change=store.save
        )
        engine.toggle_flag(0)
        loaded = store.load()
        assert loaded.level == 3
        assert loaded.flags_placed == 1
        assert loaded.total_cells == 42
