"""Key-value store tests."""

import sqlite3

import pytest

from tensetrainer.classroom import MemoryStore, ProgressTracker, SQLiteStore
from tensetrainer.curriculum import TENSES
from tensetrainer.errors import PersistenceError


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return SQLiteStore(tmp_path / "store.db")


class TestKeyValueStore:
    """Behaviour shared by every store."""

    def test_missing_key_is_none(self, any_store):
        assert any_store.get("nothing") is None

    def test_set_then_get(self, any_store):
        value = {"streak": 2, "words": ["zeal", "أمل"], "date": None}
        assert any_store.set("blob", value) is True
        assert any_store.get("blob") == value

    def test_last_write_wins(self, any_store):
        any_store.set("blob", 1)
        any_store.set("blob", 2)
        assert any_store.get("blob") == 2

    def test_delete(self, any_store):
        any_store.set("blob", [1])
        assert any_store.delete("blob") is True
        assert any_store.get("blob") is None
        assert any_store.delete("blob") is True

    def test_stored_values_are_copies(self, any_store):
        value = {"items": [1]}
        any_store.set("blob", value)
        value["items"].append(2)
        assert any_store.get("blob") == {"items": [1]}

    def test_unserializable_value_is_rejected(self, any_store):
        assert any_store.set("blob", {"when": object()}) is False
        assert any_store.get("blob") is None


class TestSQLiteStore:
    """Durability and failure reporting."""

    def test_values_survive_reopen(self, tmp_path):
        path = tmp_path / "nested" / "store.db"
        SQLiteStore(path).set("progress", {"streak": 4})
        assert SQLiteStore(path).get("progress") == {"streak": 4}

    def test_corrupt_row_reads_as_absent(self, tmp_path):
        path = tmp_path / "store.db"
        store = SQLiteStore(path)
        conn = sqlite3.connect(str(path))
        conn.execute(
            "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
            ("progress", "{not json", "2024-05-15T00:00:00"),
        )
        conn.commit()
        conn.close()

        assert store.get("progress") is None

    def test_missing_table_reports_failure(self, tmp_path):
        path = tmp_path / "store.db"
        store = SQLiteStore(path)
        conn = sqlite3.connect(str(path))
        conn.execute("DROP TABLE kv_store")
        conn.commit()
        conn.close()

        assert store.get("progress") is None
        assert store.set("progress", {}) is False
        assert store.delete("progress") is False

    def test_read_raises_persistence_error_internally(self, tmp_path):
        path = tmp_path / "store.db"
        store = SQLiteStore(path)
        conn = sqlite3.connect(str(path))
        conn.execute("DROP TABLE kv_store")
        conn.commit()
        conn.close()

        with pytest.raises(PersistenceError):
            store._read("progress")


class TestUnavailableLocation:
    """A store location that cannot be created degrades instead of crashing."""

    @pytest.fixture
    def blocked_path(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a regular file, not a directory", encoding="utf-8")
        return blocker / "sub" / "store.db"

    def test_store_is_built_but_unavailable(self, blocked_path):
        store = SQLiteStore(blocked_path)
        assert store.available is False

    def test_reads_absent_and_writes_fail(self, blocked_path):
        store = SQLiteStore(blocked_path)
        assert store.get("progress") is None
        assert store.set("progress", {"streak": 1}) is False
        assert store.delete("progress") is False
        with pytest.raises(PersistenceError):
            store._read("progress")

    def test_progress_tracker_falls_back_to_defaults(self, blocked_path):
        tracker = ProgressTracker(SQLiteStore(blocked_path))
        assert tracker.active_tense() == TENSES[0]
        tracker.complete_tense(TENSES[0])
        assert tracker.active_tense() == TENSES[1]
