import json
import os

import pytest

from directory_sync.core.errors import PersistenceError
from directory_sync.core.kv_store import JsonFileStore


def test_missing_file_reads_defaults(tmp_path):
    store = JsonFileStore(tmp_path / "prefs.json")
    assert store.get_str("name") is None
    assert store.get_str("name", "fallback") == "fallback"
    assert store.get_int("count") == 0
    assert store.get_int("count", 7) == 7


def test_write_merges_and_persists(tmp_path):
    path = tmp_path / "nested" / "prefs.json"
    JsonFileStore(path).write({"a": "1", "b": 2})
    JsonFileStore(path).write({"b": 3, "c": "x"})

    reopened = JsonFileStore(path)
    assert reopened.get_str("a") == "1"
    assert reopened.get_int("b") == 3
    assert reopened.get_str("c") == "x"


def test_remove_and_clear(tmp_path):
    store = JsonFileStore(tmp_path / "prefs.json")
    store.write({"a": 1, "b": 2})

    store.remove("a", "missing")
    assert store.get_int("a") == 0
    assert store.get_int("b") == 2

    store.clear()
    assert not store.path.exists()
    store.clear()


def test_corrupted_file_raises_persistence_error(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError) as excinfo:
        JsonFileStore(path).get_int("a")
    assert excinfo.value.operation == "read"


def test_non_object_document_is_rejected(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonFileStore(path).get_str("a")


def test_non_integer_value_raises(tmp_path):
    store = JsonFileStore(tmp_path / "prefs.json")
    store.write({"count": "many"})

    with pytest.raises(PersistenceError):
        store.get_int("count")


def test_failed_replace_keeps_previous_document(tmp_path, monkeypatch):
    path = tmp_path / "prefs.json"
    store = JsonFileStore(path)
    store.write({"a": "before"})

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", broken_replace)

    with pytest.raises(PersistenceError) as excinfo:
        store.write({"a": "after"})

    assert excinfo.value.operation == "write"
    assert json.loads(path.read_text(encoding="utf-8")) == {"a": "before"}
    assert [p.name for p in tmp_path.iterdir()] == ["prefs.json"]


def test_write_replaces_unreadable_document(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileStore(path)

    store.write({"a": "fresh"})

    assert json.loads(path.read_text(encoding="utf-8")) == {"a": "fresh"}
    assert store.get_str("a") == "fresh"


def test_remove_rewrites_unreadable_document(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("[1, 2]", encoding="utf-8")
    store = JsonFileStore(path)

    store.remove("a")

    assert json.loads(path.read_text(encoding="utf-8")) == {}
    assert store.get_int("a") == 0
