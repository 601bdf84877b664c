"""
Tests for device-local key-value stores.
"""

import json

from foco_finance.services.storage import InMemoryLocalStore, JsonFileLocalStore


class TestJsonFileLocalStore:
    """Tests for the JSON file store."""

    def test_missing_file_reads_default(self, tmp_path):
        """Test reads before any write."""
        store = JsonFileLocalStore(str(tmp_path / "storage.json"))
        assert store.get("key") is None
        assert store.get("key", []) == []

    def test_set_get_remove(self, tmp_path):
        """Test the basic key-value contract."""
        store = JsonFileLocalStore(str(tmp_path / "storage.json"))
        store.set("theme", "dark")
        store.set("items", [{"id": "1"}])
        assert store.get("theme") == "dark"
        assert store.get("items") == [{"id": "1"}]
        store.remove("theme")
        assert store.get("theme") is None
        store.remove("never-set")

    def test_persists_across_instances(self, tmp_path):
        """Test that data lives in the file, not the object."""
        path = tmp_path / "nested" / "dir" / "storage.json"
        JsonFileLocalStore(str(path)).set("name", "João")
        assert JsonFileLocalStore(str(path)).get("name") == "João"
        assert json.loads(path.read_text(encoding="utf-8")) == {"name": "João"}

    def test_corrupt_file_reads_empty(self, tmp_path):
        """Test that a broken file behaves like an empty store."""
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileLocalStore(str(path))
        assert store.get("key", "default") == "default"
        store.set("key", 1)
        assert store.get("key") == 1


class TestInMemoryLocalStore:
    """Tests for the dict-backed store."""

    def test_values_are_copied(self):
        """Test that mutating a read value does not change the store."""
        store = InMemoryLocalStore()
        store.set("items", [1, 2])
        items = store.get("items")
        items.append(3)
        assert store.get("items") == [1, 2]

    def test_initial_data(self):
        """Test seeding the store."""
        store = InMemoryLocalStore({"a": 1})
        assert store.get("a") == 1
        store.remove("a")
        assert store.get("a", 0) == 0
