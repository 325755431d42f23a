import json
import tempfile
from pathlib import Path

import pytest

from chat_core.infrastructure.storage.json_store import JsonFileStorage
from chat_core.domain.exceptions import StorageError


def test_json_storage_set_get_remove():
    with tempfile.TemporaryDirectory() as d:
        root = Path(d) / ".storage"
        storage = JsonFileStorage(root=root)
        assert storage.get_item("chatConversations") is None
        storage.set_item("chatConversations", "[]")
        storage.set_item("activeConversationId", "abc")
        assert storage.get_item("chatConversations") == "[]"

        reopened = JsonFileStorage(root=root)
        assert reopened.get_item("activeConversationId") == "abc"

        reopened.remove_item("activeConversationId")
        reopened.remove_item("never-set")
        assert reopened.get_item("activeConversationId") is None
        assert json.loads(storage.path.read_text(encoding="utf-8")) == {"chatConversations": "[]"}
        assert list(root.glob("*.tmp")) == []


def test_json_storage_corrupt_file_raises():
    with tempfile.TemporaryDirectory() as d:
        storage = JsonFileStorage(root=d)
        storage.path.write_text("{broken", encoding="utf-8")
        with pytest.raises(StorageError) as exc:
            storage.get_item("chatConversations")
        assert exc.value.code == "STORE_READ_ERROR"


def test_json_storage_failed_write_keeps_previous(monkeypatch):
    with tempfile.TemporaryDirectory() as d:
        storage = JsonFileStorage(root=d)
        storage.set_item("k", "v1")

        def broken_replace(*a, **kw):
            raise OSError("read-only filesystem")

        monkeypatch.setattr("os.replace", broken_replace)
        with pytest.raises(StorageError) as exc:
            storage.set_item("k", "v2")
        assert exc.value.code == "STORE_WRITE_ERROR"
        monkeypatch.undo()
        assert storage.get_item("k") == "v1"
        assert list(Path(d).glob("*.tmp")) == []


def test_json_storage_write_recovers_from_corrupt_file():
    with tempfile.TemporaryDirectory() as d:
        storage = JsonFileStorage(root=d)
        storage.path.write_text("{broken", encoding="utf-8")
        storage.set_item("activeConversationId", "abc")
        assert storage.get_item("activeConversationId") == "abc"
        assert json.loads(storage.path.read_text(encoding="utf-8")) == {"activeConversationId": "abc"}
