import json
import os
import threading
from pathlib import Path
from typing import Dict, Optional
from uuid import uuid4

from chat_core.config.settings import settings
from chat_core.domain.exceptions import StorageError
from chat_core.infrastructure.logging.logger import logger


class JsonFileStorage:
    """基于单个 JSON 文件的键值存储，模拟浏览器 localStorage。

    所有键保存在 ``<root>/local_storage.json`` 中，写入先落临时文件再
    ``os.replace``，写失败时旧数据保持不变。
    文件损坏时读取会报错，但下一次写入会用新内容整体覆盖它。
    """

    FILE_NAME = "local_storage.json"

    def __init__(self, root: str | Path | None = None):
        self._root = Path(root or settings.storage_root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)
        self._path = self._root / self.FILE_NAME
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_for_write()
            data[key] = str(value)
            self._write_all(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._read_for_write()
            if key in data:
                del data[key]
                self._write_all(data)

    def _read_all(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(code="STORE_READ_ERROR", message=str(e))
        if not isinstance(data, dict):
            raise StorageError(code="STORE_READ_ERROR", message=f"{self._path} is not a mapping")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _read_for_write(self) -> Dict[str, str]:
        try:
            return self._read_all()
        except StorageError as e:
            logger.warning(
                "Discarding unreadable local storage file",
                extra={"extra": {"path": str(self._path), "error": e.message}},
            )
            return {}

    def _write_all(self, data: Dict[str, str]) -> None:
        tmp_path = self._root / f"local_storage.{uuid4().hex}.json.tmp"
        try:
            tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(code="STORE_WRITE_ERROR", message=str(e))


class MemoryStorage:
    """进程内存储，用于临时会话。"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)
