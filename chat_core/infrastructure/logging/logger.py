"""结构化日志。

每条日志输出为一行 JSON：{ts, level, name, msg, ...fields}。
业务字段统一通过 extra={"extra": {...}} 传入，由 JsonFormatter 平铺到顶层。
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from chat_core.config.settings import settings


LOGGER_NAME = "chat_core"
LOG_FILE_NAME = "chat.log"
REDACTED_LENGTH = 64


class JsonFormatter(logging.Formatter):
    def __init__(self, redact: bool = False):
        super().__init__()
        self._redact = redact

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if self._redact:
            msg = (msg or "")[:REDACTED_LENGTH]
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload = {
            "ts": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
            "msg": msg,
        }
        fields = getattr(record, "extra", None)
        if isinstance(fields, dict):
            # 业务字段不允许覆盖基础字段
            payload.update({k: v for k, v in fields.items() if k not in payload})
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger(cfg=settings, name: str = LOGGER_NAME) -> logging.Logger:
    """按配置挂载文件（及可选的控制台）处理器；重复调用不会重复挂载。"""

    log = logging.getLogger(name)
    log.setLevel(getattr(cfg, "log_level", "INFO").upper())
    if getattr(log, "_chat_core_configured", False):
        return log

    formatter = JsonFormatter(redact=bool(getattr(cfg, "log_redact_content", False)))
    log_dir = Path(cfg.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8")
    file_handler.setFormatter(formatter)
    log.addHandler(file_handler)

    if getattr(cfg, "log_console", False):
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        log.addHandler(console)

    log._chat_core_configured = True  # type: ignore[attr-defined]
    return log


def log_fields(level: int, message: str, **fields: Any) -> None:
    logger.log(level, message, extra={"extra": fields})


logger = setup_logger()
