from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from app.core.context import get_request_id, get_request_path
from app.config import get_settings

HANDLER_NAME = "copilot"
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "openai")


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        record.request_path = get_request_path() or "-"
        return True


def _fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "request_id": getattr(record, "request_id", "-"),
        "path": getattr(record, "request_path", "-"),
        "msg": record.getMessage(),
    }


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = _fields(record)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        f = _fields(record)
        line = f"{f['ts']} {f['level']:<7} [{f['request_id']} {f['path']}] {f['logger']}: {f['msg']}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging() -> logging.Handler:
    """
    Install the stdout handler on the root logger.

    Safe to call once per create_app(): a previously installed copilot
    handler is replaced, handlers added by others (pytest caplog) are kept.
    """
    settings = get_settings()

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonFormatter() if settings.log_json else TextFormatter())
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
