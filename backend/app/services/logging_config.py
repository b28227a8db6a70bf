"""
Structured logging for SmartRate Estimator.

Every record emitted while a request is being served carries that request's
X-Request-ID (set by RequestTimingMiddleware through ``request_id_var``), so
LLM calls and catalog saves can be traced back to the call that caused them.
"""
import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_EXTRA_FIELDS = ("request_id", "duration_ms", "http_method", "http_path", "http_status", "model")


class RequestIdFilter(logging.Filter):
    """Copies the current request id onto records that were not given one explicitly."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_var.get() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        for attr in _EXTRA_FIELDS:
            value = getattr(record, attr, None)
            if value is not None and value != "-":
                entry[attr] = value
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = True):
    """Install a single stdout handler on the root logger (JSON or plain text)."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(name)s] [%(request_id)s] %(levelname)s: %(message)s"
        ))

    root.handlers = [handler]

    # litellm logs every request at INFO
    for name in ("uvicorn.access", "httpcore", "httpx", "LiteLLM"):
        logging.getLogger(name).setLevel(logging.WARNING)
