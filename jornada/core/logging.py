"""
Structured logging for the jornada logger.

Development gets one readable line per record with the structured fields
appended as key=value pairs; production gets one JSON object per line.
Records are tagged with the request_id bound by RequestIdMiddleware, so
backup and restore events triggered by an HTTP call can be correlated
with the request that caused them.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Dict, Optional

LOGGER_NAME = "jornada"

# Extra attributes copied from records into the formatted output, in order.
STRUCTURED_FIELDS = (
    "event_type",
    "error_code",
    "status",
    "method",
    "path",
    "latency_bucket",
    "count",
    "created_at",
)

request_id_ctx_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id(default: Optional[str] = None) -> Optional[str]:
    rid = request_id_ctx_var.get()
    return rid if rid is not None else default


def latency_bucket_ms(latency_ms: Optional[float]) -> str:
    if latency_ms is None:
        return "unknown"
    for bound, label in ((10, "<10ms"), (100, "10-100ms"), (500, "100-500ms"), (1000, "500-1000ms")):
        if latency_ms < bound:
            return label
    return ">=1000ms"


def _record_time(record: logging.LogRecord) -> str:
    stamp = datetime.fromtimestamp(record.created, timezone.utc)
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _structured(record: logging.LogRecord) -> Dict[str, object]:
    return {name: getattr(record, name) for name in STRUCTURED_FIELDS if getattr(record, name, None) is not None}


class RequestIdFilter(logging.Filter):
    """Fill record.request_id from the bound context when the caller did not pass one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": _record_time(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
            **_structured(record),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


class PrettyFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [_record_time(record), record.levelname, f"[{LOGGER_NAME}]"]
        rid = getattr(record, "request_id", None)
        if rid:
            parts.append(f"[rid={rid}]")
        parts.append(record.getMessage())
        parts.extend(f"{k}={v}" for k, v in _structured(record).items())
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(env: str = "development") -> None:
    """Install a single stdout handler on the jornada logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if env.lower() == "production" else PrettyFormatter())
    handler.addFilter(RequestIdFilter())

    logger.handlers = [handler]
    # Propagate so pytest's caplog sees records.
    logger.propagate = True

    logging.getLogger("uvicorn").propagate = False
    logging.getLogger("uvicorn.error").propagate = False


def _safe_truncate(value, limit: int = 500) -> str:
    try:
        text = str(value)
    except Exception:
        return "<unserializable>"
    return text if len(text) <= limit else text[:limit] + "...<truncated>"


def log_event(
    level: str,
    msg: str,
    *,
    request_id: Optional[str] = None,
    event_type: Optional[str] = None,
    error_code: Optional[str] = None,
    extra: Optional[Dict[str, object]] = None,
) -> None:
    """Emit one structured record; extra values are stringified and truncated."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        configure_logging(os.getenv("ENV", "development"))

    fields: Dict[str, object] = {"request_id": request_id or get_request_id()}
    if event_type:
        fields["event_type"] = event_type
    if error_code:
        fields["error_code"] = error_code
    for key, value in (extra or {}).items():
        fields[key] = _safe_truncate(value)

    getattr(logger, level, logger.info)(msg, extra=fields)
