"""JSON logging for the blog service.

Every record is one JSON line tagged with the service name and environment,
the current request id (set by `tracing.trace_middleware`), and, for audit
records, the structured `event` payload passed through `extra`.
"""

import logging, sys, json
from contextvars import ContextVar
from typing import Any

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(rid: str | None) -> None:
    _request_id.set(rid)


def get_request_id() -> str | None:
    return _request_id.get()


class JSONFormatter(logging.Formatter):
    """Render records as compact JSON.

    Args:
        service: Value of the `service` field on every line.
        env: Value of the `env` field on every line.
    """

    def __init__(self, service: str = "blog", env: str = "dev") -> None:
        super().__init__()
        self.service = service
        self.env = env

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "service": self.service,
            "env": self.env,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        rid = _request_id.get()
        if rid:
            base["request_id"] = rid
        event = getattr(record, "event", None)
        if event is not None:
            base["event"] = event
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)


def configure_logging(level: int | str = "INFO", service: str = "blog", env: str = "dev") -> logging.Logger:
    """Send root logging to stdout through `JSONFormatter`.

    Returns:
        The logger named after `service`.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(service=service, env=env))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    return logging.getLogger(service)
