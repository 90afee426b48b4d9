"""
One-line JSON logging for the API process.

Every record carries the service name and environment. Payment code passes
``ticket_id``, ``order_id`` and ``payment_id`` through ``extra=`` so a
ticket's whole history can be grepped out of the stream.
"""

import json
import logging
from datetime import datetime, timezone

from busticket.config import settings

CONTEXT_FIELDS = ("ticket_id", "order_id", "payment_id")


class JsonFormatter(logging.Formatter):

    def __init__(self, service: str = None, environment: str = None):
        super().__init__()
        self.service = service or settings.PROJECT_NAME
        self.environment = environment or settings.ENVIRONMENT

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service,
            "env": self.environment,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


def setup_logging(level: str = None):
    """Replace the root handlers with a single JSON stream handler"""
    lvl = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(lvl)
    # Request lines from httpx would log every gateway call twice
    logging.getLogger("httpx").setLevel(max(lvl, logging.WARNING))
