"""
Logging utilities for Lambda functions.

Provides structured JSON logging with correlation IDs for tracing requests.
"""

import json
import logging
import os
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Attributes present on every LogRecord; anything else came in via extra=
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """
    Render log records as one JSON object per line.

    Example:
        logger = get_logger(__name__)
        logger.info("Page updated", extra={"pageId": "abc", "correlationId": "req-1"})
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Remove None values
        log_entry = {k: v for k, v in log_entry.items() if v is not None}

        return json.dumps(log_entry, default=str)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a logger that writes JSON lines to stdout (picked up by CloudWatch).

    Handlers are attached once per logger name, so repeated calls at module
    import time are safe.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level or os.getenv("LOG_LEVEL", "INFO"))

    if not any(getattr(h, "_json_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        handler._json_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def get_correlation_id(event: Dict[str, Any]) -> str:
    """
    Extract or generate correlation ID from Lambda event.

    Checks for correlation ID in:
    1. event['requestContext']['requestId'] (AppSync)
    2. event['request']['headers']['x-correlation-id']
    3. Generates new UUID if not found
    """
    # Try AppSync request context
    if "requestContext" in event and "requestId" in (event.get("requestContext") or {}):
        return str(event["requestContext"]["requestId"])

    # Try custom header
    headers = (event.get("request") or {}).get("headers") or {}
    if "x-correlation-id" in headers:
        return str(headers["x-correlation-id"])

    # Generate new ID
    return str(uuid.uuid4())
