# orgpanel/core/logger.py
"""Structured logging setup with JSON formatter"""
from contextvars import ContextVar, Token
from typing import Optional
import logging
import json
import sys

from orgpanel.core.config import LOG_LEVEL
from orgpanel.utils.datetime_utils import get_utc_now, to_iso_string

# Set by the request middleware for the duration of one HTTP request
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def bind_request_id(request_id: str) -> Token:
    return request_id_var.set(request_id)


def unbind_request_id(token: Token) -> None:
    request_id_var.reset(token)


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    Lines written while a request is in flight carry its request_id, so
    service-level warnings can be matched to the access line.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": to_iso_string(get_utc_now()),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def get_logger(name: str, level: str = LOG_LEVEL) -> logging.Logger:
    """Logger writing JSON lines to stdout; handlers are attached once per name."""
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.setLevel(level)

    return logger
