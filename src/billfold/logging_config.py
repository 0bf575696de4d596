"""Logging setup for the billfold CLI."""

import logging
import sys
from datetime import datetime, UTC
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

DEFAULT_LOG_LEVEL = "WARNING"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and service name."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(UTC).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "billfold"


def setup_logging(level: str = DEFAULT_LOG_LEVEL, json_format: bool = False) -> None:
    """Configure the root logger.

    Logs go to stderr so command output on stdout stays clean.

    Args:
        level: Log level name
        json_format: Emit one JSON object per record instead of plain text
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper())
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
