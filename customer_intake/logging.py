"""Logging setup for customer-intake.

Service log calls attach the operation and the customer they concern through
``extra=``; those attributes land on the ``LogRecord`` and the JSON formatter
lifts them into top-level keys so log pipelines can filter on them.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# LogRecord attributes set by the service through ``extra=``
CONTEXT_FIELDS = ("operation", "customer_id", "customer_code", "field")

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
STANDARD_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Drivers are chatty at INFO
QUIET_LOGGERS = ("psycopg", "confluent_kafka", "faker")


def setup_logging(level: str = "INFO", format_type: str = "standard") -> None:
    """Route all logging to stdout, replacing any existing root handlers.

    Parameters
    ----------
    level : str
        Log level name; unknown names fall back to INFO.
    format_type : str
        ``"standard"`` for pipe-separated text or ``"json"`` for one JSON
        object per line.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=STANDARD_FORMAT, datefmt=STANDARD_DATEFMT)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logging.getLogger("customer_intake").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, carrying the service context fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)
