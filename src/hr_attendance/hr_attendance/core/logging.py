from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger


class EngineJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()

        if log_record.get("level"):
            log_record["level"] = log_record["level"].upper()
        else:
            log_record["level"] = record.levelname


def setup_logging(level: str = "INFO", *, json: bool = True) -> None:
    """Install one stream handler on the root logger.

    Calling it again replaces the handler installed by a previous call.
    """

    logger = logging.getLogger()
    for handler in list(logger.handlers):
        if getattr(handler, "_hr_attendance", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._hr_attendance = True  # type: ignore[attr-defined]
    if json:
        handler.setFormatter(EngineJsonFormatter("%(timestamp) %(level) %(name) %(message)"))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper())

    logging.getLogger("mysql.connector").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
