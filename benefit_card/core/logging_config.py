import logging
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from .config import get_settings


class UTCFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record.setdefault("app", settings.app_name)
        log_record.setdefault("service", settings.service_name)
        log_record.setdefault("module", record.name)
        log_record["level"] = record.levelname.lower()
        if "details" not in log_record:
            log_record["details"] = {}


settings = get_settings()
_configured = False


def configure_logging() -> logging.Logger:
    global _configured
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if _configured:
        # uvicorn may have re-attached its own handlers since the first call
        _tune_library_loggers()
        return root_logger

    root_logger.handlers.clear()

    formatter = UTCFormatter("%(timestamp)s %(level)s %(message)s")

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(level)
    root_logger.addHandler(stream_handler)

    _tune_library_loggers()
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _configured = True
    return root_logger


def get_logger(module_name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(module_name)


def mask_card_number(card_number: int) -> str:
    """Only the last four digits of a card number ever reach the logs."""
    return f"****{str(card_number)[-4:]}"


def _tune_library_loggers() -> None:
    """Route uvicorn loggers through the root JSON handler.

    Uvicorn installs its own handlers during startup. Clearing them and enabling
    propagation keeps access logs in the same JSON stream. Safe to call repeatedly.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "uvicorn.asgi"):
        lib_logger = logging.getLogger(name)
        lib_logger.disabled = False
        lib_logger.setLevel(level if name != "uvicorn.access" else logging.INFO)
        lib_logger.handlers.clear()
        lib_logger.propagate = True

    logging.getLogger("h11").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
