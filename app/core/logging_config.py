import logging
import logging.handlers
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5


class RequestIdFilter(logging.Filter):
    """Stamps every record with the id of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class CustomJsonFormatter(JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = record.created
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno
        log_record["request_id"] = getattr(record, "request_id", None)


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(RequestIdFilter())
    return handler


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = "logs") -> None:
    """
    Configure application-wide logging.

    The console gets a human-readable format. When ``log_dir`` is set, JSON
    files are written there as well:

    * ``app.log``   - everything from DEBUG up
    * ``error.log`` - ERROR and above
    * ``audit.log`` - records of the ``audit`` logger only
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    json_formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(logger)s %(message)s")
    console_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(console_formatter)
    console_handler.addFilter(RequestIdFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    audit_logger = logging.getLogger("audit")
    audit_logger.handlers.clear()

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_handler(log_path / "app.log", logging.DEBUG, json_formatter))
        root_logger.addHandler(_rotating_handler(log_path / "error.log", logging.ERROR, json_formatter))
        audit_logger.addHandler(_rotating_handler(log_path / "audit.log", logging.INFO, json_formatter))

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("python_multipart.multipart").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)

    root_logger.info("Logging configured", extra={"log_level": log_level, "log_dir": log_dir})
