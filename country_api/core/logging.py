"""Process-wide logging setup.

Development gets one readable line per record; production emits JSON objects
for the log collector. Every record carries the id of the request it was
logged under (``-`` outside a request), set by ``LoggingMiddleware``.
"""

import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter

from country_api.core.config import settings

TEXT_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] [rid=%(request_id)s] - %(message)s"
JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(request_id)s %(message)s"

# Libraries that log every statement, request or decoded image at INFO/DEBUG
QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "aiosqlite", "PIL")

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class ServiceJsonFormatter(JsonFormatter):
    """JSON lines tagged with the service name and environment."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = settings.PROJECT_NAME
        log_record["environment"] = settings.ENVIRONMENT


def _level() -> int | str:
    if settings.LOG_LEVEL:
        return settings.LOG_LEVEL.upper()
    return logging.INFO if settings.is_production else logging.DEBUG


def build_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        return ServiceJsonFormatter(
            JSON_FIELDS,
            rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
        )
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def configure_logging():
    """Install the stdout handler on the root logger."""
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(build_formatter(json_output=settings.is_production))

    logging.basicConfig(level=_level(), handlers=[handler], force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # uvicorn would otherwise print every line twice through its own handlers
    for name in ("uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).handlers = []


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
