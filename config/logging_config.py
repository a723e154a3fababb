"""
Logging Configuration

Console and dated-file logging for the RFP Manager service. Every record
carries the correlation id of the request that produced it ("-" outside
a request).
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime

from config.settings import settings

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="-")

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(correlation_id)s | %(name)s | %(message)s"

QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "multipart", "python_multipart")


class CorrelationIdFilter(logging.Filter):
    """Stamp records with the current request's correlation id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id.get()
        return True


def setup_logging(log_level: str = "INFO", log_to_file: bool = True) -> logging.Logger:
    """
    Configure logging for the application.

    Args:
        log_level: Console logging level (DEBUG, INFO, WARNING, ERROR)
        log_to_file: Also write everything from DEBUG up to
            data/logs/rfp_manager_YYYYMMDD.log

    Returns:
        The application logger
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    stamp = CorrelationIdFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level.upper()))
    handlers = [console_handler]

    if log_to_file:
        log_file = settings.logs_dir / f"rfp_manager_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(stamp)

    logging.basicConfig(level=logging.DEBUG, handlers=handlers)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("rfp_manager")
