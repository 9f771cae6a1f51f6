"""
Logging setup for the API process and the task worker.

Every record carries the correlation id of the request (X-Correlation-ID)
or of the task that produced it. Tasks restore the id from their envelope,
so a post and the push fan-out it triggered share one id in the logs.
"""

import logging
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from groupchat.config.settings import Config

NO_CORRELATION_ID = "NO Correlation ID"

correlation_id_var: ContextVar[str] = ContextVar(
    "correlation_id", default=NO_CORRELATION_ID
)

# Chatty client libraries, kept at WARNING regardless of LOG_LEVEL
_QUIET_LOGGERS = ("httpx", "httpcore")


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        return True


class SafeFormatter(logging.Formatter):
    """Records from foreign handlers may lack correlation_id."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = NO_CORRELATION_ID
        return super().format(record)


def _tagged(handler: logging.Handler, formatter: logging.Formatter) -> logging.Handler:
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter())
    handler._groupchat = True
    return handler


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure root handlers once; safe to call again (e.g. per app factory call).

    Root stays at WARNING; the `groupchat` package logs at `level`.
    With `log_file`, records also go to a rotating file (10 MB x 5).
    """
    root = logging.getLogger()
    root.setLevel(logging.WARNING)

    if not any(getattr(h, "_groupchat", False) for h in root.handlers):
        formatter = SafeFormatter(Config.LOG_FORMAT)
        root.addHandler(_tagged(logging.StreamHandler(sys.stdout), formatter))
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            root.addHandler(
                _tagged(
                    RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5),
                    formatter,
                )
            )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app_logger = logging.getLogger("groupchat")
    app_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    app_logger.debug("Logging configured")
    return root
