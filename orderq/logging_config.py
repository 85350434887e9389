"""
Log setup for orderq processes.

Every record carries a trace_id, which is the session id for ingest, progress
pushes and restores, so one classroom session can be followed through the
log stream. Records emitted outside a session show trace_id "N/A".

ORDERQ_LOG_LEVEL and ORDERQ_LOG_FORMAT (json or text) pick the defaults;
the CLI passes explicit values and routes logs to stderr so its JSON output
on stdout stays clean.
"""

import logging
import os
import sys
from typing import Optional, TextIO

from pythonjsonlogger import jsonlogger


def setup_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Replace the root handlers with a single stream handler.

    Arguments override ORDERQ_LOG_LEVEL / ORDERQ_LOG_FORMAT. An unknown level
    name means INFO; any format other than "json" means plain text. The
    stream defaults to stdout.
    """
    log_level = (level or os.getenv("ORDERQ_LOG_LEVEL", "INFO")).upper()
    log_format = (log_format or os.getenv("ORDERQ_LOG_FORMAT", "json")).lower()

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    resolved = level_map.get(log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(resolved)
    handler.addFilter(TraceIDFilter())

    if log_format == "json":
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Logger adapter that stamps trace_id on every record.

    Pass the session id a submission or reconnect belongs to, e.g.
    get_logger(__name__, trace_id=answer.session).
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"trace_id": trace_id or "N/A"})


class TraceIDFilter(logging.Filter):
    """Fills in trace_id for records logged through a plain logger."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True
