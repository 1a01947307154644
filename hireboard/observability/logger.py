"""structlog setup for Hireboard.

Nothing is configured on import; the CLI (or an embedding application)
calls ``setup_logging`` once it knows the configured level and format.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from .. import __version__


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["app"] = "hireboard"
    event_dict["version"] = __version__
    return event_dict


def _renderer_chain(log_format: str) -> list[Processor]:
    if log_format == "console":
        return [structlog.processors.ExceptionPrettyPrinter(), structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
) -> None:
    """Route structlog events through stdlib logging on stderr.

    Replaces any root handlers, so only the process owner should call it.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: "json" or "console"
        log_file: Also append events to this file
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_app_context,
            *_renderer_chain(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stderr keeps CLI tables on stdout clean
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level, force=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Logger for ``name``; events are snake_case verbs with key/value context."""
    return structlog.get_logger(name)
