"""Logging configuration."""

from __future__ import annotations

import linecache
import logging
import sys
import traceback
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from structlog.types import EventDict

# Type for exception info tuple (from sys.exc_info())
ExcInfo = tuple[type[BaseException] | None, BaseException | None, TracebackType | None]

# Type for traceback frame information
TracebackFrame = dict[str, str | int | None]

ExceptionDetails = dict[
    str,
    None | str | list[TracebackFrame],
]

LOG_FILE_NAME = "pmmatch.json.log"


def format_exception_for_json(
    exc_info: ExcInfo | None,
) -> ExceptionDetails:
    """Format exception information for JSON logging.

    Extracts exception details into a structured format that's easier to read
    in JSON logs than a raw traceback string.

    Args:
        exc_info: Exception info tuple from sys.exc_info() or None

    Returns:
        Dictionary with exception details:
        - exception_type: Exception class name (str or None)
        - exception_message: Exception message (str or None)
        - exception_module: Module where exception occurred (str or None)
        - traceback_frames: List of traceback frames
        - traceback_text: Full traceback as text (for reference)
    """
    if exc_info is None or exc_info == (None, None, None):
        return {}

    exc_type, exc_value, exc_tb = exc_info

    exception_details: ExceptionDetails = {
        "exception_type": exc_type.__name__ if exc_type else None,
        "exception_message": str(exc_value) if exc_value else None,
        "exception_module": exc_type.__module__ if exc_type else None,
    }

    if exc_tb:
        tb_frames: list[TracebackFrame] = []
        current_tb: TracebackType | None = exc_tb

        while current_tb is not None:
            frame = current_tb.tb_frame
            frame_info: TracebackFrame = {
                "filename": frame.f_code.co_filename,
                "lineno": current_tb.tb_lineno,
                "function": frame.f_code.co_name,
            }

            line = linecache.getline(frame.f_code.co_filename, current_tb.tb_lineno)
            if line:
                frame_info["source_line"] = line.strip()

            tb_frames.append(frame_info)
            current_tb = current_tb.tb_next

        exception_details["traceback_frames"] = tb_frames
        exception_details["traceback_text"] = "".join(
            traceback.format_exception(exc_type, exc_value, exc_tb)
        )

    return exception_details


def exception_processor(
    logger: structlog.BoundLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Replace ``exc_info`` with structured exception fields.

    Adds ``exception`` (the dict from format_exception_for_json) and a one-line
    ``exception_summary`` so JSON logs stay greppable.
    """
    exc_info = event_dict.pop("exc_info", None)  # type: ignore[assignment]

    # logger.exception() and exc_info=True both arrive as True
    if exc_info is True:
        exc_info = sys.exc_info()  # type: ignore[assignment]
    elif isinstance(exc_info, BaseException):
        exc_info = (type(exc_info), exc_info, exc_info.__traceback__)

    if exc_info and exc_info != (None, None, None):
        exception_details = format_exception_for_json(exc_info)  # type: ignore[arg-type]
        if exception_details:
            event_dict["exception"] = exception_details

            exc_type = exception_details.get("exception_type")
            exc_msg = exception_details.get("exception_message")
            if exc_type and exc_msg:
                event_dict["exception_summary"] = f"{exc_type}: {exc_msg}"

    if "exception" in event_dict and isinstance(event_dict["exception"], BaseException):
        exc = event_dict.pop("exception")
        exception_details = format_exception_for_json((type(exc), exc, exc.__traceback__))
        if exception_details:
            event_dict["exception"] = exception_details

    return event_dict


def setup_logging(
    debug: bool = False,
    logs_dir: Path | None = None,
    log_level: str | None = None,
) -> None:
    """Setup structured logging with structlog.

    Console output is pretty in debug mode and JSON otherwise. If logs_dir is
    given, events go to ``pmmatch.json.log`` in that directory instead of
    stdout, always as JSON.

    Args:
        debug: Enable debug logging and the console renderer
        logs_dir: Optional directory for the JSON log file
        log_level: Explicit level name; overrides the level implied by debug
    """
    if log_level is not None:
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")
    else:
        level = logging.DEBUG if debug else logging.INFO

    handlers: list[logging.Handler] = []

    file_handler = None
    if logs_dir:
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(logs_dir / LOG_FILE_NAME, encoding="utf-8")
            file_handler.setLevel(level)
            handlers.append(file_handler)
        except OSError as e:
            # If file logging fails, log to stderr but don't crash
            sys.stderr.write(f"Warning: Failed to setup file logging: {e}\n")

    if not file_handler:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setLevel(level)
        handlers.append(stdout_handler)

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=handlers,
        force=True,
    )

    processors = [
        structlog.contextvars.merge_contextvars,  # trace_id and other context
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        exception_processor,
        structlog.processors.format_exc_info,
    ]

    if file_handler or not debug:
        final_processors = processors + [structlog.processors.JSONRenderer()]
    else:
        final_processors = processors + [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=final_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.getLogger().setLevel(level)

    logger = structlog.get_logger("pmmatch.logging")
    logger.debug(
        "Logging configured",
        level=logging.getLevelName(level),
        debug=debug,
        file_logging=file_handler is not None,
        log_file=str(logs_dir / LOG_FILE_NAME) if file_handler and logs_dir else None,
    )


def setup_logging_from_settings() -> None:
    """Configure logging from the cached library settings."""
    from pmmatch.core.config import get_settings

    settings = get_settings()
    setup_logging(
        debug=settings.is_debug,
        logs_dir=settings.logs_dir,
        log_level=settings.log_level,
    )
