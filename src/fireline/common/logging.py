"""Loguru setup for fireline.

Imported as a library, fireline emits nothing until the host application calls
``fireline.enable_logging()``, which adds one stderr sink for fireline records
and leaves the host's own sinks alone. The ``fireline`` CLI owns the process
and routes everything to a rotating log file instead.
"""

import sys
import threading
from contextlib import suppress
from pathlib import Path
from typing import Any, Literal, TextIO

import loguru
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from fireline.constants import APP_NAME

from .models import AppInfo
from .paths import get_data_directory

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]

TEXT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}\n{exception}"

_library_lock = threading.Lock()
_library_handler_id: int | None = None


class LoggingConfig(BaseModel):
    """CLI log file settings, read from ``FIRELINE_LOGGING__*``."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(default=True)
    log_level: LogLevel = Field(default="INFO")
    log_file: str | None = Field(default=None)
    rotation: str = Field(default="1 MB")
    retention: str = Field(default="7 days")
    format: Literal["json", "text"] = Field(default="text")


def setup_cli_logging(app_info: AppInfo, config: LoggingConfig) -> int:
    """Send every record to the configured log file; the CLI replaces all existing sinks."""
    log_file = Path(config.log_file).expanduser() if config.log_file else _default_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    options: dict[str, Any] = {
        "level": config.log_level,
        "rotation": config.rotation,
        "retention": config.retention,
        "diagnose": app_info.environment == "dev",
    }
    if config.format == "json":
        options["serialize"] = True
    else:
        options["format"] = TEXT_FORMAT

    logger.remove()
    logger.configure(extra={"scope": "cli", "env": app_info.environment})
    logger.enable(APP_NAME)
    handler_id = logger.add(log_file, **options)

    logger.debug("CLI logging initialized", log_file=str(log_file), level=config.log_level, format=config.format)
    return handler_id


def enable_library_logging(level: LogLevel = "INFO", sink: TextIO | None = None) -> int:
    """Emit fireline records to ``sink`` (stderr by default) and return the handler id.

    Only fireline's own sink is touched: calling this again swaps it for a new
    one, and sinks added by the host application keep receiving records.
    """
    global _library_handler_id
    with _library_lock:
        _remove_library_sink()
        _library_handler_id = logger.add(
            sink or sys.stderr,
            level=level,
            format=TEXT_FORMAT,
            filter=APP_NAME,
            colorize=False,
        )
        logger.enable(APP_NAME)
        return _library_handler_id


def disable_library_logging() -> None:
    """Silence fireline records and drop the sink added by ``enable_library_logging``."""
    with _library_lock:
        logger.disable(APP_NAME)
        _remove_library_sink()


def create_logger(scope: str) -> "loguru.Logger":
    return logger.bind(scope=scope)


def _default_log_file() -> Path:
    return get_data_directory() / "logs" / f"{APP_NAME}.log"


def _remove_library_sink() -> None:
    global _library_handler_id
    if _library_handler_id is None:
        return
    # already gone when the host called logger.remove()
    with suppress(ValueError):
        logger.remove(_library_handler_id)
    _library_handler_id = None
