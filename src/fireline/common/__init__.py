"""Common models and types used across fireline modules."""

from .fields import DataPath, JsonDict, JsonValue, NonEmptyString
from .logging import LoggingConfig, create_logger, disable_library_logging, enable_library_logging, setup_cli_logging
from .models import AppInfo
from .paths import get_data_directory

__all__ = [
    "AppInfo",
    "DataPath",
    "JsonDict",
    "JsonValue",
    "LoggingConfig",
    "NonEmptyString",
    "create_logger",
    "disable_library_logging",
    "enable_library_logging",
    "get_data_directory",
    "setup_cli_logging",
]
