"""Fireline - blocking client for hosted identity, realtime database and storage services.

By default, fireline's internal logging is disabled when used as a library.
Library users can enable logging by calling fireline.enable_logging().
"""

from fireline.common import disable_library_logging, enable_library_logging

disable_library_logging()

from fireline.auth import Authenticator, AuthSession, Session  # noqa: E402
from fireline.config import ProjectConfig, load_project_config  # noqa: E402
from fireline.core import ServiceError, shutdown_runners  # noqa: E402
from fireline.database import Database  # noqa: E402
from fireline.project import Project  # noqa: E402
from fireline.storage import Storage  # noqa: E402

enable_logging = enable_library_logging

__all__ = [
    "AuthSession",
    "Authenticator",
    "Database",
    "Project",
    "ProjectConfig",
    "ServiceError",
    "Session",
    "Storage",
    "enable_logging",
    "load_project_config",
    "shutdown_runners",
]
