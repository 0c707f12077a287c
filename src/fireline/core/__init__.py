"""Core machinery shared by the identity, database and storage facades."""

from .executor import HttpExecutor, build_client
from .merge import ABSENT, StoredValue, classify_stored_value, resolve_append
from .models import (
    ArgumentError,
    ErrorKind,
    HttpRequest,
    ProtocolError,
    RemoteErrorCode,
    ServiceError,
    ShapeConflictError,
    TransportError,
    classify_remote_error,
)
from .response import interpret_response, parse_body
from .runner import (
    InlineScheduler,
    Scheduler,
    TaskOutcome,
    TaskRunner,
    get_identity_runner,
    get_shared_runner,
    shutdown_runners,
)

__all__ = [
    "ABSENT",
    "ArgumentError",
    "ErrorKind",
    "HttpExecutor",
    "HttpRequest",
    "InlineScheduler",
    "ProtocolError",
    "RemoteErrorCode",
    "Scheduler",
    "ServiceError",
    "ShapeConflictError",
    "StoredValue",
    "TaskOutcome",
    "TaskRunner",
    "TransportError",
    "build_client",
    "classify_remote_error",
    "classify_stored_value",
    "get_identity_runner",
    "get_shared_runner",
    "interpret_response",
    "parse_body",
    "resolve_append",
    "shutdown_runners",
]
