"""Background task execution for blocking network operations.

Callers hand a zero-argument operation to a :class:`TaskRunner` and block on
its outcome. Data-store and storage facades share one grow-on-demand pool; the
identity facade uses a single-worker queue so session-mutating calls are never
reordered relative to each other.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

from result import Err, Result

from fireline.common import create_logger

from .models import ServiceError, TransportError

logger = create_logger("runner")

type TaskOutcome[T] = Result[T, ServiceError]

TASK_ERROR_PREFIX = "Task execution error: "
DEFAULT_MAX_WORKERS = 16


class Scheduler(Protocol):
    """Anything that runs callables off the calling thread and hands back a future."""

    def submit[T](self, fn: Callable[[], T], /) -> Future[T]: ...

    def shutdown(self, wait: bool = True) -> None: ...


class InlineScheduler:
    """Runs operations synchronously in the calling thread.

    Substitutes for a worker pool in tests so ordering can be asserted
    deterministically.
    """

    def __init__(self) -> None:
        self._closed = False
        self.submitted = 0

    def submit[T](self, fn: Callable[[], T], /) -> Future[T]:
        if self._closed:
            raise RuntimeError("cannot schedule new futures after shutdown")

        self.submitted += 1
        future: Future[T] = Future()
        try:
            future.set_result(fn())
        except BaseException as exc:  # noqa: BLE001
            future.set_exception(exc)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._closed = True


class TaskRunner:
    """Submits blocking operations to a scheduler and waits for their outcome."""

    def __init__(self, scheduler: Scheduler, *, name: str = "tasks") -> None:
        self._scheduler = scheduler
        self._name = name
        self._closed = False
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_shutdown(self) -> bool:
        return self._closed

    def submit[T](self, operation: Callable[[], TaskOutcome[T]]) -> TaskOutcome[T]:
        """Run ``operation`` on the scheduler and block until it completes.

        Exceptions raised by the operation never reach the caller; they are
        converted into a :class:`TransportError` outcome.
        """
        with self._lock:
            closed = self._closed
        if closed:
            return Err(TransportError(message=f"{TASK_ERROR_PREFIX}runner '{self._name}' is shut down"))

        try:
            future = self._scheduler.submit(operation)
        except RuntimeError as exc:
            # executor was shut down between the check and the submit
            return Err(TransportError(message=f"{TASK_ERROR_PREFIX}{exc}"))

        try:
            return future.result()
        except Exception as exc:
            logger.debug("Task failed", runner=self._name, error=repr(exc))
            return Err(TransportError(message=f"{TASK_ERROR_PREFIX}{_describe(exc)}"))

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting submissions; in-flight tasks are allowed to finish."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        logger.debug("Shutting down task runner", runner=self._name)
        self._scheduler.shutdown(wait=wait)


def _describe(exc: BaseException) -> str:
    text = str(exc)
    return text if text else type(exc).__name__


_runners_lock = threading.Lock()
_shared_runner: TaskRunner | None = None
_identity_runner: TaskRunner | None = None


def get_shared_runner(max_workers: int = DEFAULT_MAX_WORKERS) -> TaskRunner:
    """Process-wide pool for data-store and storage operations, started on first use."""
    global _shared_runner
    with _runners_lock:
        if _shared_runner is None or _shared_runner.is_shutdown:
            executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="fireline")
            _shared_runner = TaskRunner(executor, name="shared")
        return _shared_runner


def get_identity_runner() -> TaskRunner:
    """Process-wide single-worker queue for identity operations."""
    global _identity_runner
    with _runners_lock:
        if _identity_runner is None or _identity_runner.is_shutdown:
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="fireline-identity")
            _identity_runner = TaskRunner(executor, name="identity")
        return _identity_runner


def shutdown_runners(wait: bool = True) -> None:
    """Release the process-wide pools. Runners handed out earlier reject new work."""
    global _shared_runner, _identity_runner
    with _runners_lock:
        runners = [runner for runner in (_shared_runner, _identity_runner) if runner is not None]
        _shared_runner = None
        _identity_runner = None

    for runner in runners:
        runner.shutdown(wait=wait)


__all__ = [
    "InlineScheduler",
    "Scheduler",
    "TaskOutcome",
    "TaskRunner",
    "get_identity_runner",
    "get_shared_runner",
    "shutdown_runners",
]
