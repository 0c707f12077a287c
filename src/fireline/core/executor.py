"""Generic HTTP operation executor.

Every facade describes its remote operations as :class:`HttpRequest` values;
this module runs them through a :class:`TaskRunner` and interprets the answer.
"""

from __future__ import annotations

from functools import partial

import httpx

from fireline.common import create_logger

from .models import HttpRequest
from .response import interpret_response
from .runner import TaskOutcome, TaskRunner

logger = create_logger("http")

DEFAULT_TIMEOUT_SECONDS = 5.0
USER_AGENT = "fireline/0.1"


def build_client(
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.BaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.Client:
    """Create an ``httpx.Client`` with the library defaults.

    ``transport`` lets tests route requests to an ``httpx.MockTransport``.
    """
    headers: dict[str, str] = {"User-Agent": USER_AGENT}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(timeout),
        headers=headers,
        transport=transport,
    )


class HttpExecutor:
    """Runs :class:`HttpRequest` values on a task runner."""

    def __init__(self, runner: TaskRunner, client: httpx.Client) -> None:
        self._runner = runner
        self._client = client

    @property
    def runner(self) -> TaskRunner:
        return self._runner

    def execute(self, request: HttpRequest) -> TaskOutcome[str]:
        logger.debug("Submitting request", method=request.method, url=request.url, runner=self._runner.name)
        return self._runner.submit(partial(self.perform, request)).inspect_err(
            lambda error: logger.debug("Request failed", method=request.method, url=request.url, error=error.message)
        )

    def close(self) -> None:
        self._client.close()

    def perform(self, request: HttpRequest) -> TaskOutcome[str]:
        """Run ``request`` in the current thread; raises on transport faults."""
        response = self._client.request(
            request.method,
            request.url,
            params=request.params or None,
            headers=request.headers or None,
            json=request.json,
            content=request.content,
        )
        return interpret_response(
            response.status_code,
            response.text,
            expected_status=request.expected_status,
            allow_null=request.allow_null,
        )
