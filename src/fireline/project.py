"""Composition root tying the three facades of one remote project together."""

from __future__ import annotations

from pathlib import Path

import httpx
from result import Result, is_err, is_ok

from fireline.auth import Authenticator, Session
from fireline.common import create_logger
from fireline.config import ConfigError, ProjectConfig, load_project_config
from fireline.core import (
    HttpExecutor,
    ProtocolError,
    RemoteErrorCode,
    ServiceError,
    TaskRunner,
    build_client,
    get_identity_runner,
    get_shared_runner,
)
from fireline.database import Database
from fireline.settings import HttpSettings, Settings, get_settings
from fireline.storage import Storage

logger = create_logger("project")

_SIGN_UP_INSTEAD = frozenset({RemoteErrorCode.EMAIL_NOT_FOUND, RemoteErrorCode.INVALID_LOGIN_CREDENTIALS})


class Project:
    """Identity, database and storage access for one set of credentials.

    The facades share a :class:`Session`, so a sign-in makes its token
    available to storage requests. Identity calls run on the single-worker
    identity runner; database and storage calls on the shared pool.
    """

    def __init__(
        self,
        config: ProjectConfig,
        *,
        http: HttpSettings | None = None,
        shared_runner: TaskRunner | None = None,
        identity_runner: TaskRunner | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        http = http or HttpSettings()
        self._config = config
        self._session = Session()
        self._client = build_client(timeout=http.timeout_seconds, transport=transport)

        shared = HttpExecutor(shared_runner or get_shared_runner(), self._client)
        identity = HttpExecutor(identity_runner or get_identity_runner(), self._client)

        self.auth = Authenticator(config, identity, session=self._session, identity_url=http.identity_url)
        self.database = Database(config, shared)
        self.storage = Storage(config, shared, session=self._session, storage_url=http.storage_url)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Result[Project, ConfigError]:
        """Build a project from ``FIRELINE_*`` environment settings."""
        settings = settings or get_settings()
        return settings.to_project_config().map(lambda config: cls._with_settings(config, settings))

    @classmethod
    def from_file(cls, path: Path, settings: Settings | None = None) -> Result[Project, ConfigError]:
        """Build a project from a YAML/JSON credentials file."""
        settings = settings or get_settings()
        return load_project_config(path).map(lambda config: cls._with_settings(config, settings))

    @classmethod
    def _with_settings(cls, config: ProjectConfig, settings: Settings) -> Project:
        return cls(
            config,
            http=settings.http,
            shared_runner=get_shared_runner(settings.runner.max_workers),
        )

    @property
    def config(self) -> ProjectConfig:
        return self._config

    @property
    def session(self) -> Session:
        return self._session

    def verify(self, probe_email: str, probe_password: str) -> Result[None, ServiceError]:
        """Check that the credentials reach the identity service.

        Signs a probe account in, creating it when the service does not know
        it. The probe account is deleted again whenever a token was obtained.
        """
        logger.info("Verifying project credentials", database_url=self._config.database_url)

        outcome = self.auth.sign_in(probe_email, probe_password)
        if is_err(outcome) and _remote_code(outcome.err_value) in _SIGN_UP_INSTEAD:
            outcome = self.auth.sign_up(probe_email, probe_password)
            # created concurrently by someone else
            if is_err(outcome) and _remote_code(outcome.err_value) is RemoteErrorCode.EMAIL_EXISTS:
                outcome = self.auth.sign_in(probe_email, probe_password)

        if is_ok(outcome):
            cleanup = self.auth.delete_account(outcome.ok_value.id_token)
            if is_err(cleanup):
                logger.warning("Probe account was not deleted", error=cleanup.err_value.message)
            return cleanup

        logger.error("Project verification failed", error=outcome.err_value.message)
        return outcome.map(lambda _: None)

    def close(self) -> None:
        """Close the HTTP client. Runners are process-wide; see ``shutdown_runners``."""
        self._client.close()

    def __enter__(self) -> Project:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _remote_code(error: ServiceError) -> RemoteErrorCode | None:
    return error.code if isinstance(error, ProtocolError) else None


__all__ = ["Project"]
