"""Object storage facade."""

from __future__ import annotations

import mimetypes
from functools import partial
from pathlib import Path
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field
from result import Result, is_err

from fireline.auth import Session
from fireline.common import create_logger
from fireline.config import ProjectConfig
from fireline.constants import DEFAULT_STORAGE_URL
from fireline.core import HttpExecutor, HttpRequest, ServiceError, parse_body
from fireline.core.validation import validate_local_file, validate_object_name

logger = create_logger("storage")

NO_CONTENT = 204


class ObjectMetadata(BaseModel):
    """Metadata answer for a single stored object."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    bucket: str = ""
    content_type: str = Field(default="", alias="contentType")
    size: int | None = None
    download_tokens: str = Field(default="", alias="downloadTokens")


class ObjectListing(BaseModel):
    """Answer of the list endpoint; ``items`` is omitted when nothing matches."""

    model_config = ConfigDict(extra="ignore")

    items: list[ObjectMetadata] = []


class Storage:
    """Upload, locate, list and delete objects in the project's bucket.

    When the session holds a token it is sent as a bearer credential.
    """

    def __init__(
        self,
        config: ProjectConfig,
        executor: HttpExecutor,
        *,
        session: Session | None = None,
        storage_url: str = DEFAULT_STORAGE_URL,
    ) -> None:
        self._config = config
        self._executor = executor
        self._session = session if session is not None else Session()
        self._base_url = f"{storage_url.rstrip('/')}/b/{config.storage_bucket}/o"

    def upload(self, local_source: Path | str, remote_path: str) -> Result[ObjectMetadata, ServiceError]:
        """Upload the file at ``local_source`` as object ``remote_path``."""
        name_result = validate_object_name(remote_path)
        if is_err(name_result):
            return name_result
        file_result = validate_local_file(local_source)
        if is_err(file_result):
            return file_result

        source = file_result.unwrap()
        name = remote_path.lstrip("/")
        content_type = mimetypes.guess_type(source.name)[0] or "application/octet-stream"
        logger.debug("Uploading object", source=str(source), name=name, content_type=content_type)

        return (
            self._executor.runner.submit(partial(self._upload_file, source, name, content_type))
            .and_then(lambda body: parse_body(body, ObjectMetadata))
            .inspect(lambda meta: logger.info("Object uploaded", name=meta.name, size=meta.size))
            .inspect_err(partial(self._log_error, "upload", name))
        )

    def download_url(self, remote_path: str) -> Result[str, ServiceError]:
        """Return a public download URL for ``remote_path``."""
        name_result = validate_object_name(remote_path)
        if is_err(name_result):
            return name_result

        name = remote_path.lstrip("/")
        request = HttpRequest(method="GET", url=self._object_url(name), headers=self._auth_headers())
        return (
            self._executor.execute(request)
            .and_then(lambda body: parse_body(body, ObjectMetadata))
            .map(self._build_download_url)
            .inspect_err(partial(self._log_error, "download_url", name))
        )

    def list(self, prefix: str) -> Result[list[str], ServiceError]:
        """List display names (last path segment) of the objects under ``prefix``."""
        prefix_result = validate_object_name(prefix, argument="prefix")
        if is_err(prefix_result):
            return prefix_result

        folder = prefix.lstrip("/")
        if not folder.endswith("/"):
            folder += "/"

        request = HttpRequest(
            method="GET",
            url=self._base_url,
            params={"prefix": folder},
            headers=self._auth_headers(),
        )
        return (
            self._executor.execute(request)
            .and_then(lambda body: parse_body(body, ObjectListing))
            .map(lambda listing: [item.name.rsplit("/", 1)[-1] for item in listing.items])
            .inspect_err(partial(self._log_error, "list", folder))
        )

    def delete(self, remote_path: str) -> Result[None, ServiceError]:
        name_result = validate_object_name(remote_path)
        if is_err(name_result):
            return name_result

        name = remote_path.lstrip("/")
        request = HttpRequest(
            method="DELETE",
            url=self._object_url(name),
            headers=self._auth_headers(),
            expected_status=NO_CONTENT,
        )
        return (
            self._executor.execute(request)
            .map(lambda _: None)
            .inspect(lambda _: logger.info("Object deleted", name=name))
            .inspect_err(partial(self._log_error, "delete", name))
        )

    def _upload_file(self, source: Path, name: str, content_type: str) -> Result[str, ServiceError]:
        # Runs on the worker: the file is read off the caller's thread.
        request = HttpRequest(
            method="POST",
            url=self._base_url,
            params={"uploadType": "media", "name": name},
            headers={"Content-Type": content_type, **self._auth_headers()},
            content=source.read_bytes(),
        )
        return self._executor.perform(request)

    def _object_url(self, name: str) -> str:
        return f"{self._base_url}/{quote(name, safe='')}"

    def _build_download_url(self, meta: ObjectMetadata) -> str:
        params = "alt=media"
        token = meta.download_tokens.split(",", 1)[0]
        if token:
            params += f"&token={quote(token, safe='')}"
        return f"{self._object_url(meta.name)}?{params}"

    def _auth_headers(self) -> dict[str, str]:
        token = self._session.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _log_error(self, operation: str, name: str, error: ServiceError) -> None:
        logger.error("Storage request failed", operation=operation, name=name, kind=error.kind.value, error=error.message)


__all__ = ["ObjectListing", "ObjectMetadata", "Storage"]
