from __future__ import annotations

import itertools
import json
from collections.abc import Iterator
from typing import Any
from urllib.parse import unquote

import httpx
import pytest

from fireline.config import ProjectConfig
from fireline.core import InlineScheduler, TaskRunner
from fireline.project import Project

DATABASE_HOST = "demo-project-default-rtdb.firebaseio.com"
IDENTITY_HOST = "identitytoolkit.googleapis.com"
STORAGE_HOST = "firebasestorage.googleapis.com"
BUCKET = "demo-project.appspot.com"


class FakeRealtimeDatabase:
    """In-memory tree answering the realtime database REST dialect."""

    def __init__(self) -> None:
        self.tree: dict[str, Any] = {}
        self.required_token: str | None = None
        self.requests: list[tuple[str, str]] = []
        self._keys = itertools.count(1)

    def seed(self, path: str, value: Any) -> None:
        self._set(self._segments(path), value)

    def get(self, path: str) -> Any:
        return self._get(self._segments(path))

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removesuffix(".json")
        self.requests.append((request.method, path))

        if self.required_token is not None and request.url.params.get("auth") != self.required_token:
            return httpx.Response(401, json={"error": "Permission denied"})

        segments = self._segments(path)
        body = json.loads(request.content) if request.content else None

        match request.method:
            case "GET":
                return httpx.Response(200, text=json.dumps(self._get(segments)))
            case "PUT":
                self._set(segments, body)
                return httpx.Response(200, text=json.dumps(body))
            case "PATCH":
                current = self._get(segments)
                merged = {**current, **body} if isinstance(current, dict) else body
                self._set(segments, merged)
                return httpx.Response(200, text=json.dumps(body))
            case "POST":
                key = f"-Nkey{next(self._keys)}"
                self._set([*segments, key], body)
                return httpx.Response(200, json={"name": key})
            case "DELETE":
                self._set(segments, None)
                return httpx.Response(200, text="null")
        return httpx.Response(405, json={"error": "Method not allowed"})

    @staticmethod
    def _segments(path: str) -> list[str]:
        return [segment for segment in path.strip("/").split("/") if segment]

    def _get(self, segments: list[str]) -> Any:
        node: Any = self.tree
        for segment in segments:
            if isinstance(node, dict):
                node = node.get(segment)
            elif isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
                node = node[int(segment)]
            else:
                return None
        return node

    def _set(self, segments: list[str], value: Any) -> None:
        if not segments:
            self.tree = value if isinstance(value, dict) else {}
            return
        node = self.tree
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        if value is None:
            node.pop(segments[-1], None)
        else:
            node[segments[-1]] = value


class FakeIdentityService:
    """Accounts endpoints keyed by email, issuing sequential tokens."""

    def __init__(self, *, unknown_email_code: str = "INVALID_LOGIN_CREDENTIALS") -> None:
        self.users: dict[str, dict[str, Any]] = {}
        self.unknown_email_code = unknown_email_code
        self.operations: list[str] = []
        self.sent_codes: list[tuple[str, str]] = []
        self._ids = itertools.count(1)
        self._tokens = itertools.count(1)

    def add_user(self, email: str, password: str, *, verified: bool = False) -> dict[str, Any]:
        user = {"email": email, "password": password, "localId": f"uid-{next(self._ids)}", "verified": verified}
        self.users[email] = user
        return user

    def handle(self, request: httpx.Request) -> httpx.Response:
        operation = request.url.path.rsplit(":", 1)[-1]
        self.operations.append(operation)
        payload = json.loads(request.content)

        match operation:
            case "signUp":
                if payload["email"] in self.users:
                    return _identity_error("EMAIL_EXISTS")
                return self._issue(self.add_user(payload["email"], payload["password"]))
            case "signInWithPassword":
                user = self.users.get(payload["email"])
                if user is None:
                    return _identity_error(self.unknown_email_code)
                if user["password"] != payload["password"]:
                    return _identity_error("INVALID_LOGIN_CREDENTIALS")
                return self._issue(user)
            case "lookup":
                user = self._by_token(payload["idToken"])
                if user is None:
                    return _identity_error("INVALID_ID_TOKEN")
                return httpx.Response(
                    200,
                    json={
                        "users": [
                            {"localId": user["localId"], "email": user["email"], "emailVerified": user["verified"]}
                        ]
                    },
                )
            case "delete":
                user = self._by_token(payload["idToken"])
                if user is None:
                    return _identity_error("INVALID_ID_TOKEN")
                del self.users[user["email"]]
                return httpx.Response(200, json={"kind": "identitytoolkit#DeleteAccountResponse"})
            case "sendOobCode":
                if payload["requestType"] == "PASSWORD_RESET":
                    if payload["email"] not in self.users:
                        return _identity_error("EMAIL_NOT_FOUND")
                    email = payload["email"]
                else:
                    user = self._by_token(payload["idToken"])
                    if user is None:
                        return _identity_error("INVALID_ID_TOKEN")
                    email = user["email"]
                self.sent_codes.append((payload["requestType"], email))
                return httpx.Response(200, json={"email": email})
        return httpx.Response(404, json={"error": {"code": 404, "message": "NOT_FOUND"}})

    def _issue(self, user: dict[str, Any]) -> httpx.Response:
        user["token"] = f"token-{next(self._tokens)}"
        return httpx.Response(
            200,
            json={
                "idToken": user["token"],
                "localId": user["localId"],
                "email": user["email"],
                "refreshToken": "refresh",
                "expiresIn": "3600",
            },
        )

    def _by_token(self, token: str) -> dict[str, Any] | None:
        return next((user for user in self.users.values() if user.get("token") == token), None)


class FakeStorageService:
    """Single-bucket object store."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.authorizations: list[str | None] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.authorizations.append(request.headers.get("Authorization"))
        raw_path = request.url.raw_path.decode().split("?", 1)[0]
        prefix = f"/v0/b/{BUCKET}/o"
        if not raw_path.startswith(prefix):
            return httpx.Response(404, json={"error": {"code": 404, "message": "Not Found."}})
        name = unquote(raw_path[len(prefix) :].lstrip("/"))

        if request.method == "POST" and not name:
            name = request.url.params["name"]
            self.objects[name] = request.content
            self.content_types[name] = request.headers.get("Content-Type", "")
            return httpx.Response(200, json=self._metadata(name))
        if request.method == "GET" and not name:
            folder = request.url.params.get("prefix", "")
            items = [self._metadata(key) for key in sorted(self.objects) if key.startswith(folder)]
            return httpx.Response(200, json={"items": items} if items else {"prefixes": []})
        if name not in self.objects:
            return httpx.Response(404, json={"error": {"code": 404, "message": "Not Found."}})
        if request.method == "GET":
            return httpx.Response(200, json=self._metadata(name))
        if request.method == "DELETE":
            del self.objects[name]
            return httpx.Response(204)
        return httpx.Response(405)

    def _metadata(self, name: str) -> dict[str, Any]:
        return {
            "name": name,
            "bucket": BUCKET,
            "contentType": self.content_types.get(name, ""),
            "size": str(len(self.objects[name])),
            "downloadTokens": f"dl-{len(name)},spare",
        }


class FakeServices:
    """Routes requests of one MockTransport to the fake service for each host."""

    def __init__(self) -> None:
        self.database = FakeRealtimeDatabase()
        self.identity = FakeIdentityService()
        self.storage = FakeStorageService()
        self.hosts: list[str] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.hosts.append(request.url.host)
        match request.url.host:
            case host if host == DATABASE_HOST:
                return self.database.handle(request)
            case host if host == IDENTITY_HOST:
                return self.identity.handle(request)
            case host if host == STORAGE_HOST:
                return self.storage.handle(request)
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def _identity_error(code: str) -> httpx.Response:
    return httpx.Response(400, json={"error": {"code": 400, "message": code, "errors": [{"message": code}]}})


@pytest.fixture
def project_config() -> ProjectConfig:
    return ProjectConfig(
        api_key="test-api-key",
        auth_domain="demo-project.firebaseapp.com",
        database_url=f"https://{DATABASE_HOST}",
        storage_bucket=BUCKET,
    )


@pytest.fixture
def services() -> FakeServices:
    return FakeServices()


@pytest.fixture
def inline_runner() -> TaskRunner:
    return TaskRunner(InlineScheduler(), name="inline")


@pytest.fixture
def project(project_config: ProjectConfig, services: FakeServices) -> Iterator[Project]:
    project = Project(
        project_config,
        transport=services.transport,
        shared_runner=TaskRunner(InlineScheduler(), name="shared"),
        identity_runner=TaskRunner(InlineScheduler(), name="identity"),
    )
    yield project
    project.close()
