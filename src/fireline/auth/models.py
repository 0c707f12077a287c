"""Identity session state and response models."""

from __future__ import annotations

import threading

from pydantic import BaseModel, ConfigDict, Field


class Session:
    """Holds the bearer token of the signed-in user.

    Shared by the identity and storage facades of one project. Sign-in and
    sign-up replace the token; sign-out and account deletion clear it.
    """

    def __init__(self, token: str | None = None) -> None:
        self._token = token
        self._lock = threading.Lock()

    @property
    def token(self) -> str | None:
        with self._lock:
            return self._token

    def set_token(self, token: str) -> None:
        with self._lock:
            self._token = token

    def clear(self, token: str | None = None) -> None:
        """Forget the token, or only ``token`` when it is the current one."""
        with self._lock:
            if token is None or token == self._token:
                self._token = None


class AuthSession(BaseModel):
    """Answer of the sign-up and sign-in endpoints."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id_token: str = Field(alias="idToken", min_length=1)
    local_id: str = Field(alias="localId")
    email: str = ""
    refresh_token: str = Field(default="", alias="refreshToken")
    expires_in: int | None = Field(default=None, alias="expiresIn")


class UserRecord(BaseModel):
    """One entry of the ``users`` array returned by account lookup."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    local_id: str = Field(alias="localId")
    email: str = ""
    email_verified: bool = Field(default=False, alias="emailVerified")
    disabled: bool = False


class LookupResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    users: list[UserRecord] = []


class OobCodeResponse(BaseModel):
    """Answer of the out-of-band code endpoint (reset / verification mail)."""

    model_config = ConfigDict(extra="ignore")

    email: str = ""
