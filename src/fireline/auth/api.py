"""Identity facade over the accounts REST endpoints."""

from __future__ import annotations

from result import Err, Ok, Result, is_err

from fireline.common import create_logger
from fireline.config import ProjectConfig
from fireline.constants import DEFAULT_IDENTITY_URL
from fireline.core import HttpExecutor, HttpRequest, ServiceError, ShapeConflictError, parse_body
from fireline.core.validation import validate_email, validate_password, validate_token

from .models import AuthSession, LookupResponse, OobCodeResponse, Session, UserRecord

logger = create_logger("auth")


class Authenticator:
    """Account management and the current session token.

    Requests go through the identity runner, a single-worker queue, so calls
    issued from one thread execute in submission order.
    """

    def __init__(
        self,
        config: ProjectConfig,
        executor: HttpExecutor,
        *,
        session: Session | None = None,
        identity_url: str = DEFAULT_IDENTITY_URL,
    ) -> None:
        self._config = config
        self._executor = executor
        self._session = session if session is not None else Session()
        self._identity_url = identity_url.rstrip("/")

    @property
    def session(self) -> Session:
        return self._session

    def sign_up(self, email: str, password: str) -> Result[AuthSession, ServiceError]:
        """Create an account; the new user's token becomes the session token."""
        return self._authenticate("signUp", email, password)

    def sign_in(self, email: str, password: str) -> Result[AuthSession, ServiceError]:
        """Sign in with email and password; the token replaces the session token."""
        return self._authenticate("signInWithPassword", email, password)

    def sign_out(self) -> None:
        self._session.clear()

    def current_token(self) -> str | None:
        return self._session.token

    def send_password_reset(self, email: str) -> Result[str, ServiceError]:
        email_result = validate_email(email)
        if is_err(email_result):
            return email_result

        request = self._request("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email_result.unwrap()})
        return (
            self._executor.execute(request)
            .and_then(lambda body: parse_body(body, OobCodeResponse))
            .map(lambda answer: answer.email or email)
            .inspect_err(lambda error: self._log_error("send_password_reset", error))
        )

    def send_email_verification(self, token: str) -> Result[str, ServiceError]:
        token_result = validate_token(token)
        if is_err(token_result):
            return token_result

        request = self._request("sendOobCode", {"requestType": "VERIFY_EMAIL", "idToken": token})
        return (
            self._executor.execute(request)
            .and_then(lambda body: parse_body(body, OobCodeResponse))
            .map(lambda answer: answer.email)
            .inspect_err(lambda error: self._log_error("send_email_verification", error))
        )

    def is_email_verified(self, token: str) -> Result[bool, ServiceError]:
        return self.lookup_user(token).map(lambda user: user.email_verified)

    def lookup_user_id(self, token: str) -> Result[str, ServiceError]:
        return self.lookup_user(token).map(lambda user: user.local_id)

    def lookup_user(self, token: str) -> Result[UserRecord, ServiceError]:
        """Fetch the account record of the user owning ``token``."""
        token_result = validate_token(token)
        if is_err(token_result):
            return token_result

        return (
            self._executor.execute(self._request("lookup", {"idToken": token}))
            .and_then(lambda body: parse_body(body, LookupResponse))
            .and_then(_first_user)
            .inspect_err(lambda error: self._log_error("lookup", error))
        )

    def delete_account(self, token: str) -> Result[None, ServiceError]:
        """Delete the account owning ``token``; clears the session if it was the current user."""
        token_result = validate_token(token)
        if is_err(token_result):
            return token_result

        return (
            self._executor.execute(self._request("delete", {"idToken": token}))
            .map(lambda _: self._session.clear(token))
            .inspect(lambda _: logger.info("Account deleted"))
            .inspect_err(lambda error: self._log_error("delete_account", error))
        )

    def _authenticate(self, operation: str, email: str, password: str) -> Result[AuthSession, ServiceError]:
        email_result = validate_email(email)
        if is_err(email_result):
            return email_result
        password_result = validate_password(password)
        if is_err(password_result):
            return password_result

        logger.debug("Authenticating", operation=operation, email=email)
        payload = {"email": email_result.unwrap(), "password": password, "returnSecureToken": True}
        return (
            self._executor.execute(self._request(operation, payload))
            .and_then(lambda body: parse_body(body, AuthSession))
            .inspect(lambda auth: self._session.set_token(auth.id_token))
            .inspect(lambda auth: logger.info("Authenticated", operation=operation, user=auth.local_id))
            .inspect_err(lambda error: self._log_error(operation, error))
        )

    def _request(self, operation: str, payload: dict[str, object]) -> HttpRequest:
        return HttpRequest(
            method="POST",
            url=f"{self._identity_url}/accounts:{operation}",
            params={"key": self._config.api_key},
            json=payload,
        )

    def _log_error(self, operation: str, error: ServiceError) -> None:
        logger.error("Identity request failed", operation=operation, kind=error.kind.value, error=error.message)


def _first_user(answer: LookupResponse) -> Result[UserRecord, ServiceError]:
    if not answer.users:
        return Err(ShapeConflictError(message="Lookup returned no users for the given token."))
    return Ok(answer.users[0])
