from __future__ import annotations

from result import is_err, is_ok

from fireline.auth import Authenticator, Session
from fireline.core import ArgumentError, HttpExecutor, InlineScheduler, ProtocolError, RemoteErrorCode, TaskRunner, build_client
from fireline.project import Project


def test_sign_up_sets_session_token(project: Project, services) -> None:
    result = project.auth.sign_up("new@example.com", "hunter22")

    assert is_ok(result)
    assert result.ok_value.id_token == "token-1"
    assert project.auth.current_token() == "token-1"
    assert "new@example.com" in services.identity.users


def test_sign_up_existing_email_is_classified(project: Project, services) -> None:
    services.identity.add_user("taken@example.com", "pw123456")

    result = project.auth.sign_up("taken@example.com", "pw123456")

    assert is_err(result)
    assert isinstance(result.err_value, ProtocolError)
    assert result.err_value.code is RemoteErrorCode.EMAIL_EXISTS
    assert result.err_value.message.startswith("HTTP Error 400: ")
    assert project.auth.current_token() is None


def test_latest_sign_in_wins(project: Project, services) -> None:
    services.identity.add_user("a@example.com", "pw-a")
    services.identity.add_user("b@example.com", "pw-b")

    first = project.auth.sign_in("a@example.com", "pw-a")
    second = project.auth.sign_in("b@example.com", "pw-b")

    assert is_ok(first)
    assert is_ok(second)
    assert project.auth.current_token() == second.ok_value.id_token
    assert project.session.token == second.ok_value.id_token


def test_failed_sign_in_keeps_previous_token(project: Project, services) -> None:
    services.identity.add_user("a@example.com", "pw-a")
    project.auth.sign_in("a@example.com", "pw-a")
    token = project.auth.current_token()

    result = project.auth.sign_in("a@example.com", "wrong")

    assert is_err(result)
    assert result.err_value.code is RemoteErrorCode.INVALID_LOGIN_CREDENTIALS
    assert project.auth.current_token() == token


def test_invalid_email_fails_without_request(project: Project, services) -> None:
    result = project.auth.sign_in("not-an-email", "pw")

    assert is_err(result)
    assert isinstance(result.err_value, ArgumentError)
    assert services.identity.operations == []


def test_sign_out_clears_token(project: Project, services) -> None:
    services.identity.add_user("a@example.com", "pw-a")
    project.auth.sign_in("a@example.com", "pw-a")

    project.auth.sign_out()

    assert project.auth.current_token() is None


def test_password_reset(project: Project, services) -> None:
    services.identity.add_user("a@example.com", "pw-a")

    result = project.auth.send_password_reset("a@example.com")

    assert is_ok(result)
    assert result.ok_value == "a@example.com"
    assert services.identity.sent_codes == [("PASSWORD_RESET", "a@example.com")]


def test_password_reset_for_unknown_email(project: Project) -> None:
    result = project.auth.send_password_reset("ghost@example.com")

    assert is_err(result)
    assert result.err_value.code is RemoteErrorCode.EMAIL_NOT_FOUND


def test_email_verification_and_lookup(project: Project, services) -> None:
    services.identity.add_user("a@example.com", "pw-a", verified=True)
    token = project.auth.sign_in("a@example.com", "pw-a").unwrap().id_token

    verification = project.auth.send_email_verification(token)
    verified = project.auth.is_email_verified(token)
    user_id = project.auth.lookup_user_id(token)

    assert verification.ok_value == "a@example.com"
    assert verified.ok_value is True
    assert user_id.ok_value == services.identity.users["a@example.com"]["localId"]


def test_lookup_with_unknown_token(project: Project) -> None:
    result = project.auth.lookup_user("bogus")

    assert is_err(result)
    assert result.err_value.code is RemoteErrorCode.INVALID_ID_TOKEN


def test_delete_account_clears_own_session(project: Project, services) -> None:
    services.identity.add_user("a@example.com", "pw-a")
    token = project.auth.sign_in("a@example.com", "pw-a").unwrap().id_token

    result = project.auth.delete_account(token)

    assert is_ok(result)
    assert project.auth.current_token() is None
    assert "a@example.com" not in services.identity.users


def test_delete_other_account_keeps_session(project: Project, services) -> None:
    services.identity.add_user("a@example.com", "pw-a")
    services.identity.add_user("b@example.com", "pw-b")
    other = project.auth.sign_in("b@example.com", "pw-b").unwrap().id_token
    mine = project.auth.sign_in("a@example.com", "pw-a").unwrap().id_token

    result = project.auth.delete_account(other)

    assert is_ok(result)
    assert project.auth.current_token() == mine


def test_requests_carry_api_key(project_config, services) -> None:
    executor = HttpExecutor(TaskRunner(InlineScheduler()), build_client(transport=services.transport))
    auth = Authenticator(project_config, executor, session=Session())
    seen: list[str] = []
    original = services.identity.handle

    def spy(request):
        seen.append(request.url.params["key"])
        return original(request)

    services.identity.handle = spy
    auth.sign_up("a@example.com", "pw-a")

    assert seen == ["test-api-key"]
