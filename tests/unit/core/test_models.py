from __future__ import annotations

import pytest

from fireline.core import ArgumentError, ErrorKind, RemoteErrorCode, ShapeConflictError, TransportError, classify_remote_error


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ('{"error": {"code": 400, "message": "EMAIL_EXISTS"}}', RemoteErrorCode.EMAIL_EXISTS),
        ('{"error": {"code": 400, "message": "EMAIL_NOT_FOUND"}}', RemoteErrorCode.EMAIL_NOT_FOUND),
        (
            '{"error": {"code": 400, "message": "WEAK_PASSWORD : Password should be at least 6 characters"}}',
            RemoteErrorCode.WEAK_PASSWORD,
        ),
        ('{"error" : "Permission denied"}', RemoteErrorCode.PERMISSION_DENIED),
        ('{"error": {"code": 404, "message": "Not Found."}}', RemoteErrorCode.NOT_FOUND),
        ('{"error": {"message": "SOMETHING_NEW"}}', RemoteErrorCode.UNKNOWN),
        ("<html>bad gateway</html>", RemoteErrorCode.UNKNOWN),
        ("", RemoteErrorCode.UNKNOWN),
        ("[1, 2]", RemoteErrorCode.UNKNOWN),
    ],
)
def test_classify_remote_error(body: str, expected: RemoteErrorCode) -> None:
    assert classify_remote_error(body) is expected


def test_error_kinds_are_fixed_per_class() -> None:
    assert ArgumentError(argument="path", message="m").kind is ErrorKind.ARGUMENT
    assert TransportError(message="m").kind is ErrorKind.TRANSPORT
    assert ShapeConflictError(message="m").kind is ErrorKind.SHAPE_CONFLICT


def test_errors_reject_unknown_fields() -> None:
    with pytest.raises(ValueError):
        TransportError(message="m", status=500)
