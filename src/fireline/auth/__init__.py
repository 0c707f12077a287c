"""Identity facade: accounts, sign-in and the session token."""

from .api import Authenticator
from .models import AuthSession, Session, UserRecord

__all__ = [
    "AuthSession",
    "Authenticator",
    "Session",
    "UserRecord",
]
