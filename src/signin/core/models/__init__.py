"""Core models."""

from .identity import (
    IdentityAssertion,
    LoggedIn,
    LoginMethod,
    LogoutOutcome,
    NeedEmail,
    ReconcileOutcome,
    RedirectToDefaultLoggedOutPage,
    RedirectToExternalLogout,
)
from .session import SessionRecord

__all__ = [
    "IdentityAssertion",
    "LoggedIn",
    "LoginMethod",
    "LogoutOutcome",
    "NeedEmail",
    "ReconcileOutcome",
    "RedirectToDefaultLoggedOutPage",
    "RedirectToExternalLogout",
    "SessionRecord",
]
