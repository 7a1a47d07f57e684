"""Which login form field identifies the account for an auth method."""

from typing import Literal

IdentifierField = Literal["email", "username"]


def login_identifier_field(method: str) -> IdentifierField:
    """Return the field the login form and lookups key on.

    Standard logins are keyed on email; directory-backed logins use the
    directory username.
    """
    return "email" if method == "standard" else "username"
