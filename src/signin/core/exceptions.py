"""Errors raised while reconciling an authenticated identity."""


class SigninError(Exception):
    """Base class for sign-in errors."""


class DuplicateIdentityError(SigninError):
    """A first-time identity claims an email that already belongs to a user.

    Raised before anything is persisted. The message is safe to show to the
    person signing in.
    """

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            f"A user with the email {email} already exists but with different credentials"
        )


class StorageError(SigninError):
    """Persisting a newly provisioned user failed; no login was established."""


class SyncError(SigninError):
    """Directory group sync failed after the login was granted."""


class AvatarFetchError(SigninError):
    """Fetching or assigning an avatar failed. Never surfaced to callers."""
