"""Identity assertions and the outcomes of reconciling them."""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from src.signin.entities.core.user import User


class LoginMethod(str, Enum):
    """How the current session was authenticated."""

    STANDARD = "standard"
    LDAP = "ldap"
    SOCIAL = "social"
    SAML = "saml"


class IdentityAssertion(BaseModel):
    """Normalised, already verified claim handed over by an auth backend."""

    exists: bool = Field(description="Identity maps to a persisted local user")
    email: str | None = Field(default=None, description="Email claimed by the backend")
    auth_method_hint: str | None = Field(
        default=None, description="Login identifier used for directory lookups"
    )
    login_method: LoginMethod = Field(default=LoginMethod.STANDARD)
    user: User = Field(description="Persisted user, or the tentative record to create")


class NeedEmail(BaseModel):
    """A first-time identity has no email; the login form must collect one."""

    kind: Literal["need_email"] = "need_email"
    redirect_to: str
    session_id: str


class LoggedIn(BaseModel):
    """A session was established for ``user``."""

    kind: Literal["logged_in"] = "logged_in"
    user: User
    session_id: str
    redirect_to: str
    provisioned: bool = False
    sync_error: str | None = None


ReconcileOutcome = Annotated[NeedEmail | LoggedIn, Field(discriminator="kind")]


class RedirectToExternalLogout(BaseModel):
    """Local session is gone; the identity provider still has to be told."""

    kind: Literal["external_logout"] = "external_logout"
    redirect_to: str


class RedirectToDefaultLoggedOutPage(BaseModel):
    kind: Literal["logged_out"] = "logged_out"
    redirect_to: str


LogoutOutcome = Annotated[
    RedirectToExternalLogout | RedirectToDefaultLoggedOutPage,
    Field(discriminator="kind"),
]
