"""Login and logout endpoints for browser sessions."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from loguru import logger
from pydantic import BaseModel, Field

from src.signin.api.http.deps import (
    get_backend_registry,
    get_current_session,
    get_logout_dispatcher,
    get_reconciliation_service,
    get_web_session_service,
)
from src.signin.core.exceptions import DuplicateIdentityError, StorageError
from src.signin.core.models import LoginMethod, SessionRecord
from src.signin.core.security import sanitize_return_url, scrub_login_input
from src.signin.core.services import (
    BackendRegistry,
    LogoutDispatcher,
    ReconciliationService,
    WebSessionService,
    login_identifier_field,
)
from src.signin.runtime.context import get_config

router = APIRouter(tags=["auth"])


class SocialDriver(BaseModel):
    name: str
    label: str


class LoginFormState(BaseModel):
    """Everything a client needs to render the login form."""

    auth_method: str
    identifier_field: str
    social_drivers: list[SocialDriver] = Field(default_factory=list)
    saml_enabled: bool = False
    request_email: bool = False
    old_input: dict[str, str] = Field(default_factory=dict)


def _get_cookie_settings() -> dict[str, Any]:
    config = get_config()
    return {
        "httponly": True,
        "secure": config.security.secure_cookies
        and config.app.environment == "production",
        "samesite": config.security.cookie_samesite,
        "path": "/",
    }


def _redirect_with_session(url: str, session_id: str) -> RedirectResponse:
    config = get_config()
    response = RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=config.security.session_cookie_name,
        value=session_id,
        max_age=config.app.session_max_age,
        **_get_cookie_settings(),
    )
    return response


@router.get("/login")
async def show_login(
    email: str | None = None,
    password: str | None = None,
    session: SessionRecord | None = Depends(get_current_session),
    sessions: WebSessionService = Depends(get_web_session_service),
) -> LoginFormState:
    """Describe the login form.

    Data flashed by a previous login attempt is consumed here. An ``email``
    query parameter pre-fills the form; the password is only echoed back in
    the demo environment.
    """
    config = get_config()

    flashed: dict[str, Any] = {}
    if session is not None and session.flashed:
        flashed = session.pull_flashed()
        await sessions.save(session)

    old_input: dict[str, str] = dict(flashed.get("old_input") or {})
    if email:
        old_input = scrub_login_input(
            {"email": email, "password": password or ""},
            echo_password=config.app.environment == "demo",
        )

    return LoginFormState(
        auth_method=config.auth.method,
        identifier_field=login_identifier_field(config.auth.method),
        social_drivers=[
            SocialDriver(name=name, label=driver.label)
            for name, driver in config.social.items()
            if driver.enabled
        ],
        saml_enabled=config.saml.enabled,
        request_email=bool(flashed.get("request_email", False)),
        old_input=old_input,
    )


@router.post("/login")
async def login(
    request: Request,
    method: LoginMethod = LoginMethod.STANDARD,
    return_to: str | None = None,
    session: SessionRecord | None = Depends(get_current_session),
    sessions: WebSessionService = Depends(get_web_session_service),
    backends: BackendRegistry = Depends(get_backend_registry),
    reconciler: ReconciliationService = Depends(get_reconciliation_service),
) -> RedirectResponse:
    """Authenticate with the chosen backend and reconcile the resulting identity."""
    config = get_config()

    backend = backends.get(method)
    if backend is None:
        raise HTTPException(
            status_code=400, detail=f"Login method not available: {method.value}"
        )

    form = await request.form()
    credentials = {key: value for key, value in form.items() if isinstance(value, str)}

    if session is None:
        session = await sessions.start()
    if return_to:
        session.intended_url = sanitize_return_url(
            return_to,
            allowed_hosts=config.security.allowed_redirect_hosts,
            fallback=config.app.home_url,
        )
        await sessions.save(session)

    assertion = await backend.authenticate(credentials)
    if assertion is None:
        logger.info("Rejected {} login attempt", method.value)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="These credentials do not match our records.",
        )

    try:
        outcome = await reconciler.reconcile(
            assertion,
            session,
            request_email=credentials.get("email"),
            form_input=credentials,
        )
    except DuplicateIdentityError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Account could not be created, please try again later.",
        ) from exc

    return _redirect_with_session(outcome.redirect_to, outcome.session_id)


@router.post("/logout")
async def logout(
    session: SessionRecord | None = Depends(get_current_session),
    dispatcher: LogoutDispatcher = Depends(get_logout_dispatcher),
) -> RedirectResponse:
    outcome = await dispatcher.logout(session)
    response = RedirectResponse(url=outcome.redirect_to, status_code=status.HTTP_302_FOUND)
    response.delete_cookie(get_config().security.session_cookie_name, path="/")
    return response
