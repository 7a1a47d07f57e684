from loguru import logger

from src.signin.core.models.identity import (
    LoginMethod,
    LogoutOutcome,
    RedirectToDefaultLoggedOutPage,
    RedirectToExternalLogout,
)
from src.signin.core.models.session import SessionRecord
from src.signin.core.services.session.web_session import WebSessionService
from src.signin.runtime.context import get_config


class LogoutDispatcher:
    """Ends a session the way it was started.

    The local session is always destroyed first. SAML sessions then hand over
    to the identity provider's logout endpoint so it can end its own session.
    """

    def __init__(self, sessions: WebSessionService) -> None:
        self._sessions = sessions

    async def logout(self, session: SessionRecord | None) -> LogoutOutcome:
        config = get_config()
        if session is None:
            return RedirectToDefaultLoggedOutPage(redirect_to=config.app.logged_out_url)

        method = session.last_login_method
        await self._sessions.invalidate(session)
        logger.info(
            "Session for user {} invalidated (login method: {})",
            session.user_id,
            method.value if method else "none",
        )

        if method is LoginMethod.SAML and config.saml.enabled:
            return RedirectToExternalLogout(redirect_to=config.saml.logout_url)
        return RedirectToDefaultLoggedOutPage(redirect_to=config.app.logged_out_url)
