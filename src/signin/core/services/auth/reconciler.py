"""Reconcile an externally verified identity with the local user store.

Every login attempt goes through a single decision over three facts: whether
the identity is already linked to a local user, whether the backend supplied
an email, and whether the login request supplied one.

    linked                      -> log in, sync groups
    unlinked, no email at all   -> ask for an email, nothing persisted
    unlinked, email from form   -> provision with that email
    unlinked, email from claim  -> provision with the claimed email

Provisioning refuses an email that already belongs to someone else instead of
merging the two identities.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Protocol

from loguru import logger

from src.signin.core.exceptions import AvatarFetchError, DuplicateIdentityError, SyncError
from src.signin.core.models.identity import (
    IdentityAssertion,
    LoggedIn,
    NeedEmail,
    ReconcileOutcome,
)
from src.signin.core.models.session import SessionRecord
from src.signin.core.security import sanitize_return_url, scrub_login_input
from src.signin.core.services.auth.identifier import login_identifier_field
from src.signin.core.services.session.web_session import WebSessionService
from src.signin.core.services.user.provisioning import ProvisioningService
from src.signin.entities.core.user import User, UserRepository, normalize_email
from src.signin.runtime.context import get_config


class GroupSyncer(Protocol):
    def should_sync(self) -> bool: ...

    async def sync(self, user: User, identifier: str | None) -> set[str]: ...


class Decision(str, Enum):
    ALREADY_LINKED = "already_linked"
    NEED_EMAIL = "need_email"
    EMAIL_FROM_REQUEST = "email_from_request"
    PROVISION = "provision"


# (has_email, has_request_email) for identities without a local user
_UNLINKED_DECISIONS = {
    (False, False): Decision.NEED_EMAIL,
    (False, True): Decision.EMAIL_FROM_REQUEST,
    (True, False): Decision.PROVISION,
    (True, True): Decision.PROVISION,
}


def decide(exists: bool, has_email: bool, has_request_email: bool) -> Decision:
    """Pick the reconciliation path. A claimed email beats a typed one."""
    if exists:
        return Decision.ALREADY_LINKED
    return _UNLINKED_DECISIONS[(has_email, has_request_email)]


class ReconciliationService:
    """Turns an IdentityAssertion into a logged-in session or a request for more data."""

    def __init__(
        self,
        user_repo: UserRepository,
        provisioning: ProvisioningService,
        sessions: WebSessionService,
        group_syncer: GroupSyncer | None = None,
    ) -> None:
        self._users = user_repo
        self._provisioning = provisioning
        self._sessions = sessions
        self._group_syncer = group_syncer

    async def reconcile(
        self,
        assertion: IdentityAssertion,
        session: SessionRecord,
        *,
        request_email: str | None = None,
        form_input: Mapping[str, str] | None = None,
    ) -> ReconcileOutcome:
        """Resolve ``assertion`` against the user store and establish a session.

        Args:
            assertion: Identity verified by an authentication backend
            session: The caller's current web session
            request_email: Email typed into the login form, if any
            form_input: The submitted login form, flashed back on NeedEmail

        Raises:
            DuplicateIdentityError: a first-time identity claims a taken email
            StorageError: the new user could not be persisted
        """
        form_input = dict(form_input or {})
        request_email = normalize_email(request_email)
        claimed_email = normalize_email(assertion.email)

        # An unlinked identity must never leave a session behind, whatever
        # the authenticator did before handing it over.
        if not assertion.exists:
            session = await self._sessions.logout(session)

        decision = decide(
            assertion.exists, claimed_email is not None, request_email is not None
        )
        logger.debug("Reconciling {} identity: {}", assertion.login_method.value, decision.value)

        if decision is Decision.NEED_EMAIL:
            return await self._request_email(session, form_input)

        user = assertion.user
        provisioned = False
        if decision is not Decision.ALREADY_LINKED:
            email = request_email if decision is Decision.EMAIL_FROM_REQUEST else claimed_email
            user = await self._provision(user.model_copy(update={"email": email}), email)
            provisioned = True

        session = await self._sessions.login(session, user.id, assertion.login_method)
        sync_error = await self._sync_groups(user, assertion, form_input)

        config = get_config()
        redirect_to = sanitize_return_url(
            await self._sessions.pull_intended_url(session),
            allowed_hosts=config.security.allowed_redirect_hosts,
            fallback=config.app.home_url,
        )
        return LoggedIn(
            user=user,
            session_id=session.id,
            redirect_to=redirect_to,
            provisioned=provisioned,
            sync_error=sync_error,
        )

    async def _request_email(
        self, session: SessionRecord, form_input: dict[str, str]
    ) -> NeedEmail:
        config = get_config()
        session.flash(
            "old_input",
            scrub_login_input(form_input, echo_password=config.app.environment == "demo"),
        )
        session.flash("request_email", True)
        await self._sessions.save(session)
        return NeedEmail(redirect_to=config.app.login_url, session_id=session.id)

    async def _provision(self, user: User, email: str) -> User:
        if self._users.find_by_email(email) is not None:
            logger.warning("Refusing to provision second account for {}", email)
            raise DuplicateIdentityError(email)

        with self._users.transaction():
            self._users.save(user)
            self._provisioning.attach_default_role(user)
        logger.info("Provisioned user {} for {}", user.id, user.email)

        try:
            await self._provisioning.fetch_and_assign_avatar(user)
        except AvatarFetchError as exc:
            logger.warning("Skipping avatar for user {}: {}", user.id, exc)
        return user

    async def _sync_groups(
        self, user: User, assertion: IdentityAssertion, form_input: dict[str, str]
    ) -> str | None:
        if self._group_syncer is None or not self._group_syncer.should_sync():
            return None

        identifier = assertion.auth_method_hint or form_input.get(
            login_identifier_field(get_config().auth.method)
        )
        try:
            await self._group_syncer.sync(user, identifier)
        except SyncError as exc:
            logger.warning("Group sync failed for user {}: {}", user.id, exc)
            return str(exc)
        return None
