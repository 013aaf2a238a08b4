"""Sign-in domain service."""

import logfire

from pms.config import AuthSettings
from pms.domain.model import User
from pms.domain.value import (
    LinkRequired,
    LockedOut,
    NotAllowed,
    SessionTicket,
    SignedIn,
    SignInResult,
    TwoFactorRequired,
)
from pms.domain.value.types import ExternalIdentity
from .token_service import TokenService
from .user_service import UserService


class SignInService:
    """Domain service that turns a local user into an application session."""

    def __init__(
        self,
        user_service: UserService,
        token_service: TokenService,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize sign-in service.

        Args:
            user_service: User domain service
            token_service: Token domain service
            auth_settings: Authentication settings (sign-in policy)
        """
        self.user_service = user_service
        self.token_service = token_service
        self.auth_settings = auth_settings

    @property
    def requires_confirmed_account(self) -> bool:
        """Whether users must confirm their email before signing in."""
        return self.auth_settings.require_confirmed_account

    def can_sign_in(self, user: User) -> bool:
        """Whether the sign-in policy allows ``user`` to sign in."""
        if self.requires_confirmed_account and not user.email_confirmed:
            return False
        return True

    async def external_login_sign_in(
        self,
        identity: ExternalIdentity,
        is_persistent: bool,
        bypass_two_factor: bool,
    ) -> SignInResult:
        """Sign in the user linked to an external login.

        Only the provider and provider key are used; no password is checked.

        Args:
            identity: External identity from the provider callback
            is_persistent: Whether the session cookie outlives the browser session
            bypass_two_factor: Skip the second factor for this sign-in

        Returns:
            One of the ``SignInResult`` variants
        """
        with logfire.span(
            "sign_in_service.external_login_sign_in",
            provider=identity.provider_name,
            provider_key=identity.provider_key,
        ):
            user = await self.user_service.find_by_login(
                identity.provider_name, identity.provider_key
            )
            if not user:
                logfire.info(
                    "No local user linked to external login",
                    provider=identity.provider_name,
                )
                return LinkRequired(identity=identity)

            if not self.can_sign_in(user):
                logfire.warn("User not allowed to sign in", user_id=str(user.id))
                return NotAllowed(user_id=user.id)

            if user.is_locked_out():
                logfire.warn("User is locked out", user_id=str(user.id))
                return LockedOut(user_id=user.id)

            if user.two_factor_enabled and not bypass_two_factor:
                return TwoFactorRequired(user_id=user.id)

            ticket = self.sign_in(
                user, is_persistent, authentication_method=identity.provider_name
            )
            return SignedIn(ticket=ticket)

    def sign_in(
        self,
        user: User,
        is_persistent: bool,
        authentication_method: str | None = None,
    ) -> SessionTicket:
        """Issue a session for ``user``.

        Args:
            user: User to sign in
            is_persistent: Whether the session cookie outlives the browser session
            authentication_method: Provider used, recorded on the session

        Returns:
            Session ticket for the session cookie
        """
        token, expires_at = self.token_service.create_session_token(
            user, is_persistent, authentication_method
        )
        logfire.info(
            "User signed in",
            user_id=str(user.id),
            authentication_method=authentication_method,
        )
        return SessionTicket(
            token=token,
            user_id=user.id,
            user_name=user.user_name or "",
            is_persistent=is_persistent,
            expires_at=expires_at,
            authentication_method=authentication_method,
        )
