"""External login confirmation use case."""

import html
from urllib.parse import urlencode

import logfire
from pydantic import BaseModel

from pms.adapter.email import EmailQueue
from pms.application.usecase.base import BaseUseCase
from pms.config import Settings
from pms.domain.model import User
from pms.domain.service import SignInService, UserService
from pms.domain.value import EmailAddress, ExternalIdentity
from pms.util.encoding import base64url_encode

from .linking import link_and_sign_in
from .outcome import Authenticated, CollectEmail, PendingConfirmation

CONFIRMATION_SUBJECT = "Confirm your email"
INVALID_EMAIL_MESSAGE = "The Email field is not a valid e-mail address."
REQUIRED_EMAIL_MESSAGE = "The Email field is required."


class ConfirmExternalLoginRequest(BaseModel):
    """Email submitted on the collection form."""

    identity: ExternalIdentity
    email: str | None = None
    return_url: str = "/"


class ConfirmExternalLoginUseCase(
    BaseUseCase[
        ConfirmExternalLoginRequest, Authenticated | CollectEmail | PendingConfirmation
    ]
):
    """Use case that creates (or links) the local account for an external login."""

    def __init__(
        self,
        user_service: UserService,
        sign_in_service: SignInService,
        email_queue: EmailQueue,
        settings: Settings,
    ) -> None:
        """Initialize confirmation use case.

        Args:
            user_service: User domain service
            sign_in_service: Sign-in domain service
            email_queue: Queue for the confirmation email
            settings: Application settings (base URL, page paths)
        """
        self.user_service = user_service
        self.sign_in_service = sign_in_service
        self.email_queue = email_queue
        self.settings = settings

    async def execute(
        self, request: ConfirmExternalLoginRequest
    ) -> Authenticated | CollectEmail | PendingConfirmation:
        """Execute the confirmation flow.

        Steps:
        1. Validate the submitted email
        2. Link instead of create if a user with this email exists
        3. Create the user with user name and email set to the submitted email
        4. Link the external login to the new user
        5. Queue the confirmation email
        6. Redirect to the pending page, or sign in when confirmation is optional

        Args:
            request: Identity, submitted email and return URL

        Returns:
            ``Authenticated``, ``PendingConfirmation`` or the collection
            state with errors
        """
        identity = request.identity
        submitted = (request.email or "").strip()

        def collect(*errors: str) -> CollectEmail:
            return CollectEmail(
                provider_display_name=identity.display_name,
                return_url=request.return_url,
                email=request.email,
                errors=tuple(errors),
            )

        if not submitted:
            return collect(REQUIRED_EMAIL_MESSAGE)
        parsed = EmailAddress.try_parse(submitted)
        if parsed is None:
            logfire.info("Submitted email rejected", provider=identity.provider_name)
            return collect(INVALID_EMAIL_MESSAGE)
        email = parsed.root

        with logfire.span(
            "confirm_external_login", provider=identity.provider_name, email=email
        ):
            existing_user = await self.user_service.find_by_email(email)
            if existing_user:
                linked = await link_and_sign_in(
                    self.user_service,
                    self.sign_in_service,
                    existing_user,
                    identity,
                    request.return_url,
                )
                if isinstance(linked, Authenticated):
                    return linked
                return collect(*linked)

            user = self.user_service.new_user()
            user = await self.user_service.set_user_name(user, email)
            user = await self.user_service.set_email(user, email)

            result = await self.user_service.create(user)
            if not result.succeeded:
                return collect(*(error.description for error in result.errors))

            result = await self.user_service.add_login(user, identity)
            if not result.succeeded:
                # The new user stays without a login link
                logfire.warn(
                    "User created but external login not linked",
                    provider=identity.provider_name,
                    user_id=str(user.id),
                )
                return collect(*(error.description for error in result.errors))

            logfire.info(
                "User created an account using external provider",
                provider=identity.provider_name,
                user_id=str(user.id),
            )
            self._queue_confirmation_email(user, email)

            if self.sign_in_service.requires_confirmed_account:
                return PendingConfirmation(email=email)

            ticket = self.sign_in_service.sign_in(
                user, is_persistent=False, authentication_method=identity.provider_name
            )
            return Authenticated(ticket=ticket, return_url=request.return_url)

    def confirmation_url(self, user: User) -> str:
        """Absolute link to the confirm-email page for ``user``."""
        token = self.user_service.generate_email_confirmation_token(user)
        query = urlencode({"userId": str(user.id), "code": base64url_encode(token)})
        return f"{self.settings.api.base_url}{self.settings.paths.confirm_email}?{query}"

    def _queue_confirmation_email(self, user: User, email: str) -> None:
        # Dispatch failures of any kind never undo the account
        try:
            callback_url = self.confirmation_url(user)
            body = (
                "Please confirm your account by "
                f"<a href='{html.escape(callback_url)}'>clicking here</a>."
            )
            self.email_queue.enqueue(email, CONFIRMATION_SUBJECT, body)
            logfire.info("Confirmation email queued", email=email)
        except Exception as e:
            logfire.error(
                "Failed to enqueue confirmation email",
                email=email,
                error=str(e),
                error_type=type(e).__name__,
            )
