"""External login callback use case."""

import logfire
from pydantic import BaseModel

from pms.application.usecase.base import BaseUseCase
from pms.domain.service import SignInService, UserService
from pms.domain.value import (
    ExternalIdentity,
    LinkRequired,
    LockedOut,
    NotAllowed,
    SignedIn,
    TwoFactorRequired,
)

from .linking import link_and_sign_in
from .outcome import (
    Authenticated,
    CollectEmail,
    ExternalLoginOutcome,
    LockedOutPage,
    SignInRejected,
)

NOT_ALLOWED_MESSAGE = "You must confirm your email before you can log in."


class ExternalLoginCallbackRequest(BaseModel):
    """External identity restored from the external cookie."""

    identity: ExternalIdentity
    return_url: str = "/"


class ExternalLoginCallbackUseCase(
    BaseUseCase[ExternalLoginCallbackRequest, ExternalLoginOutcome]
):
    """Use case for the return leg of an external login.

    Signs in a user already linked to the external login, otherwise tries
    to link a local user with the same email, otherwise asks for an email.
    """

    def __init__(
        self,
        user_service: UserService,
        sign_in_service: SignInService,
    ) -> None:
        """Initialize callback use case.

        Args:
            user_service: User domain service
            sign_in_service: Sign-in domain service
        """
        self.user_service = user_service
        self.sign_in_service = sign_in_service

    async def execute(
        self, request: ExternalLoginCallbackRequest
    ) -> ExternalLoginOutcome:
        """Execute the callback flow.

        Args:
            request: Identity and return URL

        Returns:
            One of the ``ExternalLoginOutcome`` variants
        """
        identity = request.identity
        with logfire.span(
            "external_login_callback",
            provider=identity.provider_name,
            provider_key=identity.provider_key,
        ):
            result = await self.sign_in_service.external_login_sign_in(
                identity, is_persistent=False, bypass_two_factor=True
            )

            if isinstance(result, SignedIn):
                logfire.info(
                    "User logged in with external provider",
                    name=identity.principal_name,
                    provider=identity.provider_name,
                )
                return Authenticated(ticket=result.ticket, return_url=request.return_url)

            if isinstance(result, LockedOut):
                return LockedOutPage()

            # Unconfirmed accounts go back to login with a message instead of
            # falling through to email matching, which would link the login
            # to an account that cannot sign in
            if isinstance(result, (NotAllowed, TwoFactorRequired)):
                return SignInRejected(
                    message=NOT_ALLOWED_MESSAGE, return_url=request.return_url
                )

            if isinstance(result, LinkRequired):
                return await self.reconcile(result.identity, request.return_url)

            raise TypeError(f"Unexpected sign-in result: {result!r}")

    async def reconcile(
        self, identity: ExternalIdentity, return_url: str
    ) -> Authenticated | CollectEmail:
        """Match an unlinked external login to a local user by email.

        Args:
            identity: External identity with no login link
            return_url: Local URL to continue to

        Returns:
            ``Authenticated`` if an existing user was linked, otherwise the
            email collection state
        """
        email = identity.candidate_email()
        errors: tuple[str, ...] = ()

        if email:
            existing_user = await self.user_service.find_by_email(email)
            if existing_user:
                linked = await link_and_sign_in(
                    self.user_service,
                    self.sign_in_service,
                    existing_user,
                    identity,
                    return_url,
                )
                if isinstance(linked, Authenticated):
                    return linked
                errors = linked

        return CollectEmail(
            provider_display_name=identity.display_name,
            return_url=return_url,
            email=email,
            errors=errors,
        )
