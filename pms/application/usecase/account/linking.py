"""Linking an external login to an existing local user."""

import logfire

from pms.domain.model import User
from pms.domain.service import SignInService, UserService
from pms.domain.value import ExternalIdentity

from .outcome import Authenticated


async def link_and_sign_in(
    user_service: UserService,
    sign_in_service: SignInService,
    user: User,
    identity: ExternalIdentity,
    return_url: str,
) -> Authenticated | tuple[str, ...]:
    """Link ``identity`` to ``user`` and sign the user in.

    Args:
        user_service: User domain service
        sign_in_service: Sign-in domain service
        user: Existing local user matched by email
        identity: External identity to link
        return_url: Local URL to continue to

    Returns:
        ``Authenticated`` on success, otherwise the error descriptions
    """
    result = await user_service.add_login(user, identity)
    if not result.succeeded:
        return tuple(error.description for error in result.errors)

    ticket = sign_in_service.sign_in(user, is_persistent=False)
    logfire.info(
        "Existing user linked external login and signed in",
        email=user.email,
        provider=identity.provider_name,
    )
    return Authenticated(ticket=ticket, return_url=return_url)
