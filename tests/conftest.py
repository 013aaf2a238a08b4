"""Test configuration and fixtures."""

import pytest

from pms.domain.value import Claim, ClaimTypes, ExternalIdentity, LoginProvider


def make_identity(
    provider: LoginProvider = LoginProvider.GITHUB,
    provider_key: str = "gh-42",
    email: str | None = None,
    name: str | None = "Octo Cat",
) -> ExternalIdentity:
    """Helper to build an external identity as a provider callback would.

    Args:
        provider: Provider asserting the identity
        provider_key: Provider-side user ID
        email: Email claim, omitted when None
        name: Name claim, omitted when None

    Returns:
        ExternalIdentity value object
    """
    claims = [Claim(type=ClaimTypes.NAME_IDENTIFIER, value=provider_key)]
    if name:
        claims.append(Claim(type=ClaimTypes.NAME, value=name))
    if email:
        claims.append(Claim(type=ClaimTypes.EMAIL, value=email))

    return ExternalIdentity(
        provider=provider,
        provider_key=provider_key,
        claims=tuple(claims),
        display_name=provider.display_name,
    )


@pytest.fixture
def identity() -> ExternalIdentity:
    """GitHub identity without an email claim."""
    return make_identity()
