"""Endpoints and claim mappings for the supported login providers."""

from dataclasses import dataclass, field
from typing import Any, Literal

from pms.domain.value.types import Claim, ClaimTypes, LoginProvider


@dataclass(frozen=True)
class ProviderEndpoints:
    """Static OAuth 2.0 description of a provider."""

    authorize_url: str
    token_url: str
    user_info_url: str
    scopes: tuple[str, ...]
    # JSON field holding the stable user ID
    key_field: str = "id"
    # JSON key -> claim type
    claim_map: dict[str, str] = field(default_factory=dict)
    # Some APIs wrap the user object (Twitter: {"data": {...}})
    user_info_envelope: str | None = None
    user_info_params: dict[str, str] = field(default_factory=dict)
    # How client credentials are sent to the token endpoint
    token_auth: Literal["basic", "post"] = "post"
    scope_separator: str = " "


PROVIDER_ENDPOINTS: dict[LoginProvider, ProviderEndpoints] = {
    LoginProvider.GOOGLE: ProviderEndpoints(
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        token_url="https://oauth2.googleapis.com/token",
        user_info_url="https://www.googleapis.com/oauth2/v3/userinfo",
        scopes=("openid", "profile", "email"),
        key_field="sub",
        claim_map={
            "sub": ClaimTypes.NAME_IDENTIFIER,
            "name": ClaimTypes.NAME,
            "given_name": ClaimTypes.GIVEN_NAME,
            "family_name": ClaimTypes.SURNAME,
            "email": ClaimTypes.EMAIL,
        },
    ),
    LoginProvider.FACEBOOK: ProviderEndpoints(
        authorize_url="https://www.facebook.com/v18.0/dialog/oauth",
        token_url="https://graph.facebook.com/v18.0/oauth/access_token",
        user_info_url="https://graph.facebook.com/v18.0/me",
        scopes=("email", "public_profile"),
        scope_separator=",",
        user_info_params={"fields": "id,name,email,first_name,last_name"},
        claim_map={
            "id": ClaimTypes.NAME_IDENTIFIER,
            "name": ClaimTypes.NAME,
            "first_name": ClaimTypes.GIVEN_NAME,
            "last_name": ClaimTypes.SURNAME,
            "email": ClaimTypes.EMAIL,
        },
    ),
    LoginProvider.MICROSOFT: ProviderEndpoints(
        authorize_url="https://login.microsoftonline.com/common/oauth2/v2.0/authorize",
        token_url="https://login.microsoftonline.com/common/oauth2/v2.0/token",
        user_info_url="https://graph.microsoft.com/v1.0/me",
        scopes=("https://graph.microsoft.com/user.read",),
        claim_map={
            "id": ClaimTypes.NAME_IDENTIFIER,
            "displayName": ClaimTypes.NAME,
            "givenName": ClaimTypes.GIVEN_NAME,
            "surname": ClaimTypes.SURNAME,
            "mail": ClaimTypes.EMAIL,
        },
    ),
    LoginProvider.GITHUB: ProviderEndpoints(
        authorize_url="https://github.com/login/oauth/authorize",
        token_url="https://github.com/login/oauth/access_token",
        user_info_url="https://api.github.com/user",
        # Private addresses are only visible through /user/emails
        scopes=("read:user", "user:email"),
        claim_map={
            "id": ClaimTypes.NAME_IDENTIFIER,
            "login": ClaimTypes.NAME,
            "email": ClaimTypes.EMAIL,
        },
    ),
    LoginProvider.TWITTER: ProviderEndpoints(
        authorize_url="https://twitter.com/i/oauth2/authorize",
        token_url="https://api.twitter.com/2/oauth2/token",
        user_info_url="https://api.twitter.com/2/users/me",
        scopes=("tweet.read", "users.read"),
        user_info_envelope="data",
        user_info_params={"user.fields": "id,name,username"},
        token_auth="basic",
        claim_map={
            "id": ClaimTypes.NAME_IDENTIFIER,
            "username": ClaimTypes.NAME,
        },
    ),
}

GITHUB_EMAILS_URL = "https://api.github.com/user/emails"


def map_claims(
    provider: LoginProvider, endpoints: ProviderEndpoints, user_info: dict[str, Any]
) -> tuple[Claim, ...]:
    """Translate a provider user object into claims.

    Mapped keys become well-known claim types; every scalar field is also
    kept as ``urn:<provider>:<key>``. Empty values are dropped.

    Args:
        provider: Provider that returned ``user_info``
        endpoints: Provider description holding the claim map
        user_info: Decoded user object

    Returns:
        Claims in mapping order followed by the raw fields
    """
    claims: list[Claim] = []
    for key, claim_type in endpoints.claim_map.items():
        value = user_info.get(key)
        if value is not None and value != "":
            claims.append(Claim(type=claim_type, value=str(value)))

    for key, value in user_info.items():
        if isinstance(value, (str, int, float, bool)) and value != "":
            claims.append(Claim(type=f"urn:{provider.value}:{key}", value=str(value)))

    return tuple(claims)
