"""External login challenge use case."""

import secrets

import logfire
from pydantic import BaseModel

from pms.adapter.oauth.pkce import generate_pkce_pair
from pms.application.usecase.base import BaseUseCase
from pms.domain.service import AuthService, TokenService


class ChallengeRequest(BaseModel):
    """Provider chosen on the login page."""

    provider: str
    return_url: str = "/"


class ChallengeResponse(BaseModel):
    """Where to send the browser, and the correlation cookie to set."""

    authorization_url: str
    correlation_token: str


class ChallengeUseCase(BaseUseCase[ChallengeRequest, ChallengeResponse]):
    """Use case that starts the redirect to an external provider."""

    def __init__(self, auth_service: AuthService, token_service: TokenService) -> None:
        """Initialize challenge use case.

        Args:
            auth_service: Authentication domain service (handles all providers)
            token_service: Token domain service
        """
        self.auth_service = auth_service
        self.token_service = token_service

    async def execute(self, request: ChallengeRequest) -> ChallengeResponse:
        """Build the provider authorization URL.

        State and PKCE verifier are generated here and kept in a signed
        correlation token so that the provider callback can be verified.

        Raises:
            UnsupportedProviderError: If provider unknown or not enabled
        """
        provider = self.auth_service.resolve_provider(request.provider)

        state = secrets.token_urlsafe(32)
        code_verifier, code_challenge = generate_pkce_pair()

        authorization_url = await self.auth_service.initiate_login(
            provider, state, code_challenge
        )
        correlation_token = self.token_service.protect_correlation(
            provider.value, state, code_verifier, request.return_url
        )

        logfire.info("External login challenge issued", provider=provider.value)
        return ChallengeResponse(
            authorization_url=authorization_url,
            correlation_token=correlation_token,
        )
