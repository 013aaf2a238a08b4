"""Provider redirect use case."""

import secrets

import logfire
from pydantic import BaseModel

from pms.adapter.error import RemoteAuthenticationException
from pms.application.usecase.base import BaseUseCase
from pms.domain.service import AuthService, TokenService

ACCESS_DENIED_MESSAGE = "Access was denied by the resource owner or by the remote server."


class ProviderCallbackRequest(BaseModel):
    """Query parameters sent by the provider, plus the correlation cookie."""

    provider: str
    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None
    correlation_token: str | None = None


class ProviderCallbackResponse(BaseModel):
    """External cookie value and where the flow continues."""

    external_token: str
    return_url: str


class ProviderCallbackUseCase(
    BaseUseCase[ProviderCallbackRequest, ProviderCallbackResponse]
):
    """Use case that completes the OAuth exchange with a provider.

    Any failure is a remote authentication failure: the correlation cookie
    is missing or does not match, the provider reported an error, or the
    code exchange failed.
    """

    def __init__(self, auth_service: AuthService, token_service: TokenService) -> None:
        """Initialize provider callback use case.

        Args:
            auth_service: Authentication domain service (handles all providers)
            token_service: Token domain service
        """
        self.auth_service = auth_service
        self.token_service = token_service

    async def execute(self, request: ProviderCallbackRequest) -> ProviderCallbackResponse:
        """Verify the callback and exchange the code for an external identity.

        Raises:
            RemoteAuthenticationException: If the callback cannot be completed
            UnsupportedProviderError: If provider unknown or not enabled
        """
        provider = self.auth_service.resolve_provider(request.provider)

        correlation = None
        if request.correlation_token:
            correlation = self.token_service.unprotect_correlation(
                request.correlation_token
            )
        if (
            not correlation
            or correlation["provider"] != provider.value
            or not request.state
            or not secrets.compare_digest(correlation["state"], request.state)
        ):
            logfire.warn("Correlation failed", provider=provider.value)
            raise RemoteAuthenticationException("Correlation failed.")

        if request.error:
            logfire.warn(
                "Provider returned an error",
                provider=provider.value,
                error=request.error,
            )
            if request.error == "access_denied":
                raise RemoteAuthenticationException(ACCESS_DENIED_MESSAGE)
            message = request.error
            if request.error_description:
                message = f"{message};Description={request.error_description}"
            raise RemoteAuthenticationException(message)

        if not request.code:
            raise RemoteAuthenticationException("Code was not found.")

        identity = await self.auth_service.complete_login(
            provider, request.code, correlation["verifier"]
        )
        return ProviderCallbackResponse(
            external_token=self.token_service.protect_external_identity(identity),
            return_url=correlation["return_url"],
        )
