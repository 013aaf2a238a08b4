"""External login domain service."""

import logfire

from pms.domain.value.types import ExternalIdentity, LoginProvider


class OAuthClient:
    """Generic OAuth client interface for all providers."""

    async def initiate_authorization(self, state: str, code_challenge: str) -> str:
        """Build the provider authorization URL.

        Args:
            state: State parameter for CSRF protection
            code_challenge: PKCE S256 challenge

        Returns:
            Authorization URL to redirect user to
        """
        raise NotImplementedError

    async def complete_authorization(
        self, code: str, code_verifier: str
    ) -> ExternalIdentity:
        """Exchange a callback code for the provider's view of the user.

        Args:
            code: Authorization code from the provider callback
            code_verifier: PKCE verifier matching the challenge sent earlier

        Returns:
            Normalized external identity

        Raises:
            RemoteAuthenticationException: If the provider exchange fails
        """
        raise NotImplementedError


class UnsupportedProviderError(ValueError):
    """No OAuth client is configured for the requested provider."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider}")


class AuthService:
    """Domain service for external login providers.

    Routes authorization calls to the client registered for each provider.
    """

    def __init__(self, oauth_clients: dict[LoginProvider, OAuthClient]) -> None:
        """Initialize auth service.

        Args:
            oauth_clients: Map of provider to OAuth client implementation
        """
        self.oauth_clients = oauth_clients

    @property
    def providers(self) -> list[LoginProvider]:
        """Enabled providers, in declaration order."""
        return [p for p in LoginProvider if p in self.oauth_clients]

    def resolve_provider(self, name: str) -> LoginProvider:
        """Map a provider name (any case) to an enabled provider.

        Raises:
            UnsupportedProviderError: If the provider is unknown or disabled
        """
        try:
            provider = LoginProvider(name.lower())
        except ValueError:
            raise UnsupportedProviderError(name)
        if provider not in self.oauth_clients:
            raise UnsupportedProviderError(name)
        return provider

    async def initiate_login(
        self, provider: LoginProvider, state: str, code_challenge: str
    ) -> str:
        """Start the provider redirect.

        Returns:
            Authorization URL to redirect user to

        Raises:
            UnsupportedProviderError: If provider not enabled
        """
        client = self.oauth_clients.get(provider)
        if not client:
            raise UnsupportedProviderError(provider.value)

        logfire.info("External login initiated", provider=provider.value)
        return await client.initiate_authorization(state, code_challenge)

    async def complete_login(
        self, provider: LoginProvider, code: str, code_verifier: str
    ) -> ExternalIdentity:
        """Finish the provider redirect.

        Returns:
            External identity asserted by the provider

        Raises:
            UnsupportedProviderError: If provider not enabled
            RemoteAuthenticationException: If the provider exchange fails
        """
        client = self.oauth_clients.get(provider)
        if not client:
            raise UnsupportedProviderError(provider.value)

        with logfire.span("auth_service.complete_login", provider=provider.value):
            identity = await client.complete_authorization(code, code_verifier)
            logfire.info(
                "External login completed",
                provider=provider.value,
                provider_key=identity.provider_key,
            )
            return identity
