"""OAuth infrastructure providers for multi-provider authentication."""

from dishka import Scope, provide

from pms.adapter.oauth import GitHubOAuthClient, RealOAuthClient
from pms.config import Settings
from pms.domain.service.auth_service import OAuthClient
from pms.domain.value import LoginProvider
from pms.util.di.base import ProviderBase


class OAuthProvider(ProviderBase):
    """OAuth component base."""

    __mock_component__ = "oauth"


class ProdOAuthProvider(OAuthProvider):
    """Production OAuth provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_oauth_clients(self, settings: Settings) -> dict[LoginProvider, OAuthClient]:
        """Provide dictionary of OAuth clients by provider.

        Only providers with client credentials configured are enabled.

        Returns:
            Dictionary mapping LoginProvider to OAuthClient
        """
        clients: dict[LoginProvider, OAuthClient] = {}
        for provider in LoginProvider:
            credentials = getattr(settings.providers, provider.value)
            if not credentials.enabled:
                continue

            redirect_uri = settings.provider_redirect_uri(provider.value)
            if provider is LoginProvider.GITHUB:
                clients[provider] = GitHubOAuthClient(
                    client_id=credentials.client_id,
                    client_secret=credentials.client_secret,
                    redirect_uri=redirect_uri,
                )
            else:
                clients[provider] = RealOAuthClient(
                    provider=provider,
                    client_id=credentials.client_id,
                    client_secret=credentials.client_secret,
                    redirect_uri=redirect_uri,
                )
        return clients
