"""OAuth 2.0 adapters for external login providers."""

from .client import GitHubOAuthClient, MockOAuthClient, RealOAuthClient
from .pkce import create_code_challenge, generate_pkce_pair
from .providers import PROVIDER_ENDPOINTS, ProviderEndpoints, map_claims

__all__ = [
    "GitHubOAuthClient",
    "MockOAuthClient",
    "RealOAuthClient",
    "PROVIDER_ENDPOINTS",
    "ProviderEndpoints",
    "map_claims",
    "create_code_challenge",
    "generate_pkce_pair",
]
