"""OAuth 2.0 clients for external login providers.

Implements the Authorization Code Flow with PKCE. Each provider is described
by a ``ProviderEndpoints`` entry; GitHub needs an extra call to discover
private email addresses.
"""

from typing import Any
from urllib.parse import urlencode

import httpx
import logfire

from pms.adapter.error import RemoteAuthenticationException
from pms.domain.service.auth_service import OAuthClient
from pms.domain.value.types import Claim, ClaimTypes, ExternalIdentity, LoginProvider

from .providers import GITHUB_EMAILS_URL, PROVIDER_ENDPOINTS, ProviderEndpoints, map_claims


class RealOAuthClient(OAuthClient):
    """OAuth 2.0 client with PKCE support for a single provider."""

    def __init__(
        self,
        provider: LoginProvider,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        endpoints: ProviderEndpoints | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize OAuth client.

        Args:
            provider: Provider this client talks to
            client_id: OAuth client ID
            client_secret: OAuth client secret
            redirect_uri: Callback URL registered with the provider
            endpoints: Provider description, defaults to the built-in one
            timeout: HTTP timeout in seconds
        """
        self.provider = provider
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.endpoints = endpoints or PROVIDER_ENDPOINTS[provider]
        self.timeout = timeout

    async def initiate_authorization(self, state: str, code_challenge: str) -> str:
        """Build the provider authorization URL.

        Args:
            state: State parameter for CSRF protection
            code_challenge: PKCE S256 challenge

        Returns:
            Authorization URL to redirect user to
        """
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": self.endpoints.scope_separator.join(self.endpoints.scopes),
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }

        logfire.info(
            "OAuth authorization initiated",
            provider=self.provider.value,
            redirect_uri=self.redirect_uri,
        )
        return f"{self.endpoints.authorize_url}?{urlencode(params)}"

    async def complete_authorization(
        self, code: str, code_verifier: str
    ) -> ExternalIdentity:
        """Exchange the callback code and fetch the user.

        Args:
            code: Authorization code from the provider callback
            code_verifier: PKCE verifier matching the challenge sent earlier

        Returns:
            External identity with mapped claims

        Raises:
            RemoteAuthenticationException: If the provider exchange fails
        """
        access_token = await self._exchange_code_for_token(code, code_verifier)
        user_info = await self._get_user_info(access_token)

        key = user_info.get(self.endpoints.key_field)
        if key is None or key == "":
            logfire.error(
                "Provider user has no identifier",
                provider=self.provider.value,
                key_field=self.endpoints.key_field,
            )
            raise RemoteAuthenticationException(
                f"{self.provider.display_name} did not return a user identifier"
            )

        identity = ExternalIdentity(
            provider=self.provider,
            provider_key=str(key),
            claims=map_claims(self.provider, self.endpoints, user_info),
            display_name=self.provider.display_name,
        )
        logfire.info(
            "OAuth authorization completed",
            provider=self.provider.value,
            provider_key=identity.provider_key,
        )
        return identity

    async def _exchange_code_for_token(self, code: str, code_verifier: str) -> str:
        """Exchange authorization code for access token.

        Raises:
            RemoteAuthenticationException: If token exchange fails
        """
        data = {
            "code": code,
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "code_verifier": code_verifier,
        }
        auth = None
        if self.endpoints.token_auth == "basic":
            auth = (self.client_id, self.client_secret)
        else:
            data["client_secret"] = self.client_secret

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.endpoints.token_url,
                    data=data,
                    auth=auth,
                    headers={"Accept": "application/json"},
                    timeout=self.timeout,
                )

                if response.status_code != 200:
                    logfire.error(
                        "OAuth token exchange failed",
                        provider=self.provider.value,
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise RemoteAuthenticationException(
                        f"Token exchange failed: {response.status_code}"
                    )

                result = response.json()
        except httpx.HTTPError as e:
            logfire.error(
                "OAuth token exchange HTTP error",
                provider=self.provider.value,
                error=str(e),
            )
            raise RemoteAuthenticationException(f"HTTP error during token exchange: {e}")

        access_token = result.get("access_token")
        if not access_token:
            # GitHub reports errors with a 200 and an "error" field
            raise RemoteAuthenticationException(
                result.get("error_description") or result.get("error") or "No access token"
            )
        return access_token

    async def _get(self, url: str, access_token: str, params: dict | None = None) -> Any:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    url,
                    params=params,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Accept": "application/json",
                    },
                    timeout=self.timeout,
                )

                if response.status_code != 200:
                    logfire.error(
                        "OAuth user info request failed",
                        provider=self.provider.value,
                        url=url,
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise RemoteAuthenticationException(
                        f"User info request failed: {response.status_code}"
                    )

                return response.json()
        except httpx.HTTPError as e:
            logfire.error(
                "OAuth user info HTTP error", provider=self.provider.value, error=str(e)
            )
            raise RemoteAuthenticationException(f"HTTP error fetching user info: {e}")

    async def _get_user_info(self, access_token: str) -> dict[str, Any]:
        """Fetch the provider's user object.

        Raises:
            RemoteAuthenticationException: If API request fails
        """
        result = await self._get(
            self.endpoints.user_info_url,
            access_token,
            params=self.endpoints.user_info_params or None,
        )
        if self.endpoints.user_info_envelope:
            result = result.get(self.endpoints.user_info_envelope) or {}
        if not isinstance(result, dict):
            raise RemoteAuthenticationException("Unexpected user info payload")
        return result


class GitHubOAuthClient(RealOAuthClient):
    """GitHub client that resolves the primary address when the profile email is private."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(
            LoginProvider.GITHUB, client_id, client_secret, redirect_uri, timeout=timeout
        )

    async def _get_user_info(self, access_token: str) -> dict[str, Any]:
        user_info = await super()._get_user_info(access_token)
        if user_info.get("email"):
            return user_info

        emails = await self._get(GITHUB_EMAILS_URL, access_token)
        primary = next(
            (
                e["email"]
                for e in emails
                if isinstance(e, dict) and e.get("primary") and e.get("verified")
            ),
            None,
        )
        if primary:
            user_info = {**user_info, "email": primary}
        return user_info


class MockOAuthClient(OAuthClient):
    """Mock OAuth client for testing.

    Returns deterministic test data without making real API calls. A code
    starting with ``fail`` simulates a provider rejection.
    """

    def __init__(
        self,
        provider: LoginProvider,
        provider_key: str | None = None,
        email: str | None = "",
        name: str | None = None,
    ):
        """Initialize mock client without real OAuth configuration.

        Args:
            provider: Provider to impersonate
            provider_key: Key of the mock user
            email: Email claim, "" for a provider-specific default, None for no claim
            name: Name claim
        """
        self.provider = provider
        self.provider_key = provider_key or f"mock{provider.value}123"
        self.email = f"mock@{provider.value}.example.com" if email == "" else email
        self.name = name or f"Mock {provider.display_name} User"

    async def initiate_authorization(self, state: str, code_challenge: str) -> str:
        """Return mock authorization URL."""
        authorize_url = PROVIDER_ENDPOINTS[self.provider].authorize_url
        return f"{authorize_url}?state={state}&mock=true"

    async def complete_authorization(
        self, code: str, code_verifier: str
    ) -> ExternalIdentity:
        """Return mock external identity."""
        if code.startswith("fail"):
            raise RemoteAuthenticationException(f"Mock provider rejected code {code}")

        claims = [
            Claim(type=ClaimTypes.NAME_IDENTIFIER, value=self.provider_key),
            Claim(type=ClaimTypes.NAME, value=self.name),
        ]
        if self.email:
            claims.append(Claim(type=ClaimTypes.EMAIL, value=self.email))

        return ExternalIdentity(
            provider=self.provider,
            provider_key=self.provider_key,
            claims=tuple(claims),
            display_name=self.provider.display_name,
        )
