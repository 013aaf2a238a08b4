"""Unit tests for ProviderCallbackUseCase."""

from dishka import AsyncContainer
import pytest

from pms.adapter.error import RemoteAuthenticationException
from pms.application.usecase.auth import (
    ChallengeRequest,
    ChallengeUseCase,
    ProviderCallbackRequest,
    ProviderCallbackUseCase,
)
from pms.domain.service import TokenService
from pms.domain.value import LoginProvider
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def _start(container: AsyncContainer, provider: str = "github"):
    challenge = await container.get(ChallengeUseCase)
    token_service = await container.get(TokenService)
    response = await challenge.execute(
        ChallengeRequest(provider=provider, return_url="/after")
    )
    state = token_service.unprotect_correlation(response.correlation_token)["state"]
    return response.correlation_token, state


class TestProviderCallbackUseCase:
    """Tests for the provider redirect leg."""

    @pytest.mark.asyncio
    async def test_successful_callback(self, unit_env: AsyncContainer):
        """Matching state and a code yield the protected external identity."""
        # Arrange
        use_case = await unit_env.get(ProviderCallbackUseCase)
        token_service = await unit_env.get(TokenService)
        correlation_token, state = await _start(unit_env)

        # Act
        response = await use_case.execute(
            ProviderCallbackRequest(
                provider="github",
                code="good-code",
                state=state,
                correlation_token=correlation_token,
            )
        )

        # Assert
        assert response.return_url == "/after"
        identity = token_service.unprotect_external_identity(response.external_token)
        assert identity is not None
        assert identity.provider == LoginProvider.GITHUB
        assert identity.provider_key == "mockgithub123"
        assert identity.display_name == "GitHub"

    @pytest.mark.asyncio
    async def test_missing_correlation(self, unit_env: AsyncContainer):
        """Callback without the correlation cookie fails."""
        use_case = await unit_env.get(ProviderCallbackUseCase)

        with pytest.raises(RemoteAuthenticationException, match="Correlation failed."):
            await use_case.execute(
                ProviderCallbackRequest(provider="github", code="c", state="s")
            )

    @pytest.mark.asyncio
    async def test_state_mismatch(self, unit_env: AsyncContainer):
        """State from another flow fails correlation."""
        use_case = await unit_env.get(ProviderCallbackUseCase)
        correlation_token, _ = await _start(unit_env)

        with pytest.raises(RemoteAuthenticationException, match="Correlation failed."):
            await use_case.execute(
                ProviderCallbackRequest(
                    provider="github",
                    code="c",
                    state="forged",
                    correlation_token=correlation_token,
                )
            )

    @pytest.mark.asyncio
    async def test_correlation_for_other_provider(self, unit_env: AsyncContainer):
        """Correlation minted for Google cannot complete a GitHub callback."""
        use_case = await unit_env.get(ProviderCallbackUseCase)
        correlation_token, state = await _start(unit_env, provider="google")

        with pytest.raises(RemoteAuthenticationException):
            await use_case.execute(
                ProviderCallbackRequest(
                    provider="github",
                    code="c",
                    state=state,
                    correlation_token=correlation_token,
                )
            )

    @pytest.mark.asyncio
    async def test_access_denied(self, unit_env: AsyncContainer):
        """User cancelling at the provider gets the access denied message."""
        use_case = await unit_env.get(ProviderCallbackUseCase)
        correlation_token, state = await _start(unit_env)

        with pytest.raises(RemoteAuthenticationException) as exc_info:
            await use_case.execute(
                ProviderCallbackRequest(
                    provider="github",
                    state=state,
                    error="access_denied",
                    correlation_token=correlation_token,
                )
            )

        assert str(exc_info.value) == (
            "Access was denied by the resource owner or by the remote server."
        )

    @pytest.mark.asyncio
    async def test_provider_error_with_description(self, unit_env: AsyncContainer):
        """Other provider errors carry their description."""
        use_case = await unit_env.get(ProviderCallbackUseCase)
        correlation_token, state = await _start(unit_env)

        with pytest.raises(RemoteAuthenticationException) as exc_info:
            await use_case.execute(
                ProviderCallbackRequest(
                    provider="github",
                    state=state,
                    error="server_error",
                    error_description="try later",
                    correlation_token=correlation_token,
                )
            )

        assert str(exc_info.value) == "server_error;Description=try later"

    @pytest.mark.asyncio
    async def test_missing_code(self, unit_env: AsyncContainer):
        """Callback without a code fails."""
        use_case = await unit_env.get(ProviderCallbackUseCase)
        correlation_token, state = await _start(unit_env)

        with pytest.raises(RemoteAuthenticationException, match="Code was not found."):
            await use_case.execute(
                ProviderCallbackRequest(
                    provider="github", state=state, correlation_token=correlation_token
                )
            )

    @pytest.mark.asyncio
    async def test_rejected_code_exchange(self, unit_env: AsyncContainer):
        """Provider rejecting the code surfaces as a remote failure."""
        use_case = await unit_env.get(ProviderCallbackUseCase)
        correlation_token, state = await _start(unit_env)

        with pytest.raises(RemoteAuthenticationException):
            await use_case.execute(
                ProviderCallbackRequest(
                    provider="github",
                    code="fail-123",
                    state=state,
                    correlation_token=correlation_token,
                )
            )
