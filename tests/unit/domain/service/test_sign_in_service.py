"""Unit tests for SignInService."""

from datetime import datetime, timedelta, timezone

from dishka import AsyncContainer
import pytest

from pms.domain.repository import UserEmailStore
from pms.domain.service import SignInService, UserService
from pms.domain.value import (
    LinkRequired,
    LockedOut,
    NotAllowed,
    SignedIn,
    TwoFactorRequired,
)
from tests.conftest import make_identity
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def _linked_user(container: AsyncContainer, confirmed: bool = True, **changes):
    user_service = await container.get(UserService)
    user_store = await container.get(UserEmailStore)

    user = user_service.new_user()
    user = await user_service.set_user_name(user, "a@x.com")
    user = await user_service.set_email(user, "a@x.com")
    user = await user_store.set_email_confirmed(user, confirmed)
    user = user.model_copy(update=changes)
    await user_service.create(user)

    identity = make_identity(provider_key="gh-1")
    await user_service.add_login(user, identity)
    return user, identity


class TestExternalLoginSignIn:
    """Tests for SignInService.external_login_sign_in()."""

    @pytest.mark.asyncio
    async def test_unlinked_login_requires_link(self, unit_env: AsyncContainer):
        """No link → LinkRequired carrying the identity."""
        sign_in_service = await unit_env.get(SignInService)
        identity = make_identity(provider_key="unknown")

        result = await sign_in_service.external_login_sign_in(
            identity, is_persistent=False, bypass_two_factor=True
        )

        assert result == LinkRequired(identity=identity)

    @pytest.mark.asyncio
    async def test_linked_confirmed_user_signs_in(self, unit_env: AsyncContainer):
        """Linked, confirmed user gets a session ticket."""
        # Arrange
        sign_in_service = await unit_env.get(SignInService)
        user, identity = await _linked_user(unit_env)

        # Act
        result = await sign_in_service.external_login_sign_in(
            identity, is_persistent=False, bypass_two_factor=True
        )

        # Assert
        assert isinstance(result, SignedIn)
        assert result.ticket.user_id == user.id
        assert result.ticket.authentication_method == "github"
        assert result.ticket.is_persistent is False

    @pytest.mark.asyncio
    async def test_unconfirmed_user_not_allowed(self, unit_env: AsyncContainer):
        """Confirmation is required before sign-in by default."""
        sign_in_service = await unit_env.get(SignInService)
        user, identity = await _linked_user(unit_env, confirmed=False)

        result = await sign_in_service.external_login_sign_in(
            identity, is_persistent=False, bypass_two_factor=True
        )

        assert result == NotAllowed(user_id=user.id)

    @pytest.mark.asyncio
    async def test_locked_out_user(self, unit_env: AsyncContainer):
        """Active lockout wins over sign-in."""
        sign_in_service = await unit_env.get(SignInService)
        user, identity = await _linked_user(
            unit_env,
            lockout_end=datetime.now(timezone.utc) + timedelta(minutes=5),
        )

        result = await sign_in_service.external_login_sign_in(
            identity, is_persistent=False, bypass_two_factor=True
        )

        assert result == LockedOut(user_id=user.id)

    @pytest.mark.asyncio
    async def test_expired_lockout_signs_in(self, unit_env: AsyncContainer):
        """A lockout end in the past no longer blocks sign-in."""
        sign_in_service = await unit_env.get(SignInService)
        _, identity = await _linked_user(
            unit_env,
            lockout_end=datetime.now(timezone.utc) - timedelta(minutes=5),
        )

        result = await sign_in_service.external_login_sign_in(
            identity, is_persistent=False, bypass_two_factor=True
        )

        assert isinstance(result, SignedIn)

    @pytest.mark.asyncio
    async def test_two_factor_required_unless_bypassed(self, unit_env: AsyncContainer):
        """Two-factor users need the bypass flag for external sign-in."""
        sign_in_service = await unit_env.get(SignInService)
        user, identity = await _linked_user(unit_env, two_factor_enabled=True)

        required = await sign_in_service.external_login_sign_in(
            identity, is_persistent=False, bypass_two_factor=False
        )
        bypassed = await sign_in_service.external_login_sign_in(
            identity, is_persistent=False, bypass_two_factor=True
        )

        assert required == TwoFactorRequired(user_id=user.id)
        assert isinstance(bypassed, SignedIn)
