"""Integration tests for the PostgreSQL identity store.

Require a migrated PostgreSQL database reachable through ``DATABASE__URL``.
"""

import os
from uuid import uuid4

import pytest

from pms.domain.error import DuplicateLoginError, DuplicateUserError
from pms.domain.model import LoginLink, User
from pms.domain.repository import LoginLinkRepository, UserEmailStore
from pms.domain.value import LoginLinkId
from tests.harness import create_env_fixture

pytestmark = pytest.mark.skipif(
    not os.environ.get("DATABASE__URL"), reason="DATABASE__URL not set"
)

# Integration test fixture
integration_env = create_env_fixture(unmock={"persistence"})


async def _new_user(store: UserEmailStore, email: str) -> User:
    user = await store.set_user_name(User(), email)
    return await store.set_email(user, email)


class TestPostgresUserRepository:
    """Integration tests for PostgresUserRepository."""

    @pytest.mark.asyncio
    async def test_create_and_find_by_email_ignoring_case(self, integration_env):
        """Email lookup uses the normalized column."""
        # Arrange
        store = await integration_env.get(UserEmailStore)
        email = f"User-{uuid4().hex[:8]}@Example.com"
        user = await store.create(await _new_user(store, email))

        # Act
        found = await store.find_by_email(email.lower())

        # Assert
        assert found is not None
        assert found.id == user.id
        assert found.email == email
        assert found.email_confirmed is False

    @pytest.mark.asyncio
    async def test_duplicate_email_raises(self, integration_env):
        """The unique constraint on the normalized email is reported."""
        # Arrange
        store = await integration_env.get(UserEmailStore)
        email = f"dup-{uuid4().hex[:8]}@x.com"
        await store.create(await _new_user(store, email))
        other = await store.set_user_name(User(), f"other-{uuid4().hex[:8]}")
        other = await store.set_email(other, email.upper())

        # Act / Assert
        with pytest.raises(DuplicateUserError) as exc_info:
            await store.create(other)
        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_update_confirms_email(self, integration_env):
        """Confirmation flag round-trips through update."""
        store = await integration_env.get(UserEmailStore)
        user = await store.create(
            await _new_user(store, f"c-{uuid4().hex[:8]}@x.com")
        )

        await store.update(await store.set_email_confirmed(user, True))

        assert (await store.find_by_id(user.id)).email_confirmed is True


class TestPostgresLoginLinkRepository:
    """Integration tests for PostgresLoginLinkRepository."""

    @pytest.mark.asyncio
    async def test_link_is_unique_per_provider_key(self, integration_env):
        """A provider key can be linked once."""
        # Arrange
        store = await integration_env.get(UserEmailStore)
        links = await integration_env.get(LoginLinkRepository)
        user = await store.create(
            await _new_user(store, f"l-{uuid4().hex[:8]}@x.com")
        )
        key = uuid4().hex

        def link() -> LoginLink:
            return LoginLink(
                id=LoginLinkId(uuid4()),
                user_id=user.id,
                provider="github",
                provider_key=key,
                provider_display_name="GitHub",
            )

        await links.add(link())

        # Act / Assert
        with pytest.raises(DuplicateLoginError):
            await links.add(link())
        found = await links.find_by_provider("github", key)
        assert found is not None
        assert found.user_id == user.id
