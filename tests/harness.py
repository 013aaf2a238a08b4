"""Container fixtures for unit and integration tests."""

import pytest_asyncio

from pms.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Build a fixture yielding a request-scoped container.

    Every swappable component is mocked except those named in ``unmock``.
    Unmocking ``persistence`` needs a migrated PostgreSQL database at
    ``DATABASE__URL``.

    Usage:
        unit_env = create_env_fixture()

        @pytest.mark.asyncio
        async def test_find_user(unit_env):
            user_service = await unit_env.get(UserService)
            assert await user_service.find_by_email("a@x.com") is None
    """

    @pytest_asyncio.fixture
    async def _env():
        container = build_test_container(unmock=unmock)
        async with container() as request_container:
            yield request_container
        await container.close()

    return _env
