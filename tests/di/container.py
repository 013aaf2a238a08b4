"""Test container with in-memory stores, fake providers and a recording sender."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from pms.util.di import PROVIDERS, Component, get_provider


def mockable_components() -> set[str]:
    """Names of components that have a mock variant."""
    return {
        base.__mock_component__
        for base in PROVIDERS
        if base.__mock_component__ and base.__subclasses__()
    }


def build_test_container(
    unmock: set[Component] | None = None, fastapi: bool = False
) -> AsyncContainer:
    """Build a container for tests.

    Args:
        unmock: Components that use their production variant
        fastapi: Add the FastAPI integration provider, for ``create_app`` tests

    Raises:
        ValueError: If ``unmock`` names a component that cannot be swapped

    Examples:
        build_test_container()
        build_test_container(unmock={"persistence"})
        create_app(build_test_container(fastapi=True))
    """
    unmock = unmock or set()
    unknown = unmock - mockable_components()
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")

    providers = [
        get_provider(base, use_mock=base.__mock_component__ not in unmock)()
        for base in PROVIDERS
    ]
    if fastapi:
        providers.append(FastapiProvider())

    return make_async_container(*providers)
