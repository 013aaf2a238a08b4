"""Dependency injection wiring for the identity service."""

from typing import Type

from pms.util.di.application import ProdApplicationProvider
from pms.util.di.base import Component, ProviderBase
from pms.util.di.core import ProdConfigProvider
from pms.util.di.domain import ProdDomainProvider
from pms.util.di.infrastructure import (
    EmailProvider,
    EmailQueueProvider,
    OAuthProvider,
    PersistenceProvider,
    ProdEmailProvider,
    ProdOAuthProvider,
    ProdPersistenceProvider,
)
from pms.util.error import DependencyInjectionError

# Settings, services, use cases and the email queue have a single variant.
# Persistence, OAuth clients and the email sender are swapped in tests.
PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    EmailQueueProvider,
    OAuthProvider,
    PersistenceProvider,
    EmailProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve the provider class to instantiate for ``base``.

    Args:
        base: Entry from ``PROVIDERS``
        use_mock: Pick the mock variant of a swappable component

    Returns:
        ``base`` itself when it has no variants, otherwise the matching subclass

    Raises:
        DependencyInjectionError: If the component lacks the requested variant
    """
    variants = base.__subclasses__()
    if not variants:
        return base

    for variant in variants:
        if variant.__is_mock__ == use_mock:
            return variant

    kind = "mock" if use_mock else "production"
    component = base.__mock_component__ or base.__name__
    raise DependencyInjectionError(f"No {kind} implementation for {component}")


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "EmailQueueProvider",
    "EmailProvider",
    "OAuthProvider",
    "PersistenceProvider",
    "ProdEmailProvider",
    "ProdOAuthProvider",
    "ProdPersistenceProvider",
]
