"""Container construction and startup checks."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from pms.domain.repository import EmailStoreCapability, EmailStoreUnsupported
from pms.util.di import PROVIDERS, get_provider
from pms.util.error import ConfigurationError


def create_container() -> AsyncContainer:
    """Build the production container.

    Settings come from the environment; every swappable component uses its
    production variant.
    """
    providers = [get_provider(base)() for base in PROVIDERS]
    return make_async_container(*providers, FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach ``container`` to ``app`` for ``FromDishka`` injection."""
    setup_dishka(container, app)


async def check_email_store(container: AsyncContainer) -> EmailStoreCapability:
    """Fail fast when the configured user store cannot manage emails.

    Raises:
        ConfigurationError: If the user store has no email support
    """
    capability = await container.get(EmailStoreCapability)
    if isinstance(capability, EmailStoreUnsupported):
        raise ConfigurationError(capability.reason)
    return capability
