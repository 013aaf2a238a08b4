"""FastAPI application."""

from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI

from pms.adapter.email import EmailDeliveryWorker
from pms.config import Settings
from pms.interface.api.middleware.error_audit import ErrorAuditMiddleware
from pms.interface.api.routes import account, external_login, health
from pms.util.di.container import check_email_store, create_container, setup_di
from pms.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container, defaults to the production container
    """
    settings = Settings()

    # Instrument httpx for outbound HTTP requests
    # (Logfire must be configured before instrumentation)
    instrument_httpx()

    if container is None:
        container = create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Refuse to serve requests with a user store that cannot hold emails
        await check_email_store(container)

        email_worker = await container.get(EmailDeliveryWorker)
        email_worker.start()
        try:
            yield
        finally:
            await email_worker.stop()
            await container.close()

    app_instance = FastAPI(
        title="Product Management System",
        description="External login account linking for the Product Management System",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    # Setup dependency injection
    setup_di(app_instance, container)

    # Added last so it wraps every other middleware
    app_instance.add_middleware(
        ErrorAuditMiddleware,
        container=container,
        login_path=settings.paths.login,
    )

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(external_login.router)
    app_instance.include_router(account.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
