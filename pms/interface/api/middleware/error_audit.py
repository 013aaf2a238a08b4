"""Outermost error handling middleware.

Logs and audits unhandled exceptions, then either re-raises (response already
started), redirects to the login page (authentication failures) or answers
with a generic 500.
"""

import logging

from dishka import AsyncContainer
from starlette.responses import PlainTextResponse, RedirectResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from pms.adapter.error import AuthenticationError
from pms.domain.service import AuditLogService

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def is_authentication_failure(exc: BaseException) -> bool:
    """Whether ``exc`` looks like a failed or cancelled external login."""
    if isinstance(exc, AuthenticationError):
        return True
    if "remoteauthenticationexception" in type(exc).__name__.lower():
        return True
    return "access_denied" in str(exc).lower()


class ErrorAuditMiddleware:
    """Pure ASGI middleware wrapping the whole request pipeline."""

    def __init__(
        self,
        app: ASGIApp,
        container: AsyncContainer | None = None,
        login_path: str = "/Identity/Account/Login",
    ) -> None:
        """Initialize middleware.

        Args:
            app: Downstream ASGI application
            container: DI container used to audit failures; defaults to the
                container attached to the application state
            login_path: Redirect target for authentication failures
        """
        self.app = app
        self.container = container
        self.login_path = login_path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            logger.exception("An unhandled exception occurred.")
            await self._audit(scope, exc)

            if response_started:
                logger.warning(
                    "Response has already started. Re-raising exception so the "
                    "server can handle it."
                )
                raise

            if is_authentication_failure(exc):
                response = RedirectResponse(self.login_path, status_code=302)
            else:
                response = PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)
            await response(scope, receive, send)

    async def _audit(self, scope: Scope, exc: Exception) -> None:
        # A failed audit must never replace the original failure
        try:
            container = self.container or scope["app"].state.dishka_container
            async with container() as request_container:
                audit_log_service = await request_container.get(AuditLogService)
                await audit_log_service.record_exception(exc)
        except Exception:
            logger.exception("Failed to persist audit log for exception.")
