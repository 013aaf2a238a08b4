"""External login routes.

Flow: challenge → provider → ``/signin-{provider}`` → callback → (optional)
confirmation form → pending confirmation or signed in.
"""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Form, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel
from starlette.responses import Response

from pms.adapter.error import RemoteAuthenticationException
from pms.application.usecase.account import (
    Authenticated,
    CollectEmail,
    ConfirmExternalLoginRequest,
    ConfirmExternalLoginUseCase,
    ExternalLoginCallbackRequest,
    ExternalLoginCallbackUseCase,
    ExternalLoginOutcome,
    LockedOutPage,
    PendingConfirmation,
    SignInRejected,
)
from pms.application.usecase.auth import (
    ChallengeRequest,
    ChallengeUseCase,
    ProviderCallbackRequest,
    ProviderCallbackUseCase,
)
from pms.config import Settings
from pms.domain.service import TokenService, UnsupportedProviderError
from pms.interface.api.cookies import (
    delete_auth_cookie,
    set_auth_cookie,
    set_session_cookie,
)
from pms.interface.api.navigation import local_url, page_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["external-login"], route_class=DishkaRoute)


class ExternalLoginPage(BaseModel):
    """Email collection form for a new local account."""

    provider_display_name: str
    return_url: str
    email: str | None = None
    errors: list[str] = []


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


def _login_redirect(
    settings: Settings, error_message: str, return_url: str | None = None
) -> RedirectResponse:
    return _redirect(
        page_url(settings.paths.login, ReturnUrl=return_url, ErrorMessage=error_message)
    )


def outcome_response(outcome: ExternalLoginOutcome, settings: Settings) -> Response:
    """Turn a reconciliation outcome into a redirect or the collection page."""
    external_cookie = settings.auth.external_cookie_name

    if isinstance(outcome, Authenticated):
        response = _redirect(local_url(outcome.return_url))
        set_session_cookie(response, outcome.ticket, settings)
        delete_auth_cookie(response, external_cookie, settings)
        return response

    if isinstance(outcome, LockedOutPage):
        return _redirect(settings.paths.lockout)

    if isinstance(outcome, SignInRejected):
        response = _login_redirect(settings, outcome.message, outcome.return_url)
        delete_auth_cookie(response, external_cookie, settings)
        return response

    if isinstance(outcome, PendingConfirmation):
        response = _redirect(
            page_url(settings.paths.register_confirmation, Email=outcome.email)
        )
        delete_auth_cookie(response, external_cookie, settings)
        return response

    if isinstance(outcome, CollectEmail):
        page = ExternalLoginPage(
            provider_display_name=outcome.provider_display_name,
            return_url=outcome.return_url,
            email=outcome.email,
            errors=list(outcome.errors),
        )
        return JSONResponse(content=page.model_dump())

    raise TypeError(f"Unexpected external login outcome: {outcome!r}")


@router.api_route(
    "/Identity/Account/ExternalLogin/Challenge", methods=["GET", "POST"]
)
async def challenge(
    challenge_use_case: FromDishka[ChallengeUseCase],
    settings: FromDishka[Settings],
    provider: str = Query(...),
    return_url: str | None = Query(None, alias="returnUrl"),
) -> RedirectResponse:
    """Redirect the browser to the external provider.

    Raises:
        HTTPException: 400 if the provider is unknown or not configured
    """
    logger.info(f"Initiating {provider} login")
    try:
        result = await challenge_use_case.execute(
            ChallengeRequest(provider=provider, return_url=local_url(return_url))
        )
    except UnsupportedProviderError as e:
        logger.warning(f"Rejected login challenge: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    response = _redirect(result.authorization_url)
    set_auth_cookie(
        response,
        settings.auth.correlation_cookie_name,
        result.correlation_token,
        settings,
        max_age=settings.auth.correlation_expiry_minutes * 60,
    )
    return response


@router.get("/signin-{provider}")
async def provider_callback(
    provider: str,
    request: Request,
    provider_callback_use_case: FromDishka[ProviderCallbackUseCase],
    settings: FromDishka[Settings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
) -> RedirectResponse:
    """Handle the redirect back from an external provider.

    Remote failures redirect to the login page with ``remoteError``.
    """
    correlation_cookie = settings.auth.correlation_cookie_name
    logger.info(f"Provider callback received: provider={provider}")

    try:
        result = await provider_callback_use_case.execute(
            ProviderCallbackRequest(
                provider=provider,
                code=code,
                state=state,
                error=error,
                error_description=error_description,
                correlation_token=request.cookies.get(correlation_cookie),
            )
        )
    except UnsupportedProviderError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RemoteAuthenticationException as e:
        logger.warning(f"Remote login failed for {provider}: {e}")
        response = _redirect(page_url(settings.paths.login, remoteError=str(e)))
        delete_auth_cookie(response, correlation_cookie, settings)
        return response

    response = _redirect(
        page_url(
            settings.paths.external_login_callback,
            returnUrl=local_url(result.return_url),
        )
    )
    set_auth_cookie(
        response,
        settings.auth.external_cookie_name,
        result.external_token,
        settings,
        max_age=settings.auth.external_expiry_minutes * 60,
    )
    delete_auth_cookie(response, correlation_cookie, settings)
    return response


@router.get("/Identity/Account/ExternalLogin")
async def external_login(settings: FromDishka[Settings]) -> RedirectResponse:
    """The external login page is only reachable through its handlers."""
    return _redirect(settings.paths.login)


@router.get("/Identity/Account/ExternalLogin/Callback")
async def external_login_callback(
    request: Request,
    callback_use_case: FromDishka[ExternalLoginCallbackUseCase],
    token_service: FromDishka[TokenService],
    settings: FromDishka[Settings],
    return_url: str | None = Query(None, alias="returnUrl"),
    remote_error: str | None = Query(None, alias="remoteError"),
) -> Response:
    """Sign in, link by email, or ask for an email."""
    return_url = local_url(return_url)

    if remote_error is not None:
        return _login_redirect(
            settings, f"Error from external provider: {remote_error}", return_url
        )

    identity = None
    token = request.cookies.get(settings.auth.external_cookie_name)
    if token:
        identity = token_service.unprotect_external_identity(token)
    if identity is None:
        return _login_redirect(
            settings, "Error loading external login information.", return_url
        )

    outcome = await callback_use_case.execute(
        ExternalLoginCallbackRequest(identity=identity, return_url=return_url)
    )
    return outcome_response(outcome, settings)


@router.post("/Identity/Account/ExternalLogin/Confirmation")
async def external_login_confirmation(
    request: Request,
    confirm_use_case: FromDishka[ConfirmExternalLoginUseCase],
    token_service: FromDishka[TokenService],
    settings: FromDishka[Settings],
    email: str | None = Form(None),
    return_url: str | None = Query(None, alias="returnUrl"),
) -> Response:
    """Create (or link) the local account for the external login."""
    return_url = local_url(return_url)

    identity = None
    token = request.cookies.get(settings.auth.external_cookie_name)
    if token:
        identity = token_service.unprotect_external_identity(token)
    if identity is None:
        return _login_redirect(
            settings,
            "Error loading external login information during confirmation.",
            return_url,
        )

    outcome = await confirm_use_case.execute(
        ConfirmExternalLoginRequest(identity=identity, email=email, return_url=return_url)
    )
    return outcome_response(outcome, settings)
