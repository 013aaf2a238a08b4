"""Identity account pages (JSON)."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

from pms.application.usecase.account import (
    ConfirmEmailRequest,
    ConfirmEmailResponse,
    ConfirmEmailUseCase,
)
from pms.config import Settings
from pms.domain.service import AuthService, UserService
from pms.interface.api.cookies import delete_auth_cookie
from pms.interface.api.navigation import local_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/Identity/Account", tags=["account"], route_class=DishkaRoute)


class ExternalProviderInfo(BaseModel):
    """External login button."""

    name: str
    display_name: str


class LoginPage(BaseModel):
    """Login page listing external providers."""

    return_url: str
    providers: list[ExternalProviderInfo]
    error_message: str | None = None


class LockoutPage(BaseModel):
    """Shown when a locked-out account tries to sign in."""

    message: str


class RegisterConfirmationPage(BaseModel):
    """Shown after an account was created and a confirmation email queued."""

    email: str
    message: str


@router.get("/Login")
async def login(
    auth_service: FromDishka[AuthService],
    settings: FromDishka[Settings],
    return_url: str | None = Query(None, alias="ReturnUrl"),
    error_message: str | None = Query(None, alias="ErrorMessage"),
    remote_error: str | None = Query(None, alias="remoteError"),
) -> JSONResponse:
    """Login page.

    Any pending external login is discarded so a fresh sign-in starts clean.
    """
    if remote_error:
        error_message = f"Error from external provider: {remote_error}"

    page = LoginPage(
        return_url=local_url(return_url),
        providers=[
            ExternalProviderInfo(name=p.value, display_name=p.display_name)
            for p in auth_service.providers
        ],
        error_message=error_message,
    )
    response = JSONResponse(content=page.model_dump())
    delete_auth_cookie(response, settings.auth.external_cookie_name, settings)
    return response


@router.get("/Lockout", response_model=LockoutPage)
async def lockout() -> LockoutPage:
    return LockoutPage(
        message="This account has been locked out, please try again later."
    )


@router.get("/RegisterConfirmation", response_model=None)
async def register_confirmation(
    user_service: FromDishka[UserService],
    email: str | None = Query(None, alias="Email"),
) -> RegisterConfirmationPage | RedirectResponse:
    """Pending-confirmation page.

    Raises:
        HTTPException: 404 if no user has this email
    """
    if not email:
        return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)

    user = await user_service.find_by_email(email)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unable to load user with email '{email}'.",
        )

    return RegisterConfirmationPage(
        email=email,
        message="Please check your email to confirm your account.",
    )


@router.get("/ConfirmEmail", response_model=None)
async def confirm_email(
    confirm_email_use_case: FromDishka[ConfirmEmailUseCase],
    user_id: str | None = Query(None, alias="userId"),
    code: str | None = Query(None),
) -> ConfirmEmailResponse | RedirectResponse:
    """Target of the link in the confirmation email."""
    if not user_id or not code:
        return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)

    result = await confirm_email_use_case.execute(
        ConfirmEmailRequest(user_id=user_id, code=code)
    )
    logger.info(f"Email confirmation for user {user_id}: confirmed={result.confirmed}")
    return result


@router.post("/Logout")
async def logout(
    settings: FromDishka[Settings],
    return_url: str | None = Query(None, alias="returnUrl"),
) -> RedirectResponse:
    """Clear the application session."""
    response = RedirectResponse(
        url=local_url(return_url), status_code=status.HTTP_302_FOUND
    )
    delete_auth_cookie(response, settings.auth.session_cookie_name, settings)
    return response
