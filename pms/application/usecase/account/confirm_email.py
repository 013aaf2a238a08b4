"""Confirm email use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from pms.application.usecase.base import BaseUseCase
from pms.domain.error import NotFoundError
from pms.domain.service import UserService
from pms.domain.value import UserId
from pms.util.encoding import base64url_decode


class ConfirmEmailRequest(BaseModel):
    """Query parameters of the confirmation link."""

    user_id: str
    code: str


class ConfirmEmailResponse(BaseModel):
    """Confirmation page result."""

    confirmed: bool
    status_message: str


class ConfirmEmailUseCase(BaseUseCase[ConfirmEmailRequest, ConfirmEmailResponse]):
    """Use case for the link sent in the confirmation email."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize confirm email use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: ConfirmEmailRequest) -> ConfirmEmailResponse:
        """Confirm the user's email if the code is valid.

        Args:
            request: User ID and base64url-encoded token

        Returns:
            Page result; invalid input is reported, never raised
        """
        failed = ConfirmEmailResponse(
            confirmed=False, status_message="Error confirming your email."
        )

        try:
            user_id = UserId(UUID(request.user_id))
            token = base64url_decode(request.code)
        except ValueError:
            logfire.warn("Malformed email confirmation link", user_id=request.user_id)
            return failed

        try:
            user = await self.user_service.get_by_id(user_id)
        except NotFoundError:
            return failed

        result = await self.user_service.confirm_email(user, token)
        if not result.succeeded:
            return failed

        return ConfirmEmailResponse(
            confirmed=True, status_message="Thank you for confirming your email."
        )
