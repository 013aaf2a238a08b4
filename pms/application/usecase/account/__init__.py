"""Account use cases (external login reconciliation)."""

from .confirm_email import ConfirmEmailRequest, ConfirmEmailResponse, ConfirmEmailUseCase
from .confirm_external_login import (
    ConfirmExternalLoginRequest,
    ConfirmExternalLoginUseCase,
)
from .external_login_callback import (
    ExternalLoginCallbackRequest,
    ExternalLoginCallbackUseCase,
)
from .outcome import (
    Authenticated,
    CollectEmail,
    ExternalLoginOutcome,
    LockedOutPage,
    PendingConfirmation,
    SignInRejected,
)

__all__ = [
    "ConfirmEmailRequest",
    "ConfirmEmailResponse",
    "ConfirmEmailUseCase",
    "ConfirmExternalLoginRequest",
    "ConfirmExternalLoginUseCase",
    "ExternalLoginCallbackRequest",
    "ExternalLoginCallbackUseCase",
    "Authenticated",
    "CollectEmail",
    "ExternalLoginOutcome",
    "LockedOutPage",
    "PendingConfirmation",
    "SignInRejected",
]
