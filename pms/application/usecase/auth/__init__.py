"""Authentication use cases."""

from .challenge import ChallengeRequest, ChallengeResponse, ChallengeUseCase
from .provider_callback import (
    ProviderCallbackRequest,
    ProviderCallbackResponse,
    ProviderCallbackUseCase,
)

__all__ = [
    "ChallengeRequest",
    "ChallengeResponse",
    "ChallengeUseCase",
    "ProviderCallbackRequest",
    "ProviderCallbackResponse",
    "ProviderCallbackUseCase",
]
