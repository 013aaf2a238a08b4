"""Application layer DI providers."""

from dishka import Scope, provide

from pms.adapter.email import EmailQueue
from pms.application.usecase.account import (
    ConfirmEmailUseCase,
    ConfirmExternalLoginUseCase,
    ExternalLoginCallbackUseCase,
)
from pms.application.usecase.auth import ChallengeUseCase, ProviderCallbackUseCase
from pms.config import Settings
from pms.domain.service import AuthService, SignInService, TokenService, UserService
from pms.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_challenge_use_case(
        self, auth_service: AuthService, token_service: TokenService
    ) -> ChallengeUseCase:
        """Provide external login challenge use case."""
        return ChallengeUseCase(auth_service=auth_service, token_service=token_service)

    @provide(scope=Scope.REQUEST)
    def get_provider_callback_use_case(
        self, auth_service: AuthService, token_service: TokenService
    ) -> ProviderCallbackUseCase:
        """Provide provider callback use case."""
        return ProviderCallbackUseCase(
            auth_service=auth_service, token_service=token_service
        )

    # Account use cases
    @provide(scope=Scope.REQUEST)
    def get_external_login_callback_use_case(
        self, user_service: UserService, sign_in_service: SignInService
    ) -> ExternalLoginCallbackUseCase:
        """Provide external login callback use case."""
        return ExternalLoginCallbackUseCase(
            user_service=user_service, sign_in_service=sign_in_service
        )

    @provide(scope=Scope.REQUEST)
    def get_confirm_external_login_use_case(
        self,
        user_service: UserService,
        sign_in_service: SignInService,
        email_queue: EmailQueue,
        settings: Settings,
    ) -> ConfirmExternalLoginUseCase:
        """Provide external login confirmation use case."""
        return ConfirmExternalLoginUseCase(
            user_service=user_service,
            sign_in_service=sign_in_service,
            email_queue=email_queue,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_confirm_email_use_case(self, user_service: UserService) -> ConfirmEmailUseCase:
        """Provide confirm email use case."""
        return ConfirmEmailUseCase(user_service=user_service)
