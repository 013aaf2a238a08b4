"""Domain layer DI providers."""

from dishka import Scope, provide

from pms.config import AuthSettings, LockoutSettings
from pms.domain.repository import AuditLogRepository, LoginLinkRepository, UserEmailStore
from pms.domain.service import (
    AuditLogService,
    AuthService,
    OAuthClient,
    SignInService,
    TokenService,
    UserService,
)
from pms.domain.value import LoginProvider
from pms.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_auth_service(
        self, oauth_clients: dict[LoginProvider, OAuthClient]
    ) -> AuthService:
        """Provide multi-provider authentication domain service.

        Args:
            oauth_clients: Dictionary mapping providers to their OAuth clients

        Returns:
            AuthService configured with all enabled OAuth clients
        """
        return AuthService(oauth_clients=oauth_clients)

    @provide
    def get_token_service(self, auth_settings: AuthSettings) -> TokenService:
        """Provide token domain service."""
        return TokenService(auth_settings=auth_settings)

    @provide
    def get_user_service(
        self,
        user_store: UserEmailStore,
        login_link_repository: LoginLinkRepository,
        token_service: TokenService,
        lockout_settings: LockoutSettings,
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_store=user_store,
            login_link_repository=login_link_repository,
            token_service=token_service,
            lockout_settings=lockout_settings,
        )

    @provide
    def get_sign_in_service(
        self,
        user_service: UserService,
        token_service: TokenService,
        auth_settings: AuthSettings,
    ) -> SignInService:
        """Provide sign-in domain service."""
        return SignInService(
            user_service=user_service,
            token_service=token_service,
            auth_settings=auth_settings,
        )

    @provide
    def get_audit_log_service(
        self, audit_log_repository: AuditLogRepository
    ) -> AuditLogService:
        """Provide audit log domain service."""
        return AuditLogService(audit_log_repository=audit_log_repository)
