"""Domain services."""

from .audit_log_service import AuditLogService
from .auth_service import AuthService, OAuthClient, UnsupportedProviderError
from .sign_in_service import SignInService
from .token_service import TokenService
from .user_service import UserService

__all__ = [
    "AuditLogService",
    "AuthService",
    "OAuthClient",
    "SignInService",
    "TokenService",
    "UnsupportedProviderError",
    "UserService",
]
