"""Settings providers."""

from dishka import Scope, provide

from pms.config import AuthSettings, EmailSettings, LockoutSettings, Settings
from pms.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Settings, plus the sections services take as direct dependencies.

    ``Settings()`` reads the environment and ``.env`` once per container.
    """

    scope = Scope.APP

    @provide
    def settings(self) -> Settings:
        return Settings()

    @provide
    def auth_settings(self, settings: Settings) -> AuthSettings:
        """Cookie names, lifetimes and token signing."""
        return settings.auth

    @provide
    def lockout_settings(self, settings: Settings) -> LockoutSettings:
        return settings.lockout

    @provide
    def email_settings(self, settings: Settings) -> EmailSettings:
        """Queue capacity, retries and provider credentials."""
        return settings.email
