"""Errors raised while wiring the application together."""


class UtilError(Exception):
    """Base for startup and wiring failures."""


class ConfigurationError(UtilError):
    """The configured components cannot serve external login.

    Raised at startup, for example when the user store has no email support.
    """


class DependencyInjectionError(UtilError):
    """No provider registered for a component and variant."""
