"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class AuthenticationError(ProviderError):
    """Authentication with an external provider failed."""

    pass


class RemoteAuthenticationException(AuthenticationError):
    """The remote provider rejected or could not complete the login."""

    pass


class EmailQueueError(AdapterError):
    """An email could not be queued for delivery."""

    pass


class EmailDeliveryError(AdapterError):
    """An email provider failed to accept a message."""

    def __init__(self, message: str, retryable: bool = True):
        self.retryable = retryable
        super().__init__(message)
