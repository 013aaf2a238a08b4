"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass



class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class DuplicateUserError(DomainError):
    """Raised by a user store when a unique user constraint is violated."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"User with {field} '{value}' already exists")


class DuplicateLoginError(DomainError):
    """Raised by a login store when a provider key is already linked."""

    def __init__(self, provider: str, provider_key: str):
        self.provider = provider
        self.provider_key = provider_key
        super().__init__(f"Login {provider}:{provider_key} is already linked")
