"""Use case contract shared by the account and auth flows."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """One request-scoped step of the external login flow.

    Use cases translate a validated request into calls on domain services
    and return either a response model or a flow outcome for the route to
    render. They never touch HTTP objects directly.
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT: ...
