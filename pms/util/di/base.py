"""Provider base carrying mock metadata."""

from typing import ClassVar, Literal

from dishka import Provider

# Components with a swappable in-memory or recording variant for tests
Component = Literal["persistence", "oauth", "email"]


class ProviderBase(Provider):
    """Dishka provider tagged with the component it implements.

    A component is declared by an abstract provider (``__mock_component__``
    set) with exactly one production and one mock subclass. Providers
    without subclasses are wired as they are.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
