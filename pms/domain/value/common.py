"""Value object bases for identities, claims and identity results."""

from typing import Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, RootModel, ValidationError

T = TypeVar("T")


class ValueObject(BaseModel):
    """Immutable, compared field by field.

    External identities and identity results cross the cookie boundary, so
    they must serialize to plain JSON and back without loss.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class RootValueObject(RootModel[T], Generic[T]):
    """Value object wrapping one primitive, exposed as ``.root``."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def try_parse(cls, value: T) -> Self | None:
        """Validate ``value``, returning None instead of raising."""
        try:
            return cls(value)
        except ValidationError:
            return None

    def __str__(self) -> str:
        return str(self.root)
