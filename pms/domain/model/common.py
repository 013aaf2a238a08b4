"""Shared base for users, logins, audit entries and email jobs."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Immutable domain entity.

    Entities are never mutated in place. Stores and services derive a new
    instance with ``evolve`` and persist that.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def evolve(self, **changes: Any) -> Self:
        """Return a copy with ``changes`` applied and re-validated.

        Unlike ``model_copy(update=...)`` this runs field validators, so a
        negative attempt or failure counter is rejected here.
        """
        return self.model_validate({**dict(self), **changes})
