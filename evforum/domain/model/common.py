"""Base model for all domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for all domain models.

    Domain models are frozen; changes produce a new instance through
    model_copy(update=...).
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # Allow custom value objects
    )
