"""Base Pydantic schema for the project.

Provides a common base class for all Pydantic models in arch-decisions with
shared configuration and validation behavior.
"""

from pydantic import BaseModel, ConfigDict

__all__ = ["BaseSchema", "FrozenSchema"]


class BaseSchema(BaseModel):
    """Base model for all Pydantic schemas.

    String values are kept verbatim; decision contents are opaque text and
    surrounding whitespace is part of them.
    """

    model_config = ConfigDict(from_attributes=True)


class FrozenSchema(BaseSchema):
    """Immutable schema for values that must not change once built."""

    model_config = ConfigDict(from_attributes=True, frozen=True)
