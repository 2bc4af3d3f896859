"""Base Pydantic models for ramlcore.

This module provides the base model class that all declarative ramlcore models
inherit from. It establishes consistent configuration across models:

- Strict field validation (no extra fields allowed)
- Immutable instances so one parsed document can be shared between callers

Example:
    >>> from ramlcore.models import RamlBaseModel
    >>> from pydantic import Field
    >>>
    >>> class MyModel(RamlBaseModel):
    ...     name: str
    ...     count: int = Field(default=0, ge=0)
    >>>
    >>> MyModel(name="test").model_dump()
    {'name': 'test', 'count': 0}
"""

from pydantic import BaseModel, ConfigDict


class RamlBaseModel(BaseModel):
    """Base model for all ramlcore Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable

    Models that read raw RAML declarations (where unknown keys must be
    ignored) override ``extra`` in their own ``model_config``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
