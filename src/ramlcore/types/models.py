"""Pydantic model for reading RAML type declarations.

A RAML type declaration is a mapping of facets. ``TypeDeclaration`` gives the
facets ramlcore understands typed attributes (snake_case, with the RAML
camelCase names as aliases) and ignores everything else, so documents using
facets from newer RAML revisions still load.
"""

from typing import Any

from pydantic import ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ramlcore.exceptions import InvalidTypeDefinitionError
from ramlcore.models import RamlBaseModel

# Facets every type may carry; they never constrain values.
ANNOTATION_FACETS = frozenset(
    {
        "type",
        "display_name",
        "description",
        "default",
        "example",
        "examples",
        "required",
        "facets",
    }
)


class TypeDeclaration(RamlBaseModel):
    """Typed view of a single RAML type declaration.

    Attributes:
        type: Type expression (``string``, ``Person[]``, ``A | B``, ...) or an
            inline JSON/XML schema.
        properties: Raw property declarations of object and union types.
        items: Raw item declaration of array types.
        enum: Allowed values of scalar types.

    All other attributes mirror the RAML facet of the same (camelCase) name.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    type: str | list[Any] | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    description: str | None = None
    default: Any = None
    example: Any = None
    examples: Any = None
    required: bool | None = None
    facets: dict[str, Any] | None = None

    # Scalars
    enum: list[Any] | None = None
    pattern: str | None = None
    min_length: int | None = Field(default=None, alias="minLength", ge=0)
    max_length: int | None = Field(default=None, alias="maxLength", ge=0)
    minimum: int | float | None = None
    maximum: int | float | None = None
    format: str | None = None
    multiple_of: int | float | None = Field(default=None, alias="multipleOf")
    file_types: list[str] | None = Field(default=None, alias="fileTypes")

    # Arrays
    items: Any = None
    min_items: int | None = Field(default=None, alias="minItems", ge=0)
    max_items: int | None = Field(default=None, alias="maxItems", ge=0)
    unique_items: bool | None = Field(default=None, alias="uniqueItems")

    # Objects
    properties: dict[str, Any] | None = None
    min_properties: int | None = Field(default=None, alias="minProperties", ge=0)
    max_properties: int | None = Field(default=None, alias="maxProperties", ge=0)
    additional_properties: bool | None = Field(default=None, alias="additionalProperties")
    discriminator: str | None = None
    discriminator_value: Any = Field(default=None, alias="discriminatorValue")

    @classmethod
    def parse(cls, name: str, definition: dict[str, Any]) -> "TypeDeclaration":
        """Validate a raw declaration.

        Raises:
            InvalidTypeDefinitionError: If a known facet has a value of the wrong kind
        """
        try:
            return cls.model_validate(definition)
        except PydanticValidationError as e:
            raise InvalidTypeDefinitionError(f'Invalid declaration of type "{name}": {e}') from e

    def constraint_facets(self) -> set[str]:
        """Names of the value-constraining facets explicitly set in this declaration."""
        known = set(type(self).model_fields)
        return {
            field
            for field in self.model_fields_set
            if field in known and field not in ANNOTATION_FACETS
        }
