"""Object type variant."""

import dataclasses
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from ramlcore.types.base import Type
from ramlcore.types.errors import TypeValidationError

MAX_PROPERTIES = 2147483647


def as_mapping(value: Any) -> Mapping[str, Any] | None:
    """View a record-like value as a mapping of its fields.

    Mappings are returned unchanged; dataclass instances, pydantic models and
    plain objects expose their public attributes. Anything else gives ``None``.
    """
    if isinstance(value, Mapping):
        return value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}
    if isinstance(value, BaseModel):
        return {name: getattr(value, name) for name in type(value).model_fields}
    if isinstance(value, (str, bytes, int, float, list, tuple, set, type)) or value is None:
        return None
    attributes = getattr(value, "__dict__", None)
    if attributes is None:
        return None
    return {key: item for key, item in attributes.items() if not key.startswith("_")}


class ObjectType(Type):
    """``object``: named properties, property-count bounds and a discriminator."""

    kind = "object"
    facet_names = frozenset(
        {
            "properties",
            "min_properties",
            "max_properties",
            "additional_properties",
            "discriminator",
            "discriminator_value",
        }
    )

    def __init__(self, name: str, definition: dict[str, Any] | None = None, required: bool = True):
        super().__init__(name, definition, required)
        self.properties: dict[str, Type] = {}
        self.min_properties: int | None = None
        self.max_properties: int | None = None
        self.additional_properties = True
        self.discriminator: str | None = None
        self.discriminator_value: Any = None

    def get_property_by_name(self, name: str) -> Type | None:
        return self.properties.get(name)

    def add_property(self, prop: Type) -> None:
        """Add a property, replacing any property with the same name."""
        self.properties[prop.name] = prop

    def clone(self, **changes: Any) -> "ObjectType":
        node = super().clone(**changes)
        node.properties = dict(self.properties)
        return node

    def discriminate(self, value: Any) -> bool:
        if not self.discriminator:
            return True
        data = as_mapping(value)
        if data is None or self.discriminator not in data:
            return True
        expected = (
            self.discriminator_value if self.discriminator_value is not None else self.type_name
        )
        return data[self.discriminator] == expected

    def _check(self, value: Any) -> list[TypeValidationError]:
        data = as_mapping(value)
        if data is None:
            return [TypeValidationError.unexpected_value_type(self.name, "object", value)]

        errors = []
        if self.min_properties is not None or self.max_properties is not None:
            low = self.min_properties or 0
            high = self.max_properties if self.max_properties is not None else MAX_PROPERTIES
            if not low <= len(data) <= high:
                errors.append(
                    TypeValidationError.property_count_validation_failed(
                        self.name, low, high, len(data)
                    )
                )

        for name, prop in self.properties.items():
            if name in data:
                errors.extend(prop.check(data[name]))
            elif prop.required:
                errors.append(TypeValidationError.missing_required_property(name))

        if self.additional_properties is False:
            for key in data:
                if key not in self.properties:
                    errors.append(TypeValidationError.unexpected_property(str(key)))
        return errors
