"""Constraint violation records produced by type validation."""

import json
from dataclasses import dataclass
from typing import Any


def describe_value(value: Any) -> str:
    """Render a value for use inside an error message."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str, separators=(",", ":"))
    return str(value)


def type_label(value: Any) -> str:
    return type(value).__name__


@dataclass(frozen=True)
class TypeValidationError:
    """A single failed rule: the property it was found on and what was violated.

    Attributes:
        property: Name of the type or property that failed
        constraint: Human readable description of the violated constraint
    """

    property: str
    constraint: str

    def __str__(self) -> str:
        return f"{self.property} ({self.constraint})"

    def to_dict(self) -> dict[str, str]:
        return {"property": self.property, "constraint": self.constraint}

    @classmethod
    def unexpected_value_type(
        cls, prop: str, expected: str, value: Any
    ) -> "TypeValidationError":
        return cls(prop, f'Expected {expected}, got ({type_label(value)}) "{describe_value(value)}"')

    @classmethod
    def missing_required_property(cls, prop: str) -> "TypeValidationError":
        return cls(prop, "Missing required property")

    @classmethod
    def unexpected_property(cls, prop: str) -> "TypeValidationError":
        return cls(prop, "Unexpected property")

    @classmethod
    def array_size_validation_failed(
        cls, prop: str, min_items: int, max_items: int, size: int
    ) -> "TypeValidationError":
        return cls(prop, f"Allowed array size: between {min_items} and {max_items}, got {size}")

    @classmethod
    def unexpected_array_value_type(
        cls, prop: str, item_type: str, value: Any
    ) -> "TypeValidationError":
        return cls(
            prop,
            f'Expected array element type {item_type}, '
            f'got ({type_label(value)}) "{describe_value(value)}"',
        )

    @classmethod
    def array_items_not_unique(cls, prop: str) -> "TypeValidationError":
        return cls(prop, "Array items are expected to be unique")

    @classmethod
    def union_type_validation_failed(
        cls, prop: str, branch_errors: dict[str, list["TypeValidationError"]]
    ) -> "TypeValidationError":
        branches = ", ".join(
            f"{name} ({', '.join(str(error) for error in errors)})"
            for name, errors in branch_errors.items()
        )
        return cls(prop, f"Value did not pass validation against any type: {branches}")

    @classmethod
    def unexpected_value(cls, prop: str, allowed: list[Any], value: Any) -> "TypeValidationError":
        options = ", ".join(describe_value(option) for option in allowed)
        return cls(
            prop, f'Expected any of [{options}], got ({type_label(value)}) "{describe_value(value)}"'
        )

    @classmethod
    def string_pattern_mismatch(cls, prop: str, pattern: str, value: str) -> "TypeValidationError":
        return cls(prop, f'String "{value}" did not match pattern /{pattern}/')

    @classmethod
    def string_length_exceeds_minimum(
        cls, prop: str, min_length: int, value: str
    ) -> "TypeValidationError":
        return cls(prop, f"Minimum allowed length: {min_length}, got {len(value)}")

    @classmethod
    def string_length_exceeds_maximum(
        cls, prop: str, max_length: int, value: str
    ) -> "TypeValidationError":
        return cls(prop, f"Maximum allowed length: {max_length}, got {len(value)}")

    @classmethod
    def value_exceeds_minimum(cls, prop: str, minimum: Any, value: Any) -> "TypeValidationError":
        return cls(prop, f"Minimum allowed value: {minimum}, got {value}")

    @classmethod
    def value_exceeds_maximum(cls, prop: str, maximum: Any, value: Any) -> "TypeValidationError":
        return cls(prop, f"Maximum allowed value: {maximum}, got {value}")

    @classmethod
    def value_not_multiple_of(cls, prop: str, multiple_of: Any, value: Any) -> "TypeValidationError":
        return cls(prop, f"Expected a multiple of {multiple_of}, got {value}")

    @classmethod
    def unexpected_number_format(cls, prop: str, fmt: str, value: Any) -> "TypeValidationError":
        return cls(prop, f"Expected format {fmt}, got {value}")

    @classmethod
    def property_count_validation_failed(
        cls, prop: str, min_properties: int, max_properties: int, count: int
    ) -> "TypeValidationError":
        return cls(
            prop,
            f"Allowed number of properties: between {min_properties} and {max_properties}, "
            f"got {count}",
        )

    @classmethod
    def unexpected_file_type(
        cls, prop: str, allowed: list[str], actual: str
    ) -> "TypeValidationError":
        return cls(prop, f"Expected file type any of [{', '.join(allowed)}], got {actual}")

    @classmethod
    def xml_validation_failed(cls, message: str, prop: str = "xml") -> "TypeValidationError":
        return cls(prop, message)
