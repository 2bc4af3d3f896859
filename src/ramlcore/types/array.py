"""Array type variant."""

import json
from collections.abc import Sequence
from typing import Any

from ramlcore.types.base import Type
from ramlcore.types.errors import TypeValidationError

MAX_ITEMS = 2147483647


def _canonical(value: Any) -> str:
    try:
        return json.dumps(value, sort_keys=True, default=str)
    except TypeError:
        # mixed key types cannot be sorted
        return repr(value)


class ArrayType(Type):
    """``array``: size bounds, uniqueness and an ``items`` type.

    Element errors are reported the way the item type reports them: scalar
    item types produce one "unexpected array element" error per bad element,
    structured item types contribute their own errors unchanged.
    """

    kind = "array"
    facet_names = frozenset({"items", "min_items", "max_items", "unique_items"})

    def __init__(self, name: str, definition: dict[str, Any] | None = None, required: bool = True):
        super().__init__(name, definition, required)
        self.items: Type | None = None
        self.min_items = 0
        self.max_items = MAX_ITEMS
        self.unique_items = False

    def _check(self, value: Any) -> list[TypeValidationError]:
        if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Sequence):
            return [TypeValidationError.unexpected_value_type(self.name, "array", value)]

        errors = []
        size = len(value)
        if not self.min_items <= size <= self.max_items:
            errors.append(
                TypeValidationError.array_size_validation_failed(
                    self.name, self.min_items, self.max_items, size
                )
            )
        if self.unique_items and len({_canonical(item) for item in value}) != size:
            errors.append(TypeValidationError.array_items_not_unique(self.name))

        if self.items is None:
            return errors
        if self.items.resolved_object().is_scalar:
            item_type = self.items.type_name or self.items.kind
            for item in value:
                if self.items.check(item):
                    errors.append(
                        TypeValidationError.unexpected_array_value_type(self.name, item_type, item)
                    )
        else:
            for item in value:
                errors.extend(self.items.check(item))
        return errors
