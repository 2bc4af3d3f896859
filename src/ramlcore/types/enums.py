"""Enumerations over scalar types."""

from typing import Any

from ramlcore.types.base import Type
from ramlcore.types.errors import TypeValidationError


def _same_value(left: Any, right: Any) -> bool:
    return type(left) is type(right) and left == right


class EnumType(Type):
    """A scalar restricted to an ordered list of allowed values.

    The wrapped ``base`` node performs the scalar checks first; membership is
    tested with strict, type-aware equality (``1`` does not match ``1.0`` or
    ``True``).
    """

    is_scalar = True

    def __init__(
        self,
        name: str,
        base: Type,
        values: list[Any],
        definition: dict[str, Any] | None = None,
        required: bool = True,
    ):
        super().__init__(name, definition, required)
        self.base = base
        self.values = list(values)

    @property
    def kind(self) -> str:  # type: ignore[override]
        return self.base.kind

    @property
    def facet_names(self) -> frozenset[str]:  # type: ignore[override]
        return self.base.facet_names

    def _check(self, value: Any) -> list[TypeValidationError]:
        errors = self.base.check(value)
        if errors:
            return errors
        if not any(_same_value(allowed, value) for allowed in self.values):
            return [TypeValidationError.unexpected_value(self.name, self.values, value)]
        return []

    def clone(self, **changes: Any) -> "EnumType":
        node = super().clone(**changes)
        node.base = self.base.clone(name=node.name, required=node.required)
        node.values = list(self.values)
        return node
