"""Lazily resolved references to named types."""

import logging
from typing import TYPE_CHECKING, Any

from ramlcore.types.base import Type
from ramlcore.types.errors import TypeValidationError
from ramlcore.types.models import TypeDeclaration

if TYPE_CHECKING:
    from ramlcore.types.inheritance import InheritanceResolver
    from ramlcore.types.registry import TypeRegistry

logger = logging.getLogger(__name__)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class LazyProxyType(Type):
    """A type that refers to another type by name.

    A proxy starts Unresolved. The first call to ``resolved_object`` (or the
    registry's ``apply_inheritance``) looks up ``original_type``, applies the
    proxy's own facets on top of it and memoizes the resulting node; from then
    on the proxy is Resolved and only forwards to that node.

    The proxy itself is never the resolved node: use ``resolved_object()`` to
    get the concrete type.
    """

    kind = "reference"

    def __init__(
        self,
        name: str,
        original_type: str,
        declaration: TypeDeclaration,
        registry: "TypeRegistry",
        resolver: "InheritanceResolver",
        definition: dict[str, Any] | None = None,
        required: bool = True,
        declared: bool = False,
    ):
        super().__init__(name, definition, required)
        self.original_type = original_type
        self.declaration = declaration
        self.declared = declared
        self._registry = registry
        self._resolver = resolver
        self._resolved: Type | None = None

    def __repr__(self) -> str:
        return f"<LazyProxyType {self.name!r} -> {self.original_type!r}>"

    @property
    def is_resolved(self) -> bool:
        return self._resolved is not None

    def set_resolved(self, node: Type) -> None:
        self._resolved = node

    def get_parent(self) -> Type:
        """The type this proxy refers to, as registered."""
        return self._registry.get_by_name(self.original_type)

    def inherit_from_parent(self) -> Type:
        """Resolve the proxy; repeated calls return the memoized node."""
        if self._resolved is None:
            self._resolver.resolve(self)
        return self._resolved  # type: ignore[return-value]

    def resolved_object(self) -> Type:
        return self.inherit_from_parent()

    def definition_recursive(self) -> dict[str, Any]:
        """This proxy's declaration merged over the declarations of its ancestors."""
        parent = self.get_parent()
        if isinstance(parent, LazyProxyType):
            parent_definition = parent.definition_recursive()
        else:
            parent_definition = parent.to_dict()
        merged = deep_merge(parent_definition, self.definition)
        merged["type"] = parent_definition.get("type")
        return merged

    def accepts_none(self) -> bool:
        return self.resolved_object().accepts_none()

    def check(self, value: Any) -> list[TypeValidationError]:
        node = self.resolved_object()
        if not node.discriminate(value):
            logger.debug(f"{self.name}: value not discriminated as {node.type_name}, skipping")
            return []
        return node.check(value)

    def discriminate(self, value: Any) -> bool:
        return self.resolved_object().discriminate(value)
