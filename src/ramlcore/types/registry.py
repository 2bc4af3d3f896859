"""Per-session table of named types."""

import logging
from collections.abc import Iterator
from typing import Any

from ramlcore.exceptions import CyclicInheritanceError, TypeNotFoundError
from ramlcore.types.base import Type
from ramlcore.types.proxy import LazyProxyType
from ramlcore.types.union import UnionType, find_union_cycle

logger = logging.getLogger(__name__)


class TypeRegistry:
    """Insertion-ordered collection of the named types of one document.

    A registry belongs to a single parse session; create a new one for every
    document instead of sharing one between parses.
    """

    def __init__(self) -> None:
        self._types: list[Type] = []
        self._pending: list[LazyProxyType] = []

    def __iter__(self) -> Iterator[Type]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def register(self, node: Type) -> None:
        logger.debug(f"Registering type {node.name!r} ({type(node).__name__})")
        self._types.append(node)

    def remove(self, node: Type) -> None:
        for index, candidate in enumerate(self._types):
            if candidate is node:
                del self._types[index]
                return
        raise ValueError(f"Cannot remove type {node!r}: not registered")

    def get_by_name(self, name: str) -> Type:
        for node in self._types:
            if node.name == name:
                return node
        raise TypeNotFoundError(name, [node.name for node in self._types])

    def has_by_name(self, name: str) -> bool:
        try:
            self.get_by_name(name)
        except TypeNotFoundError:
            return False
        return True

    @property
    def pending(self) -> list[LazyProxyType]:
        return list(self._pending)

    def add_pending_inheritance(self, node: LazyProxyType) -> None:
        self._pending.append(node)

    def apply_inheritance(self) -> None:
        """Resolve every pending proxy.

        Resolving a proxy can create new proxies (for the properties it
        declares), so the pending list is drained until it stays empty.
        Already resolved proxies are not merged again.

        Raises:
            CyclicInheritanceError: If a union type can only be decided by
                deciding itself
        """
        while self._pending:
            pending, self._pending = self._pending, []
            logger.debug(f"Resolving inheritance of {len(pending)} types")
            for node in pending:
                node.inherit_from_parent()
        for node in self._types:
            resolved = node.resolved_object()
            if isinstance(resolved, UnionType):
                chain = find_union_cycle(resolved)
                if chain is not None:
                    raise CyclicInheritanceError(chain)

    def clear(self) -> None:
        self._types = []
        self._pending = []

    def to_dict(self) -> dict[str, Any]:
        return {node.name: node.to_dict() for node in self._types}
