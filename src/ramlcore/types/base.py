"""Base classes of the type graph."""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Any

from ramlcore.types.errors import TypeValidationError

logger = logging.getLogger(__name__)


class ValidatorInterface(ABC):
    """Uniform contract shared by RAML type nodes and raw schema definitions.

    ``check`` returns the violations of a value without side effects.
    ``validate`` does the same but also keeps the result, which callers
    (bodies, parameters, the request/response validator) read back with
    ``get_errors`` / ``is_valid``.
    """

    _errors: list[TypeValidationError]

    @abstractmethod
    def check(self, value: Any) -> list[TypeValidationError]:
        """Validate an already decoded value and return every violation."""

    def validate(self, value: Any) -> list[TypeValidationError]:
        """Validate a value, replacing the current error list."""
        self._errors = self.check(value)
        return self._errors

    def get_errors(self) -> list[TypeValidationError]:
        """Errors found by the last ``validate`` call."""
        return list(getattr(self, "_errors", []))

    def is_valid(self) -> bool:
        return not self.get_errors()


class Type(ValidatorInterface):
    """A node of the RAML type graph.

    Every node has a ``name`` (empty for anonymous inline types), a
    ``required`` flag used when the node is an object property, and the raw
    ``definition`` it was built from.

    Nested validation always goes through ``check``, so one resolved graph can
    be shared by concurrent validations; only ``validate`` stores state.
    """

    #: RAML name of the variant (``string``, ``object``, ...)
    kind = "any"
    #: Whether values of this variant are scalars (affects array error reporting)
    is_scalar = False
    #: RAML facets (snake_case) this variant understands
    facet_names: frozenset[str] = frozenset()

    def __init__(self, name: str, definition: dict[str, Any] | None = None, required: bool = True):
        self.name = name
        self.type_name = name
        self.required = required
        self.definition: dict[str, Any] = dict(definition or {})
        self.display_name: str | None = None
        self.description: str | None = None
        self.default: Any = None
        self.examples: list[Any] = []
        self._errors: list[TypeValidationError] = []

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"

    # Validation

    def accepts_none(self) -> bool:
        return False

    def check(self, value: Any) -> list[TypeValidationError]:
        """Validate a value and return every violated constraint."""
        if value is None and not self.accepts_none():
            if self.required:
                return [TypeValidationError.missing_required_property(self.name)]
            return []
        return self._check(value)

    def _check(self, value: Any) -> list[TypeValidationError]:
        return []

    def discriminate(self, value: Any) -> bool:
        """Whether this type is a candidate for ``value`` in a union."""
        return True

    # Introspection

    def resolved_object(self) -> "Type":
        return self

    def clone(self, **changes: Any) -> "Type":
        """Shallow copy of the node with some attributes replaced."""
        node = copy.copy(self)
        node.definition = dict(self.definition)
        node._errors = []
        for attr, value in changes.items():
            setattr(node, attr, value)
        return node

    def to_dict(self) -> dict[str, Any]:
        """The declaration this node was built from."""
        return dict(self.definition)


class AnyType(Type):
    """Accepts every value, including null."""

    kind = "any"

    def accepts_none(self) -> bool:
        return True
