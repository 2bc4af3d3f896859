"""Union type variant."""

from typing import Any

from ramlcore.types.base import Type
from ramlcore.types.errors import TypeValidationError
from ramlcore.types.object import as_mapping


def split_union(expression: str) -> list[str]:
    """Split a type expression on ``|`` outside of parentheses.

    >>> split_union("Manager | (Admin | Guest)[]")
    ['Manager', '(Admin | Guest)[]']
    """
    members, depth, current = [], 0, []
    for char in expression:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "|" and depth == 0:
            members.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    members.append("".join(current).strip())
    return [member for member in members if member]


class UnionType(Type):
    """``A | B``: a value is valid when at least one member accepts it.

    Members whose discriminator rejects the value are skipped. When no member
    accepts the value a single error is reported that lists, per member, the
    errors that member produced.

    A union may also declare ``properties`` shared by all members; those keys
    are validated against the union's own properties and removed from the
    value handed to each member.
    """

    kind = "union"
    facet_names = frozenset({"properties"})

    def __init__(self, name: str, definition: dict[str, Any] | None = None, required: bool = True):
        super().__init__(name, definition, required)
        self.possible_types: list[Type] = []
        self.properties: dict[str, Type] = {}

    def add_property(self, prop: Type) -> None:
        self.properties[prop.name] = prop

    def clone(self, **changes: Any) -> "UnionType":
        node = super().clone(**changes)
        node.possible_types = list(self.possible_types)
        node.properties = dict(self.properties)
        return node

    def accepts_none(self) -> bool:
        return any(member.resolved_object().accepts_none() for member in self.possible_types)

    def _check(self, value: Any) -> list[TypeValidationError]:
        own_errors, member_value = self._check_own_properties(value)

        branch_errors: dict[str, list[TypeValidationError]] = {}
        for member in self.possible_types:
            if not member.discriminate(value):
                continue
            errors = own_errors + member.check(member_value)
            if not errors:
                return []
            branch_errors[member.type_name or member.kind] = errors
        return [TypeValidationError.union_type_validation_failed(self.name, branch_errors)]

    def _check_own_properties(self, value: Any) -> tuple[list[TypeValidationError], Any]:
        if not self.properties:
            return [], value
        data = as_mapping(value)
        if data is None:
            return [], value

        errors = []
        for name, prop in self.properties.items():
            if name in data:
                errors.extend(prop.check(data[name]))
            elif prop.required:
                errors.append(TypeValidationError.missing_required_property(name))
        remaining = {key: item for key, item in data.items() if key not in self.properties}
        return errors, remaining


def find_union_cycle(node: UnionType) -> list[str] | None:
    """Names along a chain of union members that leads back to a union on the chain.

    Such a union can never decide a value, since checking it checks itself
    again. Chains that pass through an object or array type are not followed:
    those recurse only as deep as the value being checked.
    """
    return _walk_union(node, [node.name], {id(node)}, set())


def _walk_union(
    node: UnionType, names: list[str], unions: set[int], members: set[int]
) -> list[str] | None:
    for member in node.possible_types:
        name = member.type_name or member.name
        if id(member) in members:
            return names + [name]
        resolved = member.resolved_object()
        if not isinstance(resolved, UnionType):
            continue
        if id(resolved) in unions:
            return names + [name]
        chain = _walk_union(
            resolved, names + [name], unions | {id(resolved)}, members | {id(member)}
        )
        if chain is not None:
            return chain
    return None
