"""The RAML type system.

Type nodes are built by a ``TypeFactory`` into a per-document
``TypeRegistry``; ``TypeRegistry.apply_inheritance`` then resolves every
named reference. A resolved node validates values with ``check`` (returns a
fresh error list) or ``validate`` (also keeps the list for ``get_errors``).
"""

from ramlcore.types.array import ArrayType
from ramlcore.types.base import AnyType, Type, ValidatorInterface
from ramlcore.types.dates import DateOnlyType, DateTimeOnlyType, DateTimeType, TimeOnlyType
from ramlcore.types.enums import EnumType
from ramlcore.types.errors import TypeValidationError
from ramlcore.types.factory import TypeFactory
from ramlcore.types.inheritance import InheritanceResolver
from ramlcore.types.models import TypeDeclaration
from ramlcore.types.object import ObjectType
from ramlcore.types.proxy import LazyProxyType
from ramlcore.types.registry import TypeRegistry
from ramlcore.types.scalars import (
    BooleanType,
    FileType,
    IntegerType,
    NilType,
    NumberType,
    StringType,
)
from ramlcore.types.schema import JsonType, XmlType
from ramlcore.types.union import UnionType

__all__ = [
    "AnyType",
    "ArrayType",
    "BooleanType",
    "DateOnlyType",
    "DateTimeOnlyType",
    "DateTimeType",
    "EnumType",
    "FileType",
    "InheritanceResolver",
    "IntegerType",
    "JsonType",
    "LazyProxyType",
    "NilType",
    "NumberType",
    "ObjectType",
    "StringType",
    "TimeOnlyType",
    "Type",
    "TypeDeclaration",
    "TypeFactory",
    "TypeRegistry",
    "TypeValidationError",
    "UnionType",
    "ValidatorInterface",
    "XmlType",
]
