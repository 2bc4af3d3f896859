"""Scalar type variants."""

import base64
import binascii
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from ramlcore.exceptions import InvalidTypeDefinitionError
from ramlcore.types.base import Type
from ramlcore.types.errors import TypeValidationError

INT_FORMAT_RANGES: dict[str, tuple[int, int]] = {
    "int8": (-(2**7), 2**7 - 1),
    "int16": (-(2**15), 2**15 - 1),
    "int32": (-(2**31), 2**31 - 1),
    "int64": (-(2**63), 2**63 - 1),
}
NUMBER_FORMATS = frozenset({"int8", "int16", "int32", "int64", "int", "long", "float", "double"})


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ScalarType(Type):
    """Common base of scalar variants."""

    is_scalar = True


class StringType(ScalarType):
    """``string``: length bounds and a regular expression pattern."""

    kind = "string"
    facet_names = frozenset({"pattern", "min_length", "max_length"})

    def __init__(self, name: str, definition: dict[str, Any] | None = None, required: bool = True):
        super().__init__(name, definition, required)
        self.min_length: int | None = None
        self.max_length: int | None = None
        self._pattern: str | None = None
        self._regex: re.Pattern[str] | None = None

    @property
    def pattern(self) -> str | None:
        return self._pattern

    @pattern.setter
    def pattern(self, pattern: str | None) -> None:
        if pattern is None:
            self._pattern = self._regex = None
            return
        try:
            self._regex = re.compile(pattern)
        except re.error as e:
            raise InvalidTypeDefinitionError(
                f'Invalid pattern "{pattern}" for type "{self.name}": {e}'
            ) from e
        self._pattern = pattern

    def _check(self, value: Any) -> list[TypeValidationError]:
        if not isinstance(value, str):
            return [TypeValidationError.unexpected_value_type(self.name, "string", value)]

        errors = []
        if self.min_length is not None and len(value) < self.min_length:
            errors.append(
                TypeValidationError.string_length_exceeds_minimum(self.name, self.min_length, value)
            )
        if self.max_length is not None and len(value) > self.max_length:
            errors.append(
                TypeValidationError.string_length_exceeds_maximum(self.name, self.max_length, value)
            )
        if self._regex is not None and self._regex.search(value) is None:
            errors.append(
                TypeValidationError.string_pattern_mismatch(self.name, self._pattern or "", value)
            )
        return errors


class NumberType(ScalarType):
    """``number``: range, ``multipleOf`` and storage ``format`` checks."""

    kind = "number"
    expected = "number"
    facet_names = frozenset({"minimum", "maximum", "format", "multiple_of"})

    def __init__(self, name: str, definition: dict[str, Any] | None = None, required: bool = True):
        super().__init__(name, definition, required)
        self.minimum: int | float | None = None
        self.maximum: int | float | None = None
        self.multiple_of: int | float | None = None
        self._format: str | None = None

    @property
    def format(self) -> str | None:
        return self._format

    @format.setter
    def format(self, fmt: str | None) -> None:
        if fmt is not None and fmt not in NUMBER_FORMATS:
            raise InvalidTypeDefinitionError(
                f'Format "{fmt}" of type "{self.name}" is not one of: '
                f"{', '.join(sorted(NUMBER_FORMATS))}"
            )
        self._format = fmt

    def is_acceptable(self, value: Any) -> bool:
        return is_number(value)

    def _check(self, value: Any) -> list[TypeValidationError]:
        if not self.is_acceptable(value):
            return [TypeValidationError.unexpected_value_type(self.name, self.expected, value)]

        errors = []
        if self.minimum is not None and value < self.minimum:
            errors.append(TypeValidationError.value_exceeds_minimum(self.name, self.minimum, value))
        if self.maximum is not None and value > self.maximum:
            errors.append(TypeValidationError.value_exceeds_maximum(self.name, self.maximum, value))
        if self.multiple_of is not None and not self._is_multiple(value):
            errors.append(
                TypeValidationError.value_not_multiple_of(self.name, self.multiple_of, value)
            )
        if self._format is not None and not self._matches_format(value):
            errors.append(
                TypeValidationError.unexpected_number_format(self.name, self._format, value)
            )
        return errors

    def _is_multiple(self, value: int | float) -> bool:
        try:
            divisor = Decimal(str(self.multiple_of))
            if divisor == 0:
                return False
            return Decimal(str(value)) % divisor == 0
        except InvalidOperation:
            return False

    def _matches_format(self, value: int | float) -> bool:
        if self._format in INT_FORMAT_RANGES:
            low, high = INT_FORMAT_RANGES[self._format]
            return is_integer(value) and low <= value <= high
        if self._format in ("int", "long"):
            return is_integer(value)
        return True


class IntegerType(NumberType):
    """``integer``: the value must be an ``int``, not an integer-valued float."""

    kind = "integer"
    expected = "int"

    def is_acceptable(self, value: Any) -> bool:
        return is_integer(value)


class BooleanType(ScalarType):
    kind = "boolean"

    def _check(self, value: Any) -> list[TypeValidationError]:
        if not isinstance(value, bool):
            return [TypeValidationError.unexpected_value_type(self.name, "boolean", value)]
        return []


class NilType(ScalarType):
    """``nil``: only null is accepted."""

    kind = "nil"

    def accepts_none(self) -> bool:
        return True

    def _check(self, value: Any) -> list[TypeValidationError]:
        if value is not None:
            return [TypeValidationError.unexpected_value_type(self.name, "nil", value)]
        return []


class FileType(ScalarType):
    """``file``: raw bytes, base64 text, or an upload object with a ``content_type``."""

    kind = "file"
    facet_names = frozenset({"file_types", "min_length", "max_length"})

    def __init__(self, name: str, definition: dict[str, Any] | None = None, required: bool = True):
        super().__init__(name, definition, required)
        self.file_types: list[str] = []
        self.min_length: int | None = None
        self.max_length: int | None = None

    def _check(self, value: Any) -> list[TypeValidationError]:
        errors = []
        content_type = getattr(value, "content_type", None)
        if content_type is not None:
            if self.file_types and not self._is_allowed(content_type):
                errors.append(
                    TypeValidationError.unexpected_file_type(self.name, self.file_types, content_type)
                )
            return errors

        data = self._decode(value)
        if data is None:
            return [TypeValidationError.unexpected_value_type(self.name, "file", value)]
        if self.min_length is not None and len(data) < self.min_length:
            errors.append(
                TypeValidationError(
                    self.name, f"Minimum allowed length: {self.min_length}, got {len(data)}"
                )
            )
        if self.max_length is not None and len(data) > self.max_length:
            errors.append(
                TypeValidationError(
                    self.name, f"Maximum allowed length: {self.max_length}, got {len(data)}"
                )
            )
        return errors

    def _is_allowed(self, content_type: str) -> bool:
        media_type = content_type.split(";", 1)[0].strip().lower()
        for allowed in self.file_types:
            allowed = allowed.lower()
            if allowed in ("*/*", media_type):
                return True
            if allowed.endswith("/*") and media_type.startswith(allowed[:-1]):
                return True
        return False

    @staticmethod
    def _decode(value: Any) -> bytes | None:
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        if isinstance(value, str):
            try:
                return base64.b64decode(value, validate=True)
            except (binascii.Error, ValueError):
                return None
        return None
