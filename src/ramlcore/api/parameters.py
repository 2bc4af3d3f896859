"""Named parameters: query strings, headers, URI and form parameters."""

import logging
import re
from datetime import datetime
from typing import Any

from ramlcore.exceptions import (
    InvalidParameterDefinitionError,
    InvalidParameterTypeError,
    ValidationError,
)
from ramlcore.types.dates import RFC2616_FORMAT
from ramlcore.types.factory import BUILTIN_TYPES

logger = logging.getLogger(__name__)

TYPE_STRING = "string"
TYPE_NUMBER = "number"
TYPE_INTEGER = "integer"
TYPE_DATE = "date"
TYPE_BOOLEAN = "boolean"
TYPE_FILE = "file"
TYPE_DATE_ONLY = "date-only"
TYPE_TIME_ONLY = "time-only"
TYPE_DATETIME_ONLY = "datetime-only"
TYPE_DATETIME = "datetime"
TYPE_ARRAY = "array"

# Validation failure codes carried by ValidationError.code
VAL_NOTBOOLEAN = 1
VAL_NOTDATE = 2
VAL_NOTSTRING = 3
VAL_NOTINT = 4
VAL_NOTNUMBER = 5
VAL_NOTFILE = 6
VAL_ISREQUIRED = 7
VAL_TOOSHORT = 8
VAL_TOOLONG = 9
VAL_NUMLESSTHAN = 10
VAL_GREATERTHAN = 11
VAL_PATTERNFAIL = 12
VAL_NOTENUMVALUE = 13

NUMBER_TEXT = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$")
INTEGER_TEXT = re.compile(r"^[-+]?\d+$")

HTTP_DATE_PATTERN = (
    r"^(?:(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun), (?:[0-2][0-9]|3[01]) "
    r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) \d{4} "
    r"(?:[01][0-9]|2[0-3]):[0-5][0-9]:[0-5][0-9] GMT)$"
)


def _as_number(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and NUMBER_TEXT.match(value.strip()):
        text = value.strip()
        return int(text) if INTEGER_TEXT.match(text) else float(text)
    return None


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and INTEGER_TEXT.match(value.strip()) is not None


class NamedParameter:
    """A RAML named parameter.

    Unlike type nodes, named parameters validate fail-fast: ``validate``
    raises ``ValidationError`` (with one of the ``VAL_*`` codes) for the first
    violated rule. Parameter values usually arrive as text, so numeric and
    boolean parameters also accept their textual forms.
    """

    valid_types: tuple[str, ...] = (
        TYPE_STRING,
        TYPE_NUMBER,
        TYPE_INTEGER,
        TYPE_DATE,
        TYPE_BOOLEAN,
        TYPE_FILE,
        TYPE_DATETIME_ONLY,
        TYPE_DATE_ONLY,
        TYPE_TIME_ONLY,
        TYPE_DATETIME,
        TYPE_ARRAY,
    )
    default_required = False

    def __init__(self, key: str):
        self.key = key
        self._display_name: str | None = None
        self.description: str | None = None
        self._type = TYPE_STRING
        self.enum: list[Any] | None = None
        self.validation_pattern: str | None = None
        self._min_length: int | None = None
        self._max_length: int | None = None
        self._minimum: int | float | None = None
        self._maximum: int | float | None = None
        self.examples: list[Any] = []
        self.repeat = False
        self.required = self.default_required
        self._default: Any = None
        self.format: str | None = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.key!r} ({self._type})>"

    @classmethod
    def from_dict(cls, key: str, data: dict[str, Any] | None = None) -> "NamedParameter":
        """Create a parameter from its RAML declaration."""
        data = data or {}
        parameter = cls(key)
        if data.get("displayName") is not None:
            parameter.display_name = data["displayName"]
        if data.get("description") is not None:
            parameter.description = data["description"]
        if data.get("type") is not None:
            parameter.type = data["type"]
        if data.get("enum") is not None:
            parameter.enum = list(data["enum"])
        for pattern_key in ("pattern", "validationPattern"):
            if data.get(pattern_key) is not None:
                parameter.validation_pattern = data[pattern_key]
        if data.get("minLength") is not None:
            parameter.min_length = data["minLength"]
        if data.get("maxLength") is not None:
            parameter.max_length = data["maxLength"]
        if data.get("minimum") is not None:
            parameter.minimum = data["minimum"]
        if data.get("maximum") is not None:
            parameter.maximum = data["maximum"]
        if data.get("example") is not None:
            parameter.examples.append(data["example"])
        if data.get("examples") is not None:
            examples = data["examples"]
            parameter.examples.extend(
                examples.values() if isinstance(examples, dict) else examples
            )
        if data.get("repeat") is not None:
            parameter.repeat = bool(data["repeat"])
        if data.get("required") is not None:
            parameter.required = bool(data["required"])
        if data.get("format") is not None:
            parameter.format = data["format"]
        if data.get("default") is not None:
            default = data["default"]
            if parameter.type == TYPE_DATE and isinstance(default, str):
                try:
                    default = datetime.strptime(default, RFC2616_FORMAT)
                except ValueError:
                    pass
            parameter.default = default
        return parameter

    # Facets

    @property
    def display_name(self) -> str:
        return self._display_name or self.key

    @display_name.setter
    def display_name(self, display_name: str) -> None:
        self._display_name = display_name

    @property
    def type(self) -> str:
        return self._type

    @type.setter
    def type(self, type_name: str) -> None:
        if type_name not in self.valid_types:
            raise InvalidParameterTypeError(
                f'Type "{type_name}" is not valid, valid types are: {", ".join(self.valid_types)}'
            )
        self._type = type_name

    @property
    def min_length(self) -> int | None:
        return self._min_length

    @min_length.setter
    def min_length(self, value: int) -> None:
        if self._type != TYPE_STRING:
            raise InvalidParameterDefinitionError('minLength can only be set on type "string"')
        self._min_length = int(value)

    @property
    def max_length(self) -> int | None:
        return self._max_length

    @max_length.setter
    def max_length(self, value: int) -> None:
        if self._type != TYPE_STRING:
            raise InvalidParameterDefinitionError('maxLength can only be set on type "string"')
        self._max_length = int(value)

    @property
    def minimum(self) -> int | float | None:
        return self._minimum

    @minimum.setter
    def minimum(self, value: int | float) -> None:
        if self._type not in (TYPE_INTEGER, TYPE_NUMBER):
            raise InvalidParameterDefinitionError(
                'minimum can only be set on type "integer" or "number"'
            )
        self._minimum = value

    @property
    def maximum(self) -> int | float | None:
        return self._maximum

    @maximum.setter
    def maximum(self, value: int | float) -> None:
        if self._type not in (TYPE_INTEGER, TYPE_NUMBER):
            raise InvalidParameterDefinitionError(
                'maximum can only be set on type "integer" or "number"'
            )
        self._maximum = value

    @property
    def default(self) -> Any:
        return self._default

    @default.setter
    def default(self, default: Any) -> None:
        if self._type == TYPE_STRING and not isinstance(default, str):
            raise InvalidParameterDefinitionError("Default parameter is not a string")
        if self._type == TYPE_NUMBER and _as_number(default) is None:
            raise InvalidParameterDefinitionError("Default parameter is not a number")
        if self._type == TYPE_INTEGER:
            number = _as_number(default)
            if number is None or int(number) != number:
                raise InvalidParameterDefinitionError("Default parameter is not an integer")
        if self._type == TYPE_DATE and not isinstance(default, datetime):
            raise InvalidParameterDefinitionError("Default parameter is not a dateTime object")
        if self._type == TYPE_BOOLEAN and not isinstance(default, bool):
            raise InvalidParameterDefinitionError("Default parameter is not a boolean")
        if self._type == TYPE_FILE:
            raise InvalidParameterDefinitionError("A default value cannot be set for a file")
        self._default = default

    # Validation

    def validate(self, param: Any) -> None:
        """Validate a parameter value.

        Raises:
            ValidationError: For the first rule the value violates
        """
        if param is None or param == "":
            if self.required:
                raise ValidationError(f"{self.key} is required", VAL_ISREQUIRED)
            return

        if self._type == TYPE_BOOLEAN:
            if not isinstance(param, bool) and param not in ("true", "false"):
                raise ValidationError(f"{self.key} is not boolean", VAL_NOTBOOLEAN)
        elif self._type in (TYPE_DATE, TYPE_STRING):
            self._validate_string(param)
        elif self._type in (TYPE_INTEGER, TYPE_NUMBER):
            self._validate_number(param)
        elif self._type in (TYPE_DATE_ONLY, TYPE_TIME_ONLY, TYPE_DATETIME_ONLY, TYPE_DATETIME):
            node = BUILTIN_TYPES[self._type](self.key)
            if self.format is not None:
                node.format = self.format  # type: ignore[attr-defined]
            errors = node.check(param)
            if errors:
                raise ValidationError(str(errors[0]), errors=errors)
        # file and array values cannot be checked from the parameter type alone

        if self.validation_pattern and re.search(self.validation_pattern, str(param)) is None:
            raise ValidationError(
                f"{self.key} does not match the specified pattern", VAL_PATTERNFAIL
            )

        if self.enum is not None and param not in self.enum:
            raise ValidationError(
                f"{self.key} must be one of the following: {', '.join(map(str, self.enum))}",
                VAL_NOTENUMVALUE,
            )

    def _validate_string(self, param: Any) -> None:
        if self._type == TYPE_DATE:
            try:
                datetime.strptime(str(param), RFC2616_FORMAT)
            except ValueError:
                raise ValidationError(f"{self.key} is not a valid date", VAL_NOTDATE) from None
        if not isinstance(param, str):
            raise ValidationError(f"{self.key} is not a string", VAL_NOTSTRING)
        if self._min_length and len(param) < self._min_length:
            raise ValidationError(
                f"{self.key} must be at least {self._min_length} characters long", VAL_TOOSHORT
            )
        if self._max_length and len(param) > self._max_length:
            raise ValidationError(
                f"{self.key} must be no more than {self._max_length} characters long",
                VAL_TOOLONG,
            )

    def _validate_number(self, param: Any) -> None:
        if self._type == TYPE_INTEGER and not _is_integer(param):
            raise ValidationError(f"{self.key} is not an integer", VAL_NOTINT)
        number = _as_number(param)
        if number is None:
            raise ValidationError(f"{self.key} is not a number", VAL_NOTNUMBER)
        if self._minimum is not None and number < self._minimum:
            raise ValidationError(
                f"{self.key} must be greater than or equal to {self._minimum}", VAL_NUMLESSTHAN
            )
        if self._maximum is not None and number > self._maximum:
            raise ValidationError(
                f"{self.key} must be less than or equal to {self._maximum}", VAL_GREATERTHAN
            )

    def get_match_pattern(self) -> str:
        """Regular expression matching valid values inside a URI."""
        if self.validation_pattern:
            return self.validation_pattern
        if self.enum:
            return "^(" + "|".join(re.escape(str(value)) for value in self.enum) + ")$"
        if self._type == TYPE_NUMBER:
            return r"[-+]?[0-9]*\.?[0-9]+"
        if self._type == TYPE_INTEGER:
            return r"[-+]?[0-9]+"
        if self._type == TYPE_DATE:
            return HTTP_DATE_PATTERN
        if self._type == TYPE_BOOLEAN:
            return "(true|false)"
        if self._type == TYPE_STRING and (self._min_length or self._max_length):
            low = self._min_length or ""
            high = self._max_length or ""
            return "((?!\\/).){" + f"{low},{high}" + "}"
        return "([^/]+)"


class BaseUriParameter(NamedParameter):
    """A parameter of the API base URI; required unless declared otherwise."""

    valid_types = (TYPE_STRING, TYPE_NUMBER, TYPE_INTEGER)
    default_required = True
