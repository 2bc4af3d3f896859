"""Date and time type variants.

String values are checked against the RAML formats (RFC 3339 ``full-date``,
``partial-time`` and ``date-time``); values that are already ``date``,
``time`` or ``datetime`` objects are accepted when they match the variant.
Fractional seconds may have any number of digits.
"""

import re
from datetime import date, datetime, time
from typing import Any

from ramlcore.types.errors import TypeValidationError
from ramlcore.types.scalars import ScalarType

DATE_PART = r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
TIME_PART = r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})(?:\.\d+)?"
OFFSET_PART = r"(?:[Zz]|[+-](?P<offset_hour>\d{2}):(?P<offset_minute>\d{2}))"

DATE_ONLY = re.compile(DATE_PART)
TIME_ONLY = re.compile(TIME_PART)
DATETIME_ONLY = re.compile(DATE_PART + "T" + TIME_PART)
RFC3339 = re.compile(DATE_PART + "[Tt]" + TIME_PART + OFFSET_PART)
RFC2616_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"


def _parses(parser: Any, value: str) -> bool:
    try:
        parser(value)
    except ValueError:
        return False
    return True


def _valid_fields(pattern: re.Pattern[str], value: str) -> bool:
    """Whether ``value`` matches ``pattern`` and its fields form a real date/time."""
    match = pattern.fullmatch(value)
    if match is None:
        return False
    fields = {key: int(group) for key, group in match.groupdict().items() if group is not None}
    try:
        if "year" in fields:
            date(fields["year"], fields["month"], fields["day"])
        if "hour" in fields:
            time(fields["hour"], fields["minute"], fields["second"])
    except ValueError:
        return False
    return fields.get("offset_hour", 0) <= 23 and fields.get("offset_minute", 0) <= 59


class DateOnlyType(ScalarType):
    kind = "date-only"

    def _check(self, value: Any) -> list[TypeValidationError]:
        if isinstance(value, date) and not isinstance(value, datetime):
            return []
        if isinstance(value, str) and _valid_fields(DATE_ONLY, value):
            return []
        return [TypeValidationError.unexpected_value_type(self.name, "date-only", value)]


class TimeOnlyType(ScalarType):
    kind = "time-only"

    def _check(self, value: Any) -> list[TypeValidationError]:
        if isinstance(value, time):
            return []
        if isinstance(value, str) and _valid_fields(TIME_ONLY, value):
            return []
        return [TypeValidationError.unexpected_value_type(self.name, "time-only", value)]


class DateTimeOnlyType(ScalarType):
    kind = "datetime-only"

    def _check(self, value: Any) -> list[TypeValidationError]:
        if isinstance(value, datetime) and value.tzinfo is None:
            return []
        if isinstance(value, str) and _valid_fields(DATETIME_ONLY, value):
            return []
        return [TypeValidationError.unexpected_value_type(self.name, "datetime-only", value)]


class DateTimeType(ScalarType):
    """``datetime`` in ``rfc3339`` (default), ``rfc2616`` or a custom strptime format."""

    kind = "datetime"
    facet_names = frozenset({"format"})

    def __init__(self, name: str, definition: dict[str, Any] | None = None, required: bool = True):
        super().__init__(name, definition, required)
        self.format: str | None = None

    def _check(self, value: Any) -> list[TypeValidationError]:
        if isinstance(value, datetime):
            return []
        fmt = self.format or "rfc3339"
        if isinstance(value, str) and self._matches(value, fmt):
            return []
        return [TypeValidationError.unexpected_value_type(self.name, f"datetime ({fmt})", value)]

    @staticmethod
    def _matches(value: str, fmt: str) -> bool:
        if fmt == "rfc3339":
            return _valid_fields(RFC3339, value)
        if fmt == "rfc2616":
            return _parses(lambda text: datetime.strptime(text, RFC2616_FORMAT), value)
        return _parses(lambda text: datetime.strptime(text, fmt), value)
