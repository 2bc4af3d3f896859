"""Decoding of message bodies and conversion of tabular values to native data."""

import json
from typing import Any
from urllib.parse import parse_qs

import numpy as np
import pandas as pd

from ramlcore.exceptions import InvalidJsonError
from ramlcore.schema.definitions import XmlSchemaDefinition
from ramlcore.schema.parsers import JsonSchemaParser, XmlSchemaParser


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def _is_json(media_type: str) -> bool:
    return (
        media_type in JsonSchemaParser.default_content_types
        or media_type.endswith("+json")
    )


def _is_xml(media_type: str) -> bool:
    return media_type in XmlSchemaParser.default_content_types or media_type.endswith("+xml")


class ContentConverter:
    """Utility class for turning wire payloads into values a type can validate."""

    @staticmethod
    def convert_string_by_content_type(text: str | bytes, content_type: str) -> Any:
        """Decode a body according to its content type.

        JSON content types are decoded with ``json``, XML content types are
        parsed into an lxml tree and url-encoded forms into a mapping of
        fields. Anything else is returned unchanged.

        Raises:
            InvalidJsonError: If a JSON body cannot be decoded
            InvalidXmlError: If an XML body is not well-formed
        """
        media_type = _media_type(content_type)
        if _is_json(media_type):
            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                raise InvalidJsonError(f"Invalid JSON body: {e}") from e
        if _is_xml(media_type):
            return XmlSchemaDefinition.parse_document(text)
        if media_type == "application/x-www-form-urlencoded":
            raw = text.decode("utf-8") if isinstance(text, bytes) else text
            fields = parse_qs(raw, keep_blank_values=True)
            return {key: values[0] if len(values) == 1 else values for key, values in fields.items()}
        return text

    @staticmethod
    def to_native(value: Any) -> Any:
        """Convert pandas and numpy values into plain Python data.

        DataFrames become lists of row mappings, Series and arrays become
        lists, numpy scalars their Python equivalents and missing values
        (``NaN``, ``NaT``) ``None``. Containers are converted recursively.
        """
        if isinstance(value, pd.DataFrame):
            return [ContentConverter.to_native(row) for row in value.to_dict("records")]
        if isinstance(value, pd.Series):
            return [ContentConverter.to_native(item) for item in value.tolist()]
        if isinstance(value, np.ndarray):
            return [ContentConverter.to_native(item) for item in value.tolist()]
        if isinstance(value, dict):
            return {key: ContentConverter.to_native(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [ContentConverter.to_native(item) for item in value]
        if value is pd.NaT:
            return None
        if isinstance(value, pd.Timestamp):
            return value.to_pydatetime()
        if isinstance(value, np.bool_):
            return bool(value)
        if isinstance(value, np.integer):
            return int(value)
        if isinstance(value, np.floating):
            return None if np.isnan(value) else float(value)
        if isinstance(value, float) and np.isnan(value):
            return None
        return value
