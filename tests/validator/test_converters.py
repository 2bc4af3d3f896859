"""Tests for body decoding and value conversion."""

from datetime import datetime

import numpy as np
import pandas as pd
import pytest
from lxml import etree

from ramlcore.exceptions import InvalidJsonError, InvalidXmlError
from ramlcore.validator import ContentConverter


class TestConvertStringByContentType:
    """Test decoding of bodies by content type."""

    def test_json(self):
        assert ContentConverter.convert_string_by_content_type('{"a": [1, 2]}', "application/json") == {
            "a": [1, 2]
        }

    def test_vendor_json(self):
        value = ContentConverter.convert_string_by_content_type(
            "[1]", "application/vnd.api+json; charset=utf-8"
        )
        assert value == [1]

    def test_invalid_json(self):
        with pytest.raises(InvalidJsonError):
            ContentConverter.convert_string_by_content_type("{", "application/json")

    def test_xml(self):
        tree = ContentConverter.convert_string_by_content_type("<a><b/></a>", "text/xml")
        assert isinstance(tree, etree._ElementTree)
        assert tree.getroot().tag == "a"

    def test_invalid_xml(self):
        with pytest.raises(InvalidXmlError):
            ContentConverter.convert_string_by_content_type("<a>", "application/xml")

    def test_form(self):
        assert ContentConverter.convert_string_by_content_type(
            "title=Hey&tag=a&tag=b", "application/x-www-form-urlencoded"
        ) == {"title": "Hey", "tag": ["a", "b"]}

    def test_other_content_types_are_unchanged(self):
        assert ContentConverter.convert_string_by_content_type("a,b", "text/csv") == "a,b"


class TestToNative:
    """Test conversion of pandas and numpy values."""

    def test_dataframe(self):
        frame = pd.DataFrame({"name": ["a", "b"], "count": [1, 2]})
        rows = ContentConverter.to_native(frame)
        assert rows == [{"name": "a", "count": 1}, {"name": "b", "count": 2}]
        assert all(type(row["count"]) is int for row in rows)

    def test_series_and_arrays(self):
        assert ContentConverter.to_native(pd.Series([1.5, np.nan])) == [1.5, None]
        assert ContentConverter.to_native(np.array([1, 2])) == [1, 2]

    def test_scalars(self):
        assert ContentConverter.to_native(np.bool_(True)) is True
        assert type(ContentConverter.to_native(np.int32(4))) is int
        assert ContentConverter.to_native(np.float64("nan")) is None
        assert ContentConverter.to_native(pd.NaT) is None

    def test_timestamps(self):
        value = ContentConverter.to_native(pd.Timestamp("2024-01-02 03:04:05"))
        assert value == datetime(2024, 1, 2, 3, 4, 5)
        assert type(value) is datetime

    def test_nested_containers(self):
        assert ContentConverter.to_native({"a": (np.int64(1), {"b": np.float32(0.5)})}) == {
            "a": [1, {"b": 0.5}]
        }

    def test_plain_values_are_unchanged(self):
        assert ContentConverter.to_native("text") == "text"
        assert ContentConverter.to_native(None) is None
