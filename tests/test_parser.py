"""Tests for JSON extraction and the schema formatter."""

import pytest

from modelbridge.llm.errors import JSONExtractionError
from modelbridge.llm.parser import (
    clean_json_span,
    create_formatter,
    extract_json,
    safe_extract_json,
    strip_think_tags,
)

from fakes import Flag, WeatherData


def test_extract_clean_object():
    assert extract_json('{"a": 1}') == {"a": 1}


def test_extract_object_inside_prose():
    raw = 'Sure! {"temperature": 9, "conditions": "sunny", "location": "Paris"} Hope that helps.'
    assert extract_json(raw) == {"temperature": 9, "conditions": "sunny", "location": "Paris"}


def test_extract_array_inside_prose():
    assert extract_json("Here you go: [1, 2, 3]. Done") == [1, 2, 3]


def test_first_opener_decides_closer():
    """An array holding objects is taken whole when '[' comes first."""
    raw = 'Result: [{"a": 1}, {"a": 2}]'
    assert extract_json(raw) == [{"a": 1}, {"a": 2}]


def test_trailing_comma_and_line_comment():
    assert extract_json('{"a":1,} // note') == {"a": 1}


def test_block_comments_and_multiline_trailing_commas():
    raw = """{
        "items": [1, 2, 3,], /* three items */
        "name": "x", // the name
    }"""
    assert extract_json(raw) == {"items": [1, 2, 3], "name": "x"}


def test_bare_scalar_without_brackets():
    assert extract_json("  42 ") == 42
    assert extract_json('"just text"') == "just text"


def test_no_json_raises():
    with pytest.raises(JSONExtractionError) as exc_info:
        extract_json("no data available")
    assert exc_info.value.raw_output == "no data available"


def test_opener_without_closer_falls_back_to_whole_text():
    with pytest.raises(JSONExtractionError):
        extract_json('{"a": 1')


def test_think_tags_are_stripped():
    raw = '<think>maybe {"a": 0}?</think>{"a": 1}'
    assert extract_json(raw) == {"a": 1}


def test_strip_think_tags_without_tags():
    assert strip_think_tags("plain") == ("plain", None)


def test_think_tags_inside_json_values_are_kept():
    raw = '{"a": 1, "note": "<think>plan</think> done"}'
    assert strip_think_tags(raw) == (raw, None)
    assert extract_json(raw) == {"a": 1, "note": "<think>plan</think> done"}


def test_clean_json_span_collapses_whitespace():
    assert clean_json_span('{\n  "a":\t1\n}') == '{ "a": 1 }'


def test_safe_extract_json_fallback():
    value, error = safe_extract_json("nothing here", fallback={})
    assert value == {}
    assert error is not None

    value, error = safe_extract_json('{"ok": true}')
    assert value == {"ok": True}
    assert error is None


def test_formatter_returns_validated_model():
    fmt = create_formatter(WeatherData)
    result = fmt('{"temperature": 9, "conditions": "sunny", "location": "Paris"}')
    assert result == WeatherData(temperature=9, conditions="sunny", location="Paris")


def test_formatter_round_trips_model_json():
    value = WeatherData(temperature=-3.5, conditions="snow", location="Oslo")
    assert create_formatter(WeatherData)(value.model_dump_json()) == value


def test_formatter_round_trips_value_containing_think_tags():
    value = WeatherData(temperature=1, conditions="<think>plan</think> done", location="Lima")
    assert create_formatter(WeatherData)(value.model_dump_json()) == value


def test_formatter_tolerates_comments_and_trailing_commas():
    assert create_formatter(Flag)('{"a":1,} // note') == Flag(a=1)


def test_formatter_returns_none_without_json():
    assert create_formatter(WeatherData)("no data available") is None


def test_formatter_returns_none_on_schema_mismatch():
    assert create_formatter(WeatherData)('{"temperature": "hot"}') is None


def test_formatter_logs_failure(caplog):
    with caplog.at_level("ERROR", logger="modelbridge"):
        create_formatter(Flag)("not json")
    assert any(getattr(r, "_action", None) == "format_failed" for r in caplog.records)
