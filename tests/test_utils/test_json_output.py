"""Tests for model JSON output helpers."""

import pytest

from legal_council.utils.json_output import (
    clean_json_fence,
    get_bool,
    get_score,
    get_str,
    get_str_list,
    parse_json_object,
)


class TestCleanJsonFence:

    def test_json_fence(self):
        assert clean_json_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert clean_json_fence('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_text_around_fence(self):
        assert clean_json_fence('Here you go:\n```json\n{"a": 1}\n```\nDone.') == '{"a": 1}'

    def test_no_fence(self):
        assert clean_json_fence('  {"a": 1}  ') == '{"a": 1}'


class TestParseJsonObject:

    def test_object(self):
        assert parse_json_object('{"translation": "x"}') == {"translation": "x"}

    @pytest.mark.parametrize("text", [None, "", "not json", "[1, 2]", '"string"', "42"])
    def test_unusable_payload_is_empty(self, text):
        assert parse_json_object(text) == {}


class TestFieldReaders:

    def test_get_str(self):
        data = {"a": "value", "b": "", "c": 5}
        assert get_str(data, "a") == "value"
        assert get_str(data, "b", "fallback") == "fallback"
        assert get_str(data, "c") == ""
        assert get_str(data, "missing", "d") == "d"

    def test_get_bool_only_accepts_booleans(self):
        assert get_bool({"f": True}, "f") is True
        assert get_bool({"f": False}, "f", default=True) is False
        assert get_bool({"f": "true"}, "f") is False
        assert get_bool({"f": 1}, "f") is False
        assert get_bool({}, "f") is False

    @pytest.mark.parametrize("value,expected", [
        (88, 88),
        (87.6, 88),
        (140, 100),
        (-5, 0),
        (0, 0),
        (100, 100),
    ])
    def test_get_score_numeric(self, value, expected):
        assert get_score({"s": value}, "s", 90) == expected

    @pytest.mark.parametrize("value", ["95", None, True, float("nan"), [90]])
    def test_get_score_falls_back(self, value):
        assert get_score({"s": value}, "s", 90) == 90

    def test_get_score_missing(self):
        assert get_score({}, "s", 90) == 90

    def test_get_str_list(self):
        assert get_str_list({"r": ["a", 1, "b", None]}, "r") == ["a", "b"]
        assert get_str_list({"r": "a"}, "r") == []
        assert get_str_list({}, "r") == []
