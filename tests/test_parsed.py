"""Tests for parsed-data accessors and the QueryResult type."""

from bird.parsed import (
    BIRD_ERROR,
    QueryResult,
    ResultState,
    get_int,
    get_list,
    get_mapping,
    get_str,
)


class TestAccessors:
    def test_wrong_types_return_none(self):
        data = {"a": "x", "b": [1], "c": {"d": 1}, "e": True}
        assert get_mapping(data, "a") is None
        assert get_list(data, "c") is None
        assert get_str(data, "b") is None
        assert get_int(data, "e") is None

    def test_non_mapping_container(self):
        assert get_mapping(None, "x") is None
        assert get_list("routes", "x") is None
        assert get_str(["status"], "x") is None
        assert get_int(3, "x") is None

    def test_int_accepts_digit_strings(self):
        assert get_int({"filtered": "12"}, "filtered") == 12
        assert get_int({"filtered": 0}, "filtered") == 0
        assert get_int({"filtered": "n/a"}, "filtered") is None


class TestQueryResult:
    def test_ok(self):
        result = QueryResult.ok({"routes": []}, from_cache=True)
        assert result.is_special is False
        assert result.get("routes") == []
        assert result.to_dict() == {"routes": []}

    def test_unreachable_wire_form(self):
        result = QueryResult.unreachable()
        assert result.state is ResultState.UNREACHABLE
        assert result.is_special is True
        assert result.to_dict() == {"error": "bird unreachable"}
        assert result.to_dict() is not BIRD_ERROR

    def test_not_admitted_wire_form(self):
        result = QueryResult.not_admitted()
        assert result.is_special is True
        assert result.to_dict() is None

    def test_special_results_have_no_fields(self):
        assert QueryResult.unreachable().get("error") is None
        assert QueryResult.not_admitted().get("routes", []) == []

    def test_special_wire_forms_distinct_from_payloads(self):
        assert QueryResult.ok({}).to_dict() != QueryResult.unreachable().to_dict()
        assert QueryResult.ok({}).to_dict() != QueryResult.not_admitted().to_dict()
