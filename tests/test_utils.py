"""Tests for graph record utility functions."""

import json

from study_planner.utils import (
    extract_preclusion_codes,
    parse_semester_data,
    safe_int,
    safe_str,
    split_list,
)


class TestSafeInt:
    """Tests for safe_int function."""

    def test_valid_values(self):
        assert safe_int(4) == 4
        assert safe_int("4") == 4
        assert safe_int(4.0) == 4
        assert safe_int("4.0") == 4

    def test_invalid_values(self):
        assert safe_int(None) is None
        assert safe_int(float("nan")) is None
        assert safe_int("abc") is None
        assert safe_int("abc", 0) == 0


class TestSafeStr:
    """Tests for safe_str function."""

    def test_values(self):
        assert safe_str("  CS1010 ") == "CS1010"
        assert safe_str(None) == ""
        assert safe_str(float("nan")) == ""
        assert safe_str(4) == "4"


class TestSplitList:
    """Tests for split_list function."""

    def test_separated_string(self):
        assert split_list("CS1010; CS1101S ;") == ["CS1010", "CS1101S"]

    def test_list_passthrough(self):
        assert split_list(["term1", " term2 ", ""]) == ["term1", "term2"]

    def test_empty(self):
        assert split_list(None) == []
        assert split_list("") == []
        assert split_list(float("nan")) == []


class TestExtractPreclusionCodes:
    """Tests for extract_preclusion_codes function."""

    def test_codes_in_text(self):
        text = "CS1010S, CS1010X or CS1101S; students who passed MA1521 cannot take"
        assert extract_preclusion_codes(text) == ["CS1010S", "CS1010X", "CS1101S", "MA1521"]

    def test_no_codes(self):
        assert extract_preclusion_codes("None") == []
        assert extract_preclusion_codes(None) == []
        assert extract_preclusion_codes("") == []


class TestParseSemesterData:
    """Tests for parse_semester_data function."""

    def test_terms_and_exam(self):
        labels, exam = parse_semester_data(
            [
                {"semester": 2},
                {"semester": 1, "examDate": "2025-11-25T09:00:00", "examDuration": 120},
                {"semester": 4},
            ]
        )
        assert labels == ["term2", "term1", "short_b"]
        assert exam == {"start_time": "2025-11-25T09:00:00", "duration_minutes": 120}

    def test_json_string(self):
        labels, exam = parse_semester_data(json.dumps([{"semester": 3}]))
        assert labels == ["short_a"]
        assert exam is None

    def test_invalid_input(self):
        assert parse_semester_data("not json") == ([], None)
        assert parse_semester_data(None) == ([], None)
        assert parse_semester_data({"semester": 1}) == ([], None)

    def test_unknown_semester_skipped(self):
        labels, _ = parse_semester_data([{"semester": 7}, {"semester": 1}, {"semester": 1}])
        assert labels == ["term1"]
