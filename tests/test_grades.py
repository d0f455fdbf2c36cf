"""Tests for grade parsing and formatting."""

import pytest

from hanjadeck.config import HanjaGrade, grades_cache_key, parse_grades
from hanjadeck.exceptions import InvalidGradeError


class TestGradeParse:
    """HanjaGrade.parse is the single parse boundary."""

    @pytest.mark.parametrize("value", [8, "8", "8급", " 8급 ", HanjaGrade.GRADE_8])
    def test_accepted_forms(self, value):
        assert HanjaGrade.parse(value) is HanjaGrade.GRADE_8

    @pytest.mark.parametrize("value", [0, 9, -1, "9급", "급", "eight", "", None, 8.0, True])
    def test_rejected_forms(self, value):
        with pytest.raises(InvalidGradeError):
            HanjaGrade.parse(value)

    def test_invalid_grade_is_value_error(self):
        with pytest.raises(ValueError):
            HanjaGrade.parse("10급")

    def test_label(self):
        assert HanjaGrade.GRADE_3.label == "3급"

    def test_ordered_easiest_first(self):
        ordered = HanjaGrade.ordered()
        assert ordered[0] is HanjaGrade.GRADE_8
        assert ordered[-1] is HanjaGrade.GRADE_1
        assert len(ordered) == 8


class TestGradeSets:
    """Helpers for grade collections."""

    def test_parse_grades_dedups_mixed_forms(self):
        assert parse_grades([8, "8급", "7"]) == [HanjaGrade.GRADE_8, HanjaGrade.GRADE_7]

    def test_cache_key_is_order_independent(self):
        assert grades_cache_key([8, "6급", 7]) == "6,7,8"
        assert grades_cache_key(["7", 6, 8]) == "6,7,8"
