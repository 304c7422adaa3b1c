"""
Unit tests for the answer verifier.
"""

import pytest

from reformat.content.models import Activity
from reformat.practice import MatchRule, check_activity, is_answer_correct, match_rule, normalize_answer


def _quiz(options, answer, index):
    return Activity(
        id="q",
        type="quiz",
        question="?",
        options=options,
        correct_answer=answer,
        correct_answer_index=index,
    )


class TestNormalize:

    @pytest.mark.parametrize("raw,expected", [
        ("$6$", "6"),
        ("**Bold** Answer", "boldanswer"),
        ("`code_name`", "codename"),
        ("  4 ", "4"),
    ])
    def test_strips_markdown_and_whitespace(self, raw, expected):
        assert normalize_answer(raw) == expected


class TestMatchRules:

    def test_index_match(self):
        assert match_rule("4", "4", 1, ["2", "4", "6"]) == MatchRule.INDEX

    def test_trailing_space_is_correct(self):
        assert is_answer_correct("4 ", "4", 1, ["2", "4", "6"])
        assert match_rule("4 ", "4", 1, ["2", "4", "6"]) == MatchRule.TEXT

    def test_index_is_authoritative_over_text(self):
        assert match_rule("6", "4", 2, ["2", "4", "6"]) == MatchRule.INDEX

    def test_word_against_digit_is_incorrect(self):
        assert match_rule("six", "6", None, ["six", "seven"]) == MatchRule.NONE

    def test_markdown_wrapped_answer_matches_text(self):
        assert match_rule("$6$", "6", None) == MatchRule.TEXT

    def test_numeric_tolerance(self):
        assert match_rule("3.0", "3", None) == MatchRule.NUMERIC
        assert match_rule("0.3334", "0.3333", None) == MatchRule.NUMERIC
        assert match_rule("3.01", "3", None) == MatchRule.NONE

    def test_no_canonical_text_falls_through(self):
        assert match_rule("4", None, None, ["4"]) == MatchRule.NONE
        assert match_rule("4", "", 5, ["4"]) == MatchRule.NONE

    def test_non_finite_numbers_do_not_match(self):
        assert match_rule("nan", "NaN", None) == MatchRule.TEXT
        assert match_rule("inf", "1e999", None) == MatchRule.NONE


class TestCheckActivity:

    def test_correct_feedback(self):
        result = check_activity(_quiz(["2", "4", "6"], "6", 2), "6")
        assert result.correct
        assert result.feedback == "Correct!"
        assert result.rule == MatchRule.INDEX

    def test_incorrect_feedback_names_indexed_option(self):
        result = check_activity(_quiz(["2", "4", "6"], "four", 1), "2")
        assert not result.correct
        assert result.correct_answer == "4"
        assert result.feedback == "Not quite. The answer is: 4"
