"""
Answer Verifier.

The generator states each quiz answer twice, as option text and as a
0-based index, and the two do not always agree. Rules are evaluated in
priority order and the first match wins:

1. Index: the chosen option's position equals a valid correctAnswerIndex.
   The index is authoritative, so this holds even if the text disagrees.
2. Text: markdown markers ($ * _ `) and all whitespace stripped, then
   lower-cased; equal strings are correct. No canonical text means incorrect.
3. Numeric: both normalized strings parse as numbers differing by less
   than NUMERIC_TOLERANCE ("3.0" vs "3").
4. Otherwise incorrect.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

from reformat.content.models import Activity
from .base import AnswerResult, MatchRule

NUMERIC_TOLERANCE = 1e-3

_STRIP_PATTERN = re.compile(r"[$*_`\s]")


def normalize_answer(raw: str) -> str:
    """Strip markdown emphasis/code markers and whitespace, lower-case."""
    return _STRIP_PATTERN.sub("", raw).lower().strip()


def _parse_number(value: str) -> float | None:
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def match_rule(
    user_option: str,
    correct_answer: str | None,
    correct_index: int | None,
    options: Sequence[str] | None = None,
) -> MatchRule:
    """
    Return the first rule that accepts the answer, or MatchRule.NONE.

    The index rule locates the learner's option by exact text in `options`,
    so "4 " against ["2", "4", "6"] falls through and is accepted by the
    normalized text rule instead.
    """
    options = list(options or [])

    # 1. Index match
    if (
        isinstance(correct_index, int)
        and not isinstance(correct_index, bool)
        and 0 <= correct_index < len(options)
        and user_option in options
        and options.index(user_option) == correct_index
    ):
        return MatchRule.INDEX

    if not correct_answer:
        return MatchRule.NONE

    # 2. Normalized text match
    user = normalize_answer(user_option)
    correct = normalize_answer(correct_answer)
    if user == correct:
        return MatchRule.TEXT

    # 3. Numeric tolerance match
    user_num = _parse_number(user)
    correct_num = _parse_number(correct)
    if user_num is not None and correct_num is not None:
        if abs(user_num - correct_num) < NUMERIC_TOLERANCE:
            return MatchRule.NUMERIC

    return MatchRule.NONE


def is_answer_correct(
    user_option: str,
    correct_answer: str | None,
    correct_index: int | None,
    options: Sequence[str] | None = None,
) -> bool:
    return match_rule(user_option, correct_answer, correct_index, options) != MatchRule.NONE


def canonical_answer(activity: Activity) -> str:
    """Text to show as the right answer; prefers the indexed option."""
    options = activity.options or ()
    index = activity.correct_answer_index
    if index is not None and 0 <= index < len(options):
        return options[index]
    return activity.correct_answer or ""


def check_activity(activity: Activity, user_option: str) -> AnswerResult:
    """Grade a learner's choice on one quiz activity."""
    rule = match_rule(
        user_option,
        activity.correct_answer,
        activity.correct_answer_index,
        activity.options,
    )
    correct = rule != MatchRule.NONE
    expected = canonical_answer(activity)
    return AnswerResult(
        correct=correct,
        feedback="Correct!" if correct else f"Not quite. The answer is: {expected}",
        user_answer=user_option,
        correct_answer=expected,
        rule=rule,
    )
