"""
Practice Module - grading of interactive checks.
"""

from reformat.practice.base import AnswerResult, MatchRule
from reformat.practice.verifier import (
    NUMERIC_TOLERANCE,
    canonical_answer,
    check_activity,
    is_answer_correct,
    match_rule,
    normalize_answer,
)

__all__ = [
    "AnswerResult",
    "MatchRule",
    "NUMERIC_TOLERANCE",
    "canonical_answer",
    "check_activity",
    "is_answer_correct",
    "match_rule",
    "normalize_answer",
]
