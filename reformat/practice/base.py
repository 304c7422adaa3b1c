"""
Base types for answer checking.
"""

from dataclasses import dataclass
from enum import Enum


class MatchRule(str, Enum):
    """Which verification rule produced the verdict."""
    INDEX = "index"        # chosen option sits at the canonical index
    TEXT = "text"          # normalized text equality
    NUMERIC = "numeric"    # both parse as numbers within tolerance
    NONE = "none"          # no rule matched


@dataclass
class AnswerResult:
    """Result of checking an answer."""
    correct: bool
    feedback: str
    user_answer: str
    correct_answer: str
    rule: MatchRule = MatchRule.NONE
    explanation: str | None = None
