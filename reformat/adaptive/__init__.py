"""
Adaptive Module - learner classification.

Components:
- sorting: quiz-driven Profile Classification Engine
"""

from reformat.adaptive.sorting import (
    DEFAULT_PROFILE,
    DEFAULT_QUESTIONS,
    SortingCeremony,
    SortingOption,
    SortingQuestion,
    SortingResult,
    accumulate,
    classify,
    pick_winner,
)

__all__ = [
    "DEFAULT_PROFILE",
    "DEFAULT_QUESTIONS",
    "SortingCeremony",
    "SortingOption",
    "SortingQuestion",
    "SortingResult",
    "accumulate",
    "classify",
    "pick_winner",
]
