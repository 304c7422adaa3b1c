"""
Unit tests for the sorting ceremony (profile classification).
"""

import pytest

from reformat.adaptive.sorting import (
    DEFAULT_PROFILE,
    DEFAULT_QUESTIONS,
    SortingCeremony,
    SortingOption,
    SortingQuestion,
    accumulate,
    classify,
    pick_winner,
)
from reformat.core.profiles import ProfileType

A = ProfileType.DYSLEXIA
B = ProfileType.AUTISM


def _question(qid, *scores, probe=False):
    if probe:
        options = (SortingOption("Yes", color_blind=True), SortingOption("No", color_blind=False))
    else:
        options = tuple(SortingOption(f"option {i}", score) for i, score in enumerate(scores))
    return SortingQuestion(id=qid, text=f"Question {qid}", options=options, is_accessibility_probe=probe)


class TestPickWinner:
    """Strict maximum, first-encountered on ties."""

    def test_tie_resolves_to_first_encountered(self):
        assert pick_winner({A: 3, B: 3}) == A
        assert pick_winner({B: 3, A: 3}) == B

    def test_strict_leader_wins(self):
        assert pick_winner({A: 3, B: 2}) == A
        assert pick_winner({A: 2, B: 3}) == B

    def test_all_zero_falls_back_to_default(self):
        assert pick_winner({}) == DEFAULT_PROFILE
        assert pick_winner({A: 0, B: 0}) == DEFAULT_PROFILE
        assert DEFAULT_PROFILE == ProfileType.ADHD


class TestAccumulate:

    def test_returns_new_mapping(self):
        scores = {A: 1}
        updated = accumulate(scores, SortingOption("x", {A: 2, B: 1}))
        assert updated == {A: 3, B: 1}
        assert scores == {A: 1}

    def test_option_without_score_changes_nothing(self):
        assert accumulate({A: 1}, SortingOption("x")) == {A: 1}

    def test_malformed_weights_are_skipped(self):
        option = SortingOption("x", {A: -1, B: True, "NOT_A_PROFILE": 4, ProfileType.ELL: 2})
        assert accumulate({}, option) == {ProfileType.ELL: 2}


class TestClassify:

    def test_tie_sequence_and_strict_sequence(self):
        """{A:3,B:3} resolves to A (first to reach 3); {A:3,B:2} to A by strict max."""
        questions = (
            _question(1, {A: 3}, {B: 3}),
            _question(2, {B: 3}, {B: 2}),
        )
        assert classify(questions, [0, 0]).profile == A
        assert classify(questions, [0, 1]).profile == A

    def test_later_profile_must_strictly_exceed(self):
        questions = (
            _question(1, {A: 2}),
            _question(2, {B: 3}),
        )
        result = classify(questions, [0, 0])
        assert result.profile == B
        assert result.scores == {A: 2, B: 3}

    def test_probe_finishes_immediately(self):
        questions = (
            _question(1, {A: 3}),
            _question(2, probe=True),
            _question(3, {B: 10}),
        )
        result = classify(questions, [0, 0, 0])
        assert result.profile == A
        assert result.is_color_blind is True

    def test_default_bank_always_yields_one_profile(self):
        for first in range(3):
            for probe_answer in (0, 1):
                result = classify(DEFAULT_QUESTIONS, [first, 0, 0, 0, probe_answer])
                assert result.profile in ProfileType
                assert result.is_color_blind is (probe_answer == 0)

    def test_default_bank_dyslexia_path(self):
        result = classify(DEFAULT_QUESTIONS, [0, 0, 0, 1, 1])
        # DYSLEXIA 4, ELL 2, AUTISM 1, ADHD 1
        assert result.profile == ProfileType.DYSLEXIA
        assert result.is_color_blind is False


class TestSortingCeremony:

    def test_scores_never_decrease(self):
        ceremony = SortingCeremony()
        previous = {}
        for choice in (1, 2, 1, 1):
            ceremony.answer(choice)
            for profile, value in previous.items():
                assert ceremony.scores[profile] >= value
            previous = dict(ceremony.scores)

    def test_last_question_is_accessibility_probe(self):
        assert DEFAULT_QUESTIONS[-1].is_accessibility_probe
        assert len(DEFAULT_QUESTIONS) == 5

    def test_out_of_range_option_raises(self):
        ceremony = SortingCeremony()
        with pytest.raises(ValueError):
            ceremony.answer(7)
        assert ceremony.step == 0

    def test_progress_and_current_question(self):
        ceremony = SortingCeremony()
        assert ceremony.current_question is DEFAULT_QUESTIONS[0]
        assert ceremony.progress == pytest.approx(1 / 5)
        ceremony.answer(0)
        assert ceremony.current_question is DEFAULT_QUESTIONS[1]

    def test_finished_ceremony_ignores_further_answers(self):
        ceremony = SortingCeremony()
        for choice in (0, 0, 0, 0):
            ceremony.answer(choice)
        result = ceremony.answer(1)
        assert ceremony.finished
        assert ceremony.answer(0) is result
        assert ceremony.current_question is None

    def test_cancel_discards_scores(self):
        ceremony = SortingCeremony()
        ceremony.answer(0)
        ceremony.cancel()
        assert ceremony.cancelled
        assert ceremony.scores == {}
        assert ceremony.current_question is None
