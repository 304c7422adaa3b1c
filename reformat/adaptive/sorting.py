"""
Profile Classification Engine ("sorting ceremony").

Accumulates per-profile scores from quiz answers and recommends one
profile plus a colorblind flag.

Rules:
- Each chosen option adds its (profile, weight) pairs to running totals.
  Scores never decrease: negative or malformed weights contribute zero.
- The accessibility probe carries no weights; answering it finalizes
  classification immediately with the probe's colorblind answer.
- Winner is the strictly greatest score. Ties go to the profile that was
  first encountered during accumulation; a later profile must beat the
  leader, not merely match it.
- If nothing scored, DEFAULT_PROFILE is returned.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from loguru import logger

from reformat.core.profiles import ProfileType

DEFAULT_PROFILE = ProfileType.ADHD


@dataclass(frozen=True)
class SortingOption:
    """One answer option. Probe options carry `color_blind` instead of scores."""
    text: str
    score: Mapping[ProfileType, int] | None = None
    color_blind: bool | None = None


@dataclass(frozen=True)
class SortingQuestion:
    id: int
    text: str
    options: tuple[SortingOption, ...]
    is_accessibility_probe: bool = False


@dataclass(frozen=True)
class SortingResult:
    """Outcome of the ceremony."""
    profile: ProfileType
    is_color_blind: bool
    scores: dict[ProfileType, int] = field(default_factory=dict)


# ============================================================================
# SCORING
# ============================================================================

def accumulate(scores: dict[ProfileType, int], option: SortingOption) -> dict[ProfileType, int]:
    """
    Return new totals with an option's weights added.

    Insertion order of the returned dict records first-encounter order,
    which is what breaks ties.
    """
    updated = dict(scores)
    for key, weight in (option.score or {}).items():
        try:
            profile = ProfileType(key)
        except ValueError:
            logger.warning(f"Ignoring weight for unknown profile {key!r}")
            continue
        if not isinstance(weight, int) or isinstance(weight, bool) or weight < 0:
            logger.warning(f"Ignoring malformed weight {weight!r} for {profile.value}")
            continue
        updated[profile] = updated.get(profile, 0) + weight
    return updated


def pick_winner(scores: Mapping[ProfileType, int]) -> ProfileType:
    """Strictly greatest score wins; first-encountered wins ties."""
    max_score = 0
    winner = DEFAULT_PROFILE
    for profile, value in scores.items():
        if value > max_score:
            max_score = value
            winner = profile
    return winner


def classify(questions: Sequence[SortingQuestion], choices: Sequence[int]) -> SortingResult:
    """
    Classify a complete answer sequence.

    `choices[i]` is the chosen option index for `questions[i]`. Answers
    past an accessibility probe are never read.
    """
    ceremony = SortingCeremony(questions)
    for choice in choices:
        result = ceremony.answer(choice)
        if result is not None:
            return result
    return ceremony.finish()


# ============================================================================
# STEPWISE CEREMONY
# ============================================================================

class SortingCeremony:
    """
    Stepwise quiz state for one learner.

    Ephemeral: discard it once `result` is set or the learner cancels.
    """

    def __init__(self, questions: Sequence[SortingQuestion] | None = None):
        self.questions: tuple[SortingQuestion, ...] = tuple(
            DEFAULT_QUESTIONS if questions is None else questions
        )
        self.step = 0
        self.scores: dict[ProfileType, int] = {}
        self.is_color_blind = False
        self.result: SortingResult | None = None
        self.cancelled = False

    @property
    def finished(self) -> bool:
        return self.result is not None

    @property
    def current_question(self) -> SortingQuestion | None:
        if self.finished or self.cancelled or self.step >= len(self.questions):
            return None
        return self.questions[self.step]

    @property
    def progress(self) -> float:
        """Fraction of questions reached, for progress bars."""
        if not self.questions:
            return 1.0
        return min(self.step + 1, len(self.questions)) / len(self.questions)

    def answer(self, option_index: int) -> SortingResult | None:
        """Record an answer; returns the result once classification is final."""
        question = self.current_question
        if question is None:
            return self.result

        if not 0 <= option_index < len(question.options):
            raise ValueError(
                f"Option {option_index} out of range for question {question.id} "
                f"({len(question.options)} options)"
            )
        option = question.options[option_index]

        if question.is_accessibility_probe:
            self.is_color_blind = bool(option.color_blind)
            return self.finish()

        self.scores = accumulate(self.scores, option)
        self.step += 1
        if self.step >= len(self.questions):
            return self.finish()
        return None

    def finish(self) -> SortingResult:
        """Finalize with the current scores."""
        if self.result is None:
            self.result = SortingResult(
                profile=pick_winner(self.scores),
                is_color_blind=self.is_color_blind,
                scores=dict(self.scores),
            )
            logger.info(
                f"Sorting ceremony: {self.result.profile.value} "
                f"(colorblind={self.result.is_color_blind}, scores={self._score_summary()})"
            )
        return self.result

    def cancel(self) -> None:
        self.cancelled = True
        self.scores = {}

    def _score_summary(self) -> str:
        return ", ".join(f"{p.value}={s}" for p, s in self.scores.items()) or "none"


# ============================================================================
# DEFAULT QUESTION BANK
# ============================================================================

DEFAULT_QUESTIONS: tuple[SortingQuestion, ...] = (
    SortingQuestion(
        id=1,
        text="When you try to read a spellbook (or textbook), what happens?",
        options=(
            SortingOption("The words dance, blur, or flip around.", {ProfileType.DYSLEXIA: 3}),
            SortingOption("I can read, but I get bored and lose focus quickly.", {ProfileType.ADHD: 2}),
            SortingOption(
                "The words are fine, but I don't understand the hidden meanings.",
                {ProfileType.ELL: 2, ProfileType.AUTISM: 1},
            ),
        ),
    ),
    SortingQuestion(
        id=2,
        text="How do you handle complex potions (math problems)?",
        options=(
            SortingOption("I love the logic and rules!", {ProfileType.AUTISM: 1}),
            SortingOption("The numbers get jumbled up in my head.", {ProfileType.DYSCALCULIA: 3}),
            SortingOption("I skip steps because I want to finish fast.", {ProfileType.ADHD: 2}),
        ),
    ),
    SortingQuestion(
        id=3,
        text="What helps you learn new magic best?",
        options=(
            SortingOption(
                "Pictures, diagrams, and videos.",
                {ProfileType.DYSLEXIA: 1, ProfileType.ELL: 2},
            ),
            SortingOption("Short bursts of practice with rewards.", {ProfileType.ADHD: 3}),
            SortingOption(
                "Clear, logical instructions with no fluff.",
                {ProfileType.AUTISM: 2, ProfileType.DYSCALCULIA: 1},
            ),
        ),
    ),
    SortingQuestion(
        id=4,
        text="Does 'It's raining cats and dogs' make sense to you?",
        options=(
            SortingOption(
                "No! Why would animals fall from the sky?",
                {ProfileType.AUTISM: 2, ProfileType.ELL: 2},
            ),
            SortingOption("Yes, I know it just means heavy rain.", {ProfileType.ADHD: 1}),
        ),
    ),
    SortingQuestion(
        id=5,
        text="Do some magical colors look the same to you (like red/green)?",
        is_accessibility_probe=True,
        options=(
            SortingOption("Yes, sometimes colors blend together.", color_blind=True),
            SortingOption("No, I see all colors clearly.", color_blind=False),
        ),
    ),
)
