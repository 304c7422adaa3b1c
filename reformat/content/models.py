"""
Content Model - the canonical transformed document.

A `TransformedDocument` is created wholesale from one generator response
and never patched afterwards; switching profile or re-uploading always
produces a new instance. All models are frozen and use the generator's
camelCase keys on the wire.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictInt, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

# Marks a mindmap node as a root, in addition to a missing parentId
ROOT_SENTINEL = "root"

REQUIRED_TOP_LEVEL_FIELDS = (
    "title",
    "blocks",
    "slides",
    "audioScript",
    "activities",
    "mindmap",
    "flashcards",
)

QUIZ_REQUIRED_FIELDS = ("options", "correctAnswer", "correctAnswerIndex")


class BlockType(str, Enum):
    TEXT = "text"
    HEADING = "heading"
    MATH = "math"
    VOCABULARY = "vocabulary"
    CHECKPOINT = "checkpoint"
    SUMMARY = "summary"


class ActivityType(str, Enum):
    QUIZ = "quiz"
    CHECKLIST = "checklist"
    REFLECTION = "reflection"


class _ContentModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class _Identified(_ContentModel):
    id: str

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("empty_required", "id must not be empty")
        return value


class ContentBlock(_Identified):
    """One unit of readable content. Markdown in `content`; LaTeX in $...$."""

    type: BlockType
    content: str
    original_text: str | None = None
    highlight: str | None = None
    visual_aid: str | None = None
    simplification: str | None = None
    steps: tuple[str, ...] | None = None

    @property
    def step_list(self) -> tuple[str, ...]:
        """Stepwise breakdown; absent steps mean no supplementary structure."""
        return self.steps or ()


class Slide(_Identified):
    content: str
    visual_cue: str
    speaker_notes: str

    @property
    def narration(self) -> str:
        return self.speaker_notes


class Activity(_Identified):
    """Interactive check. Quiz activities carry options and the answer two ways."""

    type: ActivityType
    question: str
    options: tuple[str, ...] | None = None
    correct_answer: str | None = None
    correct_answer_index: StrictInt | None = None

    @model_validator(mode="before")
    @classmethod
    def _quiz_fields_present(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("type") != ActivityType.QUIZ.value:
            return data
        missing = [
            key for key in QUIZ_REQUIRED_FIELDS
            if data.get(key) is None and data.get(_snake(key)) is None
        ]
        if missing:
            raise PydanticCustomError(
                "quiz_field_missing",
                "quiz activity is missing {fields}",
                {"fields": ", ".join(missing)},
            )
        options = data.get("options")
        if isinstance(options, (list, tuple)) and not options:
            raise PydanticCustomError("empty_required", "quiz activity needs at least one option")
        return data

    @property
    def is_quiz(self) -> bool:
        return self.type == ActivityType.QUIZ


class MindmapNode(_Identified):
    parent_id: str | None = None
    label: str
    description: str | None = None

    @property
    def is_root(self) -> bool:
        return not self.parent_id or self.parent_id == ROOT_SENTINEL


class Flashcard(_Identified):
    front: str
    back: str
    mnemonic: str | None = None


class TransformedDocument(_ContentModel):
    """The multi-modal restructuring of one uploaded artifact."""

    title: str
    blocks: tuple[ContentBlock, ...]
    slides: tuple[Slide, ...]
    audio_script: str
    activities: tuple[Activity, ...]
    mindmap: tuple[MindmapNode, ...]
    flashcards: tuple[Flashcard, ...]

    @property
    def quizzes(self) -> tuple[Activity, ...]:
        return tuple(a for a in self.activities if a.is_quiz)

    def context_summary(self, limit: int = 500) -> str:
        """Short context handed to the conversational and feedback boundaries."""
        script = self.audio_script[:limit]
        if len(self.audio_script) > limit:
            script += "..."
        return f"Title: {self.title}. Summary: {script}"

    def to_payload(self) -> dict:
        """Wire-format dict, as the generator would have sent it."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FeedbackData(_ContentModel):
    """Thumbs up/down left by the learner on one block."""

    block_id: str
    is_positive: bool
    comment: str | None = None
    original_content: str
    timestamp: float | None = None


def _snake(key: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in key)
