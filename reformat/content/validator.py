"""
Document Validator - strict parse-then-validate boundary.

Philosophy:
- The generator's payload is untrusted; past this boundary only the
  `TransformedDocument` model is used
- No partial documents: any structural failure rejects the whole payload
- Shape only: content quality (reading level, LaTeX) is never judged

Failures are reported as tagged issues:
- MISSING_FIELD: a required key is absent (or null)
- TYPE_MISMATCH: a value has the wrong type or is not in a closed set
- EMPTY_REQUIRED: a required value is present but empty

Non-fatal findings (duplicate ids, dangling mindmap parents, quiz answers
whose text and index disagree) are returned as warnings.
"""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any

from loguru import logger
from pydantic import ValidationError

from reformat.core.errors import GenerationError
from reformat.content.models import REQUIRED_TOP_LEVEL_FIELDS, TransformedDocument


class IssueKind(str, Enum):
    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    EMPTY_REQUIRED = "empty_required"


class WarningKind(str, Enum):
    DUPLICATE_ID = "duplicate_id"
    DANGLING_PARENT = "dangling_parent"
    ANSWER_DISAGREEMENT = "answer_disagreement"


@dataclass(frozen=True)
class ValidationIssue:
    """A single structural failure."""
    kind: IssueKind
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value} at {self.path or '$'}: {self.message}"


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal finding on an accepted document."""
    kind: WarningKind
    path: str
    message: str


class DocumentValidationError(GenerationError):
    """Raised when a generator payload does not satisfy the content model."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        summary = "; ".join(str(i) for i in issues[:5])
        if len(issues) > 5:
            summary += f" (+{len(issues) - 5} more)"
        super().__init__(f"Invalid document payload: {summary}")

    @property
    def kinds(self) -> set[IssueKind]:
        return {i.kind for i in self.issues}


# ============================================================================
# PARSING
# ============================================================================

def parse_document(payload: str | bytes | dict[str, Any]) -> TransformedDocument:
    """
    Parse and validate a generator response.

    Accepts UTF-8 JSON text/bytes or an already-decoded dict.
    Raises DocumentValidationError on any structural failure.
    """
    data = _decode(payload)

    # Top-level presence is checked first so a missing collection is
    # reported once, not as a cascade of nested errors.
    missing = [
        ValidationIssue(IssueKind.MISSING_FIELD, key, "required field is missing")
        for key in REQUIRED_TOP_LEVEL_FIELDS
        if data.get(key) is None
    ]
    if missing:
        _log_issues(missing)
        raise DocumentValidationError(missing)

    try:
        document = TransformedDocument.model_validate(data)
    except ValidationError as e:
        issues = _translate(e)
        _log_issues(issues)
        raise DocumentValidationError(issues) from e

    logger.debug(
        f"Accepted document '{document.title}': {len(document.blocks)} blocks, "
        f"{len(document.slides)} slides, {len(document.activities)} activities, "
        f"{len(document.mindmap)} mindmap nodes, {len(document.flashcards)} flashcards"
    )
    return document


def _decode(payload: str | bytes | dict[str, Any]) -> dict[str, Any]:
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DocumentValidationError(
                [ValidationIssue(IssueKind.TYPE_MISMATCH, "", f"payload is not UTF-8: {e}")]
            ) from e
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise DocumentValidationError(
                [ValidationIssue(IssueKind.TYPE_MISMATCH, "", f"payload is not JSON: {e.msg}")]
            ) from e
    if not isinstance(payload, dict):
        raise DocumentValidationError(
            [ValidationIssue(IssueKind.TYPE_MISMATCH, "", f"expected an object, got {type(payload).__name__}")]
        )
    return payload


def _translate(error: ValidationError) -> list[ValidationIssue]:
    """Map pydantic error records onto the tagged issue kinds."""
    issues = []
    for err in error.errors():
        path = ".".join(str(part) for part in err["loc"])
        err_type = err["type"]
        if err_type == "missing":
            issues.append(ValidationIssue(IssueKind.MISSING_FIELD, path, "required field is missing"))
        elif err_type == "quiz_field_missing":
            for field_name in err["ctx"]["fields"].split(", "):
                field_path = f"{path}.{field_name}" if path else field_name
                issues.append(ValidationIssue(
                    IssueKind.MISSING_FIELD, field_path, "required for quiz activities"
                ))
        elif err_type == "empty_required":
            issues.append(ValidationIssue(IssueKind.EMPTY_REQUIRED, path, err["msg"]))
        else:
            issues.append(ValidationIssue(IssueKind.TYPE_MISMATCH, path, err["msg"]))
    return issues


def _log_issues(issues: list[ValidationIssue]) -> None:
    for issue in issues:
        logger.error(f"DOCUMENT INVALID: {issue}")


# ============================================================================
# WARNINGS
# ============================================================================

def collect_warnings(document: TransformedDocument) -> list[ValidationWarning]:
    """Non-fatal findings on an accepted document."""
    warnings: list[ValidationWarning] = []

    collections = {
        "blocks": document.blocks,
        "slides": document.slides,
        "activities": document.activities,
        "mindmap": document.mindmap,
        "flashcards": document.flashcards,
    }
    for name, items in collections.items():
        counts = Counter(item.id for item in items)
        for item_id, count in counts.items():
            if count > 1:
                warnings.append(ValidationWarning(
                    WarningKind.DUPLICATE_ID, name, f"id '{item_id}' appears {count} times"
                ))

    node_ids = {node.id for node in document.mindmap}
    for i, node in enumerate(document.mindmap):
        if not node.is_root and node.parent_id not in node_ids:
            warnings.append(ValidationWarning(
                WarningKind.DANGLING_PARENT,
                f"mindmap.{i}.parentId",
                f"node '{node.id}' references missing parent '{node.parent_id}'",
            ))

    for i, activity in enumerate(document.activities):
        if not activity.is_quiz or not activity.options:
            continue
        index = activity.correct_answer_index
        if index is None or not 0 <= index < len(activity.options):
            warnings.append(ValidationWarning(
                WarningKind.ANSWER_DISAGREEMENT,
                f"activities.{i}.correctAnswerIndex",
                f"index {index} is outside {len(activity.options)} options",
            ))
        elif activity.options[index] != activity.correct_answer:
            warnings.append(ValidationWarning(
                WarningKind.ANSWER_DISAGREEMENT,
                f"activities.{i}",
                f"option {index} is '{activity.options[index]}' but correctAnswer is '{activity.correct_answer}'",
            ))

    for warning in warnings:
        logger.warning(f"Document warning ({warning.kind.value}) at {warning.path}: {warning.message}")
    return warnings
