"""
Content Module - the transformed document and everything that reads it.

Components:
- models: TransformedDocument and its item types
- validator: parse-then-validate boundary for generator payloads
- mindmap: id -> children index and forest reconstruction
- artifacts: capture of the uploaded learning artifact
"""

from reformat.content.models import (
    ROOT_SENTINEL,
    Activity,
    ActivityType,
    BlockType,
    ContentBlock,
    FeedbackData,
    Flashcard,
    MindmapNode,
    Slide,
    TransformedDocument,
)
from reformat.content.validator import (
    DocumentValidationError,
    IssueKind,
    ValidationIssue,
    ValidationWarning,
    WarningKind,
    collect_warnings,
    parse_document,
)
from reformat.content.mindmap import ExpansionState, MindmapIndex, MindmapTree, build_forest
from reformat.content.artifacts import Artifact, fetch_artifact, from_bytes, load_artifact

__all__ = [
    "ROOT_SENTINEL",
    "Activity",
    "ActivityType",
    "BlockType",
    "ContentBlock",
    "FeedbackData",
    "Flashcard",
    "MindmapNode",
    "Slide",
    "TransformedDocument",
    "DocumentValidationError",
    "IssueKind",
    "ValidationIssue",
    "ValidationWarning",
    "WarningKind",
    "collect_warnings",
    "parse_document",
    "ExpansionState",
    "MindmapIndex",
    "MindmapTree",
    "build_forest",
    "Artifact",
    "fetch_artifact",
    "from_bytes",
    "load_artifact",
]
