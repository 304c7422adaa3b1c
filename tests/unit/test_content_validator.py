"""
Unit tests for the content model parse-then-validate boundary.
"""

import json

import pytest

from reformat.content.models import REQUIRED_TOP_LEVEL_FIELDS, BlockType
from reformat.content.validator import (
    DocumentValidationError,
    IssueKind,
    WarningKind,
    collect_warnings,
    parse_document,
)
from reformat.core.errors import GenerationError


class TestAccepts:

    def test_minimal_payload_with_empty_collections(self, minimal_payload):
        document = parse_document(minimal_payload)
        assert document.title == "Empty Lesson"
        assert document.blocks == ()
        assert document.mindmap == ()
        assert collect_warnings(document) == []

    def test_json_text_and_bytes(self, full_payload):
        text = json.dumps(full_payload)
        assert parse_document(text) == parse_document(text.encode("utf-8"))

    def test_full_payload(self, full_payload):
        document = parse_document(full_payload)
        assert [b.type for b in document.blocks] == [
            BlockType.HEADING, BlockType.TEXT, BlockType.MATH, BlockType.VOCABULARY,
        ]
        assert document.blocks[2].step_list == ("Count carbon atoms", "Count oxygen atoms")
        assert document.blocks[0].step_list == ()
        assert document.slides[0].narration.startswith("Plants capture")
        assert len(document.quizzes) == 1
        assert document.quizzes[0].correct_answer_index == 2

    def test_unknown_keys_are_ignored(self, minimal_payload):
        minimal_payload["generatorVersion"] = "x"
        assert parse_document(minimal_payload).title == "Empty Lesson"

    def test_non_quiz_activity_needs_no_answer(self, minimal_payload):
        minimal_payload["activities"] = [{"id": "r", "type": "reflection", "question": "Why?"}]
        document = parse_document(minimal_payload)
        assert document.quizzes == ()


class TestRejects:

    @pytest.mark.parametrize("field", REQUIRED_TOP_LEVEL_FIELDS)
    def test_missing_required_field(self, minimal_payload, field):
        del minimal_payload[field]
        with pytest.raises(DocumentValidationError) as exc:
            parse_document(minimal_payload)
        assert exc.value.kinds == {IssueKind.MISSING_FIELD}
        assert [i.path for i in exc.value.issues] == [field]

    def test_null_required_field_counts_as_missing(self, minimal_payload):
        minimal_payload["mindmap"] = None
        with pytest.raises(DocumentValidationError) as exc:
            parse_document(minimal_payload)
        assert exc.value.issues[0].path == "mindmap"

    def test_is_a_generation_error(self, minimal_payload):
        del minimal_payload["title"]
        with pytest.raises(GenerationError):
            parse_document(minimal_payload)

    @pytest.mark.parametrize("payload", ["not json", b"\xff\xfe", "[1, 2]", "null"])
    def test_undecodable_payload(self, payload):
        with pytest.raises(DocumentValidationError) as exc:
            parse_document(payload)
        assert exc.value.kinds == {IssueKind.TYPE_MISMATCH}
        assert exc.value.issues[0].path == ""

    def test_wrong_types(self, minimal_payload):
        minimal_payload["title"] = 5
        minimal_payload["blocks"] = [{"id": "b1", "type": "video", "content": "x"}]
        with pytest.raises(DocumentValidationError) as exc:
            parse_document(minimal_payload)
        paths = {i.path: i.kind for i in exc.value.issues}
        assert paths["title"] == IssueKind.TYPE_MISMATCH
        assert paths["blocks.0.type"] == IssueKind.TYPE_MISMATCH

    def test_missing_nested_field(self, full_payload):
        del full_payload["slides"][0]["speakerNotes"]
        with pytest.raises(DocumentValidationError) as exc:
            parse_document(full_payload)
        assert exc.value.issues[0].kind == IssueKind.MISSING_FIELD
        assert exc.value.issues[0].path == "slides.0.speakerNotes"

    def test_quiz_without_answer_fields(self, full_payload):
        activity = full_payload["activities"][0]
        del activity["correctAnswer"]
        del activity["correctAnswerIndex"]
        with pytest.raises(DocumentValidationError) as exc:
            parse_document(full_payload)
        assert [i.path for i in exc.value.issues] == [
            "activities.0.correctAnswer",
            "activities.0.correctAnswerIndex",
        ]
        assert exc.value.kinds == {IssueKind.MISSING_FIELD}

    def test_quiz_with_empty_options(self, full_payload):
        full_payload["activities"][0]["options"] = []
        with pytest.raises(DocumentValidationError) as exc:
            parse_document(full_payload)
        assert exc.value.kinds == {IssueKind.EMPTY_REQUIRED}

    def test_answer_index_must_be_an_integer(self, full_payload):
        full_payload["activities"][0]["correctAnswerIndex"] = "2"
        with pytest.raises(DocumentValidationError) as exc:
            parse_document(full_payload)
        assert exc.value.issues[0].path == "activities.0.correctAnswerIndex"
        assert exc.value.issues[0].kind == IssueKind.TYPE_MISMATCH

    def test_blank_id(self, full_payload):
        full_payload["flashcards"][0]["id"] = "  "
        with pytest.raises(DocumentValidationError) as exc:
            parse_document(full_payload)
        assert exc.value.issues[0].kind == IssueKind.EMPTY_REQUIRED
        assert exc.value.issues[0].path == "flashcards.0.id"


class TestWarnings:

    def test_duplicate_ids(self, full_payload):
        full_payload["blocks"][1]["id"] = "b1"
        warnings = collect_warnings(parse_document(full_payload))
        assert [(w.kind, w.path) for w in warnings] == [(WarningKind.DUPLICATE_ID, "blocks")]

    def test_dangling_parent(self, full_payload):
        full_payload["mindmap"].append({"id": "m5", "parentId": "ghost", "label": "Lost"})
        warnings = collect_warnings(parse_document(full_payload))
        assert warnings[0].kind == WarningKind.DANGLING_PARENT
        assert warnings[0].path == "mindmap.4.parentId"

    def test_answer_text_and_index_disagree(self, full_payload):
        full_payload["activities"][0]["correctAnswerIndex"] = 0
        warnings = collect_warnings(parse_document(full_payload))
        assert warnings[0].kind == WarningKind.ANSWER_DISAGREEMENT

    def test_answer_index_out_of_range(self, full_payload):
        full_payload["activities"][0]["correctAnswerIndex"] = 9
        warnings = collect_warnings(parse_document(full_payload))
        assert warnings[0].path == "activities.0.correctAnswerIndex"

    def test_round_trip_payload(self, full_payload):
        document = parse_document(full_payload)
        assert parse_document(document.to_payload()) == document
