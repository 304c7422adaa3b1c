"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import copy
import json
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from reformat.content.artifacts import from_bytes
from reformat.core.errors import GenerationError
from reformat.session.profile_store import InMemoryProfileRepository


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (fake gateway, no network)")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Payloads
# =============================================================================

MINIMAL_PAYLOAD = {
    "title": "Empty Lesson",
    "blocks": [],
    "slides": [],
    "audioScript": "",
    "activities": [],
    "mindmap": [],
    "flashcards": [],
}

FULL_PAYLOAD = {
    "title": "Photosynthesis",
    "blocks": [
        {"id": "b1", "type": "heading", "content": "# How plants eat"},
        {
            "id": "b2",
            "type": "text",
            "content": "Plants turn **light** into sugar.",
            "visualAid": "🌱",
            "highlight": "light",
        },
        {
            "id": "b3",
            "type": "math",
            "content": "Balance $6CO_2 + 6H_2O$",
            "steps": ["Count carbon atoms", "Count oxygen atoms"],
        },
        {"id": "b4", "type": "vocabulary", "content": "**Chlorophyll**: the green pigment"},
    ],
    "slides": [
        {
            "id": "s1",
            "content": "Light in, sugar out",
            "visualCue": "☀️",
            "speakerNotes": "Plants capture sunlight in their leaves.",
        },
    ],
    "audioScript": "Welcome to today's episode about photosynthesis. " * 30,
    "activities": [
        {
            "id": "a1",
            "type": "quiz",
            "question": "How many CO2 molecules are used?",
            "options": ["2", "4", "6"],
            "correctAnswer": "6",
            "correctAnswerIndex": 2,
        },
        {"id": "a2", "type": "reflection", "question": "Where do plants get water?"},
    ],
    "mindmap": [
        {"id": "m1", "label": "Photosynthesis"},
        {"id": "m2", "parentId": "m1", "label": "Inputs", "description": "Light, water, CO2"},
        {"id": "m3", "parentId": "m1", "label": "Outputs"},
        {"id": "m4", "parentId": "m2", "label": "Sunlight"},
    ],
    "flashcards": [
        {"id": "f1", "front": "Chlorophyll", "back": "Green pigment", "mnemonic": "Chloro = green"},
    ],
}


@pytest.fixture
def minimal_payload():
    """Smallest payload the validator accepts."""
    return copy.deepcopy(MINIMAL_PAYLOAD)


@pytest.fixture
def full_payload():
    """A payload exercising every collection."""
    return copy.deepcopy(FULL_PAYLOAD)


@pytest.fixture
def text_artifact():
    return from_bytes(b"Photosynthesis converts light into chemical energy.", "text/plain", source="notes.txt")


@pytest.fixture
def profile_repository():
    return InMemoryProfileRepository()


# =============================================================================
# Fake Gateway
# =============================================================================

class FakeGateway:
    """
    In-process stand-in for the generation service.

    `transform_results` is consumed in order; an Exception entry is raised,
    anything else is returned (dicts are serialized to JSON).
    """

    def __init__(self, transform_results=None, chat_replies=None):
        self.transform_results = list(transform_results or [])
        self.chat_replies = list(chat_replies or [])
        self.transform_calls = []
        self.chat_calls = []
        self.feedback_calls = []
        self.speech_calls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def transform(self, artifact, profile):
        self.transform_calls.append((artifact, profile))
        if not self.transform_results:
            raise GenerationError("No response generated")
        result = self.transform_results.pop(0)
        if isinstance(result, Exception):
            raise result
        if isinstance(result, dict):
            return json.dumps(result)
        return result

    async def synthesize_speech(self, text):
        self.speech_calls.append(text)
        return ""

    async def chat(self, history, message, document, profile):
        self.chat_calls.append((list(history), message))
        if not self.chat_replies:
            return ""
        reply = self.chat_replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def audio_feedback(self, audio_b64, document, profile):
        self.feedback_calls.append((audio_b64, profile))
        return "Great explanation!"


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def gateway_factory():
    """Build a FakeGateway with scripted results."""
    return FakeGateway
