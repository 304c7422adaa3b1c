"""
Session Module - state machine, persistence, conversation.

Components:
- orchestrator: SessionOrchestrator and AppMode
- profile_store: saved-profiles repository
- transcript: explain-it-back conversation
"""

from reformat.session.orchestrator import PROCESSING_FAILED_MESSAGE, AppMode, SessionOrchestrator
from reformat.session.profile_store import (
    InMemoryProfileRepository,
    JsonProfileRepository,
    ProfileRepository,
)
from reformat.session.transcript import ConversationTranscript, ExplainSession, Message, Role

__all__ = [
    "PROCESSING_FAILED_MESSAGE",
    "AppMode",
    "ConversationTranscript",
    "ExplainSession",
    "InMemoryProfileRepository",
    "JsonProfileRepository",
    "Message",
    "ProfileRepository",
    "Role",
    "SessionOrchestrator",
]
