"""
Integrations with external generation services.
"""

from reformat.integrations.gemini_client import (
    FEEDBACK_EMPTY,
    FEEDBACK_FALLBACK,
    GeminiGateway,
    GenerationGateway,
)
from reformat.integrations.prompts import RESPONSE_SCHEMA, get_system_instruction

__all__ = [
    "FEEDBACK_EMPTY",
    "FEEDBACK_FALLBACK",
    "GeminiGateway",
    "GenerationGateway",
    "RESPONSE_SCHEMA",
    "get_system_instruction",
]
