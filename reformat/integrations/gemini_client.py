"""
Generation Gateway

Boundary between ReFormat and the generative service. Four calls cross it:
- transform: artifact + profile -> raw JSON text for the content model
- synthesize_speech: narration text -> base64 PCM (24kHz mono int16)
- chat: explain-it-back tutor turn
- audio_feedback: spoken feedback on a recorded explanation

Usage:
    gateway = GeminiGateway(get_settings())
    raw = await gateway.transform(artifact, ProfileType.DYSLEXIA)
    document = parse_document(raw)
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import httpx
from loguru import logger

from reformat.config import AppSettings
from reformat.content.artifacts import Artifact
from reformat.content.models import TransformedDocument
from reformat.core.errors import GenerationError, InputError
from reformat.core.profiles import ProfileType
from reformat.integrations.prompts import (
    FEEDBACK_REQUEST,
    RESPONSE_SCHEMA,
    TUTOR_INSTRUCTION,
    get_system_instruction,
    inline_request_text,
    text_request_text,
)

GEMINI_REST_BASE = "https://generativelanguage.googleapis.com/v1beta"

FEEDBACK_FALLBACK = "I had trouble hearing that. Can you say it again?"
FEEDBACK_EMPTY = "Keep going, I'm listening!"


class ChatTurn(Protocol):
    role: str
    text: str


@runtime_checkable
class GenerationGateway(Protocol):
    """What the session needs from a generation service."""

    async def transform(self, artifact: Artifact, profile: ProfileType) -> str: ...

    async def synthesize_speech(self, text: str) -> str: ...

    async def chat(
        self,
        history: Sequence[ChatTurn],
        message: str,
        document: TransformedDocument,
        profile: ProfileType,
    ) -> str: ...

    async def audio_feedback(
        self,
        audio_b64: str,
        document: TransformedDocument,
        profile: ProfileType,
    ) -> str: ...


class GeminiGateway:
    """
    Gemini-backed generation gateway.

    Content, chat and feedback go through google-generativeai. Speech
    synthesis needs audio response modalities, so it posts to the REST
    endpoint directly with httpx.
    """

    def __init__(self, settings: AppSettings):
        self.settings = settings
        self.api_key = settings.gemini_api_key
        self._configured = False
        self._http: httpx.AsyncClient | None = None

    @property
    def is_available(self) -> bool:
        return bool(self.api_key)

    async def __aenter__(self) -> "GeminiGateway":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._http:
            await self._http.aclose()
            self._http = None

    def _genai(self):
        if not self.is_available:
            raise GenerationError("No Gemini API key configured (set GEMINI_API_KEY)")
        try:
            # Lazy import to avoid dependency if not used
            import google.generativeai as genai
        except ImportError as e:
            raise GenerationError(
                "google-generativeai not installed. Run: pip install google-generativeai"
            ) from e

        if not self._configured:
            genai.configure(api_key=self.api_key)
            self._configured = True
        return genai

    # =========================================================================
    # Transformation
    # =========================================================================

    def _content_parts(self, artifact: Artifact, profile: ProfileType) -> list[Any]:
        if artifact.is_inline:
            try:
                data = base64.b64decode(artifact.data)
            except binascii.Error as e:
                raise InputError(f"Artifact payload is not valid base64: {e}") from e
            return [
                {"mime_type": artifact.mime_type, "data": data},
                inline_request_text(profile),
            ]
        return [text_request_text(artifact.decoded_text(), profile)]

    async def transform(self, artifact: Artifact, profile: ProfileType) -> str:
        """Restructure an artifact for a profile. Returns the raw JSON text."""
        genai = self._genai()
        model = genai.GenerativeModel(
            model_name=self.settings.transform_model,
            system_instruction=get_system_instruction(profile),
        )
        parts = self._content_parts(artifact, profile)

        logger.info(f"Transforming {artifact.mime_type} artifact for {ProfileType(profile).value}")
        try:
            response = await model.generate_content_async(
                parts,
                generation_config=genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                    temperature=self.settings.transform_temperature,
                ),
            )
            text = response.text
        except Exception as e:
            logger.error(f"Transformation failed: {e}")
            raise GenerationError(f"Transformation failed: {e}") from e

        if not text:
            raise GenerationError("No response generated")
        return text

    # =========================================================================
    # Speech
    # =========================================================================

    async def _ensure_http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=GEMINI_REST_BASE,
                headers={"Content-Type": "application/json"},
                timeout=60.0,
            )
        return self._http

    async def synthesize_speech(self, text: str) -> str:
        """Narrate text. Returns base64 raw PCM, or "" if none came back."""
        if not self.is_available:
            raise GenerationError("No Gemini API key configured (set GEMINI_API_KEY)")

        body = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {
                        "prebuiltVoiceConfig": {"voiceName": self.settings.tts_voice},
                    },
                },
            },
        }

        try:
            client = await self._ensure_http()
            response = await client.post(
                f"/models/{self.settings.tts_model}:generateContent",
                params={"key": self.api_key},
                json=body,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Speech synthesis failed: {e}")
            raise GenerationError(f"Speech synthesis failed: {e}") from e
        except ValueError as e:
            logger.error(f"Speech response was not JSON: {e}")
            raise GenerationError(f"Speech response was not JSON: {e}") from e

        try:
            return data["candidates"][0]["content"]["parts"][0]["inlineData"]["data"] or ""
        except (KeyError, IndexError, TypeError):
            logger.warning("Speech response carried no audio")
            return ""

    # =========================================================================
    # Conversation
    # =========================================================================

    async def chat(
        self,
        history: Sequence[ChatTurn],
        message: str,
        document: TransformedDocument,
        profile: ProfileType,
    ) -> str:
        """One tutor turn, given the prior transcript."""
        genai = self._genai()
        instruction = TUTOR_INSTRUCTION.format(
            profile=ProfileType(profile).value,
            title=document.title,
            script=document.audio_script[: self.settings.chat_context_chars],
        )
        model = genai.GenerativeModel(
            model_name=self.settings.chat_model,
            system_instruction=instruction,
        )
        session = model.start_chat(
            history=[
                {"role": getattr(turn.role, "value", turn.role), "parts": [turn.text]}
                for turn in history
            ]
        )

        try:
            response = await session.send_message_async(message)
            return response.text or ""
        except Exception as e:
            logger.error(f"Chat turn failed: {e}")
            raise GenerationError(f"Chat turn failed: {e}") from e

    async def audio_feedback(
        self,
        audio_b64: str,
        document: TransformedDocument,
        profile: ProfileType,
    ) -> str:
        """Spoken-explanation feedback. Never raises; falls back to a retry prompt."""
        context = document.context_summary(self.settings.feedback_context_chars)
        prompt = FEEDBACK_REQUEST.format(profile=ProfileType(profile).value, context=context)

        try:
            genai = self._genai()
            model = genai.GenerativeModel(model_name=self.settings.audio_feedback_model)
            response = await model.generate_content_async(
                [
                    {"mime_type": "audio/wav", "data": base64.b64decode(audio_b64)},
                    prompt,
                ]
            )
            return response.text or FEEDBACK_EMPTY
        except Exception as e:
            logger.warning(f"Audio feedback failed: {e}")
            return FEEDBACK_FALLBACK
