"""
Session Orchestrator

Owns one learner session as a state machine:

    UPLOAD -> {SELECT_PROFILE | QUIZ} -> PROCESSING -> VIEW_CONTENT
    UPLOAD <-> ABOUT
    PROCESSING --(failure)--> SELECT_PROFILE   (artifact kept for retry)
    any state --reset--> UPLOAD                (the only way to drop the artifact)

It is the single writer of the active settings and the saved-profiles
collection. Generation failures never escape: they set `error` and send
the session back to profile selection.

Usage:
    session = SessionOrchestrator(gateway, JsonProfileRepository(path))
    session.capture(load_artifact(path))
    await session.select_profile(ProfileType.DYSLEXIA)
    session.document.title
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any

from loguru import logger

from reformat.adaptive.sorting import SortingResult
from reformat.audio.pcm import PcmClip, decode_pcm
from reformat.content.artifacts import Artifact
from reformat.content.mindmap import MindmapIndex
from reformat.content.models import FeedbackData, TransformedDocument
from reformat.content.validator import ValidationWarning, collect_warnings, parse_document
from reformat.core.errors import GenerationError, InputError, InvalidTransitionError
from reformat.core.profiles import ProfileType
from reformat.core.settings import UserSettings
from reformat.core.settings_resolver import (
    new_settings_id,
    resolve_custom,
    resolve_for_profile,
    resolve_from_quiz,
)
from reformat.integrations.gemini_client import GenerationGateway
from reformat.session.profile_store import ProfileRepository
from reformat.session.transcript import ExplainSession

PROCESSING_FAILED_MESSAGE = (
    "Failed to process the document. Please ensure the API Key is valid and try again."
)


class AppMode(str, Enum):
    """Top-level session states."""

    UPLOAD = "upload"
    SELECT_PROFILE = "select_profile"
    QUIZ = "quiz"
    PROCESSING = "processing"
    VIEW_CONTENT = "view_content"
    ABOUT = "about"


class SessionOrchestrator:
    """One learner session: artifact, profile, document, settings."""

    def __init__(self, gateway: GenerationGateway, repository: ProfileRepository):
        self.gateway = gateway
        self.repository = repository

        self.mode = AppMode.UPLOAD
        self.artifact: Artifact | None = None
        self.document: TransformedDocument | None = None
        self.mindmap: MindmapIndex | None = None
        self.warnings: list[ValidationWarning] = []
        self.feedback: list[FeedbackData] = []
        self.error: str | None = None

        self.active_settings: UserSettings = resolve_custom(name="Default", settings_id="default")
        self.processing_profile: ProfileType | None = None
        self.saved_profiles: list[UserSettings] = repository.load()

        # Bumped by reset so a result arriving after it is dropped
        self._epoch = 0

    # =========================================================================
    # Transitions
    # =========================================================================

    @property
    def is_processing(self) -> bool:
        return self.mode == AppMode.PROCESSING

    def _transition(self, target: AppMode) -> None:
        if target != self.mode:
            logger.info(f"Session: {self.mode.value} -> {target.value}")
        self.mode = target

    def _require(self, *allowed: AppMode, action: str) -> None:
        if self.mode not in allowed:
            names = ", ".join(m.value for m in allowed)
            raise InvalidTransitionError(
                f"Cannot {action} while in {self.mode.value} (allowed from: {names})"
            )

    def capture(self, artifact: Artifact) -> AppMode:
        """Accept an uploaded artifact and route to profile selection or the quiz."""
        self._require(AppMode.UPLOAD, action="capture an artifact")
        if artifact is None or not artifact.data:
            raise InputError("No artifact content to capture")

        self.artifact = artifact
        self.error = None
        logger.info(f"Captured {artifact.source or 'upload'} ({artifact.mime_type}, {artifact.size_bytes} bytes)")
        self._transition(AppMode.SELECT_PROFILE if self.saved_profiles else AppMode.QUIZ)
        return self.mode

    def open_about(self) -> None:
        self._require(AppMode.UPLOAD, action="open About")
        self._transition(AppMode.ABOUT)

    def close_about(self) -> None:
        self._require(AppMode.ABOUT, action="close About")
        self._transition(AppMode.UPLOAD)

    def start_quiz(self) -> None:
        self._require(AppMode.SELECT_PROFILE, action="start the sorting ceremony")
        self._transition(AppMode.QUIZ)

    def cancel_quiz(self) -> None:
        self._require(AppMode.QUIZ, action="cancel the sorting ceremony")
        self._transition(AppMode.SELECT_PROFILE)

    def reset(self) -> None:
        """Back to upload, dropping artifact, document and error."""
        self._epoch += 1
        self.artifact = None
        self.document = None
        self.mindmap = None
        self.warnings = []
        self.feedback = []
        self.error = None
        self.processing_profile = None
        self._transition(AppMode.UPLOAD)

    def dismiss_error(self) -> None:
        self.error = None

    # =========================================================================
    # Processing
    # =========================================================================

    async def select_profile(self, profile: ProfileType) -> bool:
        """Process with the default bundle of a directly chosen profile."""
        profile = ProfileType(profile)
        return await self.process(profile, resolve_for_profile(profile))

    async def select_saved(self, settings: UserSettings) -> bool:
        """Process with a saved profile, restored exactly as stored."""
        return await self.process(settings.base_profile, settings)

    async def complete_quiz(self, result: SortingResult) -> bool:
        """Process with the settings derived from a sorting-ceremony result."""
        self._require(AppMode.QUIZ, action="complete the sorting ceremony")
        settings = resolve_from_quiz(result.profile, result.is_color_blind)
        return await self.process(result.profile, settings)

    async def process(self, profile: ProfileType, settings: UserSettings) -> bool:
        """
        Transform the captured artifact for a profile.

        At most one transformation is in flight. On success the document is
        validated, its mindmap indexed, the settings activated, and the
        session moves to VIEW_CONTENT. On failure `error` is set and the
        session returns to SELECT_PROFILE with the artifact retained.

        Returns:
            True if the document was produced
        """
        if self.is_processing:
            raise InvalidTransitionError("A document is already being processed")
        self._require(AppMode.SELECT_PROFILE, AppMode.QUIZ, action="process a document")
        if self.artifact is None:
            raise InvalidTransitionError("No artifact has been captured")

        profile = ProfileType(profile)
        epoch = self._epoch
        self.processing_profile = profile
        self.error = None
        self._transition(AppMode.PROCESSING)

        try:
            raw = await self.gateway.transform(self.artifact, profile)
            document = parse_document(raw)
            mindmap = MindmapIndex(document.mindmap)
        except (GenerationError, InputError) as e:
            logger.error(f"Processing for {profile.value} failed: {e}")
            return self._processing_failed(epoch)
        except Exception as e:
            # Gateways are injected; anything they raise still ends processing
            logger.exception(f"Unexpected error while processing for {profile.value}: {e}")
            return self._processing_failed(epoch)

        if epoch != self._epoch:
            logger.info("Discarding a result that arrived after reset")
            return False

        self.document = document
        self.mindmap = mindmap
        self.warnings = collect_warnings(document)
        self.feedback = []
        self.active_settings = settings
        self.processing_profile = None
        self._transition(AppMode.VIEW_CONTENT)
        logger.info(
            f"Loaded '{document.title}' for {profile.value}: "
            f"{len(document.blocks)} blocks, {len(document.activities)} activities, "
            f"{len(self.warnings)} warning(s)"
        )
        return True

    def _processing_failed(self, epoch: int) -> bool:
        if epoch == self._epoch:
            self.error = PROCESSING_FAILED_MESSAGE
            self.processing_profile = None
            self._transition(AppMode.SELECT_PROFILE)
        return False

    # =========================================================================
    # Active Settings
    # =========================================================================

    def update_settings(self, field_name: str, value: Any) -> UserSettings:
        """Replace one customization on the active settings."""
        self.active_settings = self.active_settings.with_customization(field_name, value)
        logger.debug(f"Settings: {field_name} = {value}")
        return self.active_settings

    def toggle_dark_mode(self) -> UserSettings:
        self.active_settings = self.active_settings.with_dark_mode_toggled()
        return self.active_settings

    # =========================================================================
    # Saved Profiles
    # =========================================================================

    def save_profile(self, name: str) -> UserSettings:
        """Snapshot the active settings under a new name and id."""
        name = (name or "").strip()
        if not name:
            raise ValueError("A saved profile needs a name")

        snapshot = self.active_settings.renamed(new_settings_id("saved"), name)
        updated = [*self.saved_profiles, snapshot]
        if self.repository.save(updated):
            logger.info(f"Saved profile '{name}' ({snapshot.id})")
        self.saved_profiles = updated
        return snapshot

    def delete_profile(self, settings_id: str) -> bool:
        remaining = [p for p in self.saved_profiles if p.id != settings_id]
        if len(remaining) == len(self.saved_profiles):
            return False
        self.repository.save(remaining)
        self.saved_profiles = remaining
        logger.info(f"Deleted saved profile {settings_id}")
        return True

    # =========================================================================
    # In-view Interactions
    # =========================================================================

    def record_feedback(self, block_id: str, is_positive: bool, comment: str | None = None) -> FeedbackData:
        """Thumbs up/down on a block of the current document."""
        if self.document is None:
            raise InvalidTransitionError("No document is loaded")
        block = next((b for b in self.document.blocks if b.id == block_id), None)
        if block is None:
            raise ValueError(f"Unknown block: {block_id}")

        entry = FeedbackData(
            block_id=block_id,
            is_positive=is_positive,
            comment=comment or None,
            original_content=block.content,
            timestamp=time.time(),
        )
        self.feedback.append(entry)
        return entry

    def explain_session(self) -> ExplainSession:
        """Start an explain-it-back conversation about the current document."""
        self._require(AppMode.VIEW_CONTENT, action="start a conversation")
        return ExplainSession(self.document, self.active_settings.base_profile, self.gateway)

    async def spoken_feedback(self, audio_b64: str) -> str:
        self._require(AppMode.VIEW_CONTENT, action="request spoken feedback")
        return await self.gateway.audio_feedback(
            audio_b64, self.document, self.active_settings.base_profile
        )

    async def narration(self, text: str | None = None) -> PcmClip:
        """Synthesize narration for `text` (default: the audio script)."""
        self._require(AppMode.VIEW_CONTENT, action="request narration")
        audio_b64 = await self.gateway.synthesize_speech(text or self.document.audio_script)
        return decode_pcm(audio_b64)
