"""
Configuration settings for ReFormat.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REFORMAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # ========================================
    # Gemini
    # ========================================
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("REFORMAT_GEMINI_API_KEY", "GEMINI_API_KEY"),
        description="Google Generative AI (Gemini) API key",
    )
    transform_model: str = Field(
        default="gemini-3-flash-preview",
        description="Model used to restructure uploaded material",
    )
    transform_temperature: float = Field(
        default=0.2,
        description="Sampling temperature for document restructuring",
    )
    chat_model: str = Field(
        default="gemini-3-flash-preview",
        description="Model used for the explain-it-back conversation",
    )
    tts_model: str = Field(
        default="gemini-2.5-flash-preview-tts",
        description="Model used for narration synthesis",
    )
    tts_voice: str = Field(
        default="Puck",
        description="Prebuilt narration voice",
    )
    audio_feedback_model: str = Field(
        default="gemini-2.5-flash-native-audio-preview-12-2025",
        description="Model used for spoken feedback on recorded explanations",
    )
    chat_context_chars: int = Field(
        default=1000,
        description="Characters of the audio script passed to the tutor as context",
    )
    feedback_context_chars: int = Field(
        default=500,
        description="Characters of the audio script passed to spoken feedback",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".reformat",
        description="Directory holding saved profiles and logs",
    )
    profiles_file: str = Field(
        default="saved_profiles.json",
        description="File (inside data_dir) holding the saved-profiles array",
    )

    # ========================================
    # Artifacts
    # ========================================
    request_timeout_seconds: float = Field(
        default=15.0,
        description="Timeout for fetching artifacts by URL",
    )
    max_artifact_bytes: int = Field(
        default=20 * 1024 * 1024,
        description="Largest artifact accepted for transformation",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(default="WARNING")
    log_file: Path | None = Field(
        default=None,
        description="Optional log file; rotated by loguru",
    )

    @property
    def profiles_path(self) -> Path:
        """Full path of the saved-profiles storage file."""
        return self.data_dir / self.profiles_file

    def has_gemini_configured(self) -> bool:
        """Check if the generation service can be reached."""
        return bool(self.gemini_api_key)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Get cached settings instance."""
    return AppSettings()
