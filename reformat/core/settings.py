"""
User presentation settings.

A `UserSettings` record is the fully-resolved, render-ready configuration
for one learner. Records are frozen: every change produces a new record
with one field overridden, so settings stay trivially comparable and
undoable.

Stored with camelCase keys (fontFamily, isColorBlind, ...) in the
saved-profiles file.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .profiles import ProfileType


class FontFamily(str, Enum):
    SANS = "sans"
    DYSLEXIC = "dyslexic"
    MONO = "mono"


class FontSize(str, Enum):
    """Ordinal text size scale, smallest first."""
    BASE = "text-base"
    LG = "text-lg"
    XL = "text-xl"
    XXL = "text-2xl"


class LineSpacing(str, Enum):
    """Ordinal line spacing scale, tightest first."""
    NORMAL = "leading-normal"
    RELAXED = "leading-relaxed"
    LOOSE = "leading-loose"


class ColorTheme(str, Enum):
    DEFAULT = "default"
    SEPIA = "sepia"
    DARK = "dark"
    HIGH_CONTRAST = "high-contrast"


DARK_THEMES = frozenset({ColorTheme.DARK, ColorTheme.HIGH_CONTRAST})


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Customizations(_CamelModel):
    """Per-learner presentation knobs."""

    font_family: FontFamily = FontFamily.SANS
    font_size: FontSize = FontSize.BASE
    line_spacing: LineSpacing = LineSpacing.RELAXED
    color_theme: ColorTheme = ColorTheme.DEFAULT
    tts_speed: float = Field(default=1.0, gt=0)
    show_images: bool = True
    is_color_blind: bool = False


class UserSettings(_CamelModel):
    """Identity + base profile + customizations."""

    id: str
    name: str
    base_profile: ProfileType
    customizations: Customizations = Field(default_factory=Customizations)

    @property
    def effective_color_theme(self) -> ColorTheme:
        """Theme actually used for rendering; colorblind mode forces high contrast."""
        if self.customizations.is_color_blind:
            return ColorTheme.HIGH_CONTRAST
        return self.customizations.color_theme

    @property
    def is_dark(self) -> bool:
        return self.effective_color_theme in DARK_THEMES

    def with_customization(self, field_name: str, value: Any) -> UserSettings:
        """
        Return a new record with exactly one customization replaced.

        Accepts either the snake_case field name or its stored camelCase key.
        The value is validated; the original record is left untouched.
        """
        fields = Customizations.model_fields
        if field_name not in fields:
            by_alias = {info.alias: name for name, info in fields.items()}
            if field_name not in by_alias:
                raise ValueError(f"Unknown customization: {field_name}")
            field_name = by_alias[field_name]

        data = self.customizations.model_dump()
        data[field_name] = value
        customizations = Customizations.model_validate(data)
        return self.model_copy(update={"customizations": customizations})

    def with_dark_mode_toggled(self) -> UserSettings:
        """Flip the stored theme between dark and default."""
        current = self.customizations.color_theme
        new_theme = ColorTheme.DEFAULT if current == ColorTheme.DARK else ColorTheme.DARK
        return self.with_customization("color_theme", new_theme)

    def renamed(self, settings_id: str, name: str) -> UserSettings:
        """Snapshot under a new identity, customizations unchanged."""
        return self.model_copy(update={"id": settings_id, "name": name})

    def to_storage(self) -> dict:
        """JSON-ready dict using the stored camelCase layout."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_storage(cls, data: dict) -> UserSettings:
        return cls.model_validate(data)

    def same_presentation(self, other: UserSettings) -> bool:
        """Field-identical comparison ignoring the generated id."""
        return (
            self.name == other.name
            and self.base_profile == other.base_profile
            and self.customizations == other.customizations
        )
