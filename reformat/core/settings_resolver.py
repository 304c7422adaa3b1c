"""
Settings Resolver.

Derives a complete, render-ready `UserSettings` record from a profile:

- manual profile selection applies the profile's default bundle
  (font family, line spacing, color theme) so every named profile looks
  different immediately, independent of generated content
- sorting-ceremony results use a slightly larger bundle and apply the
  colorblind override at construction time
- custom flows merge explicit overrides onto the defaults

Every function is pure apart from the generated id.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

from loguru import logger

from .profiles import ProfileType, get_faction_name
from .settings import (
    ColorTheme,
    Customizations,
    FontFamily,
    FontSize,
    LineSpacing,
    UserSettings,
)

DEFAULT_CUSTOMIZATIONS = Customizations(
    font_family=FontFamily.SANS,
    font_size=FontSize.BASE,
    line_spacing=LineSpacing.RELAXED,
    color_theme=ColorTheme.DEFAULT,
    tts_speed=1.0,
    show_images=True,
    is_color_blind=False,
)

# Distinct per-profile bundles; unlisted fields come from DEFAULT_CUSTOMIZATIONS
PROFILE_DEFAULTS: dict[ProfileType, dict[str, Any]] = {
    ProfileType.DYSLEXIA: {
        "font_family": FontFamily.DYSLEXIC,
        "line_spacing": LineSpacing.LOOSE,
        "color_theme": ColorTheme.SEPIA,
    },
    ProfileType.DYSCALCULIA: {
        "font_family": FontFamily.MONO,
        "line_spacing": LineSpacing.RELAXED,
        "color_theme": ColorTheme.DEFAULT,
    },
    ProfileType.ADHD: {
        "font_family": FontFamily.SANS,
        "line_spacing": LineSpacing.NORMAL,
        "color_theme": ColorTheme.DEFAULT,
    },
    ProfileType.ELL: {
        "font_family": FontFamily.SANS,
        "line_spacing": LineSpacing.RELAXED,
        "color_theme": ColorTheme.DEFAULT,
    },
    ProfileType.AUTISM: {
        "font_family": FontFamily.SANS,
        "line_spacing": LineSpacing.LOOSE,
        "color_theme": ColorTheme.DEFAULT,
    },
}

QUIZ_FONT_SIZE = FontSize.LG


def new_settings_id(prefix: str) -> str:
    """Generated identity for a freshly resolved record."""
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def profile_customizations(profile: ProfileType) -> Customizations:
    """Default bundle for manual selection of a profile."""
    overrides = PROFILE_DEFAULTS.get(profile, {})
    return DEFAULT_CUSTOMIZATIONS.model_copy(update=overrides)


def resolve_for_profile(profile: ProfileType, settings_id: str | None = None) -> UserSettings:
    """Settings for a profile picked directly by the learner."""
    profile = ProfileType(profile)
    return UserSettings(
        id=settings_id or new_settings_id("temp"),
        name=get_faction_name(profile),
        base_profile=profile,
        customizations=profile_customizations(profile),
    )


def resolve_from_quiz(
    profile: ProfileType,
    is_color_blind: bool,
    settings_id: str | None = None,
) -> UserSettings:
    """
    Settings for a sorting-ceremony result.

    Larger base font than manual selection; the dyslexia profile keeps its
    friendly font. A positive accessibility probe stores high contrast as
    the theme here, and the colorblind flag forces it again at render time.
    """
    profile = ProfileType(profile)
    customizations = DEFAULT_CUSTOMIZATIONS.model_copy(update={
        "font_family": FontFamily.DYSLEXIC if profile == ProfileType.DYSLEXIA else FontFamily.SANS,
        "font_size": QUIZ_FONT_SIZE,
        "color_theme": ColorTheme.HIGH_CONTRAST if is_color_blind else DEFAULT_CUSTOMIZATIONS.color_theme,
        "is_color_blind": is_color_blind,
    })
    logger.debug(f"Resolved quiz settings for {profile.value} (colorblind={is_color_blind})")
    return UserSettings(
        id=settings_id or new_settings_id("quiz"),
        name=get_faction_name(profile),
        base_profile=profile,
        customizations=customizations,
    )


def resolve_custom(
    base_profile: ProfileType = ProfileType.CUSTOM,
    overrides: Mapping[str, Any] | None = None,
    name: str | None = None,
    settings_id: str | None = None,
) -> UserSettings:
    """
    Settings from explicit overrides layered on the profile bundle.

    Overrides may use snake_case names or stored camelCase keys; unknown
    keys raise ValueError. The result has no unset fields.
    """
    base_profile = ProfileType(base_profile)
    settings = resolve_for_profile(base_profile, settings_id=settings_id or new_settings_id("custom"))
    for key, value in (overrides or {}).items():
        settings = settings.with_customization(key, value)
    if name:
        settings = settings.renamed(settings.id, name)
    return settings
