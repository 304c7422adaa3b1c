"""
Core Module - Shared domain models.

Components:
- profiles: ProfileType and faction display names
- settings: UserSettings record and its customization scales
- settings_resolver: profile -> render-ready settings
- errors: error taxonomy
"""

from reformat.core.errors import (
    GenerationError,
    InputError,
    InvalidTransitionError,
    PlaybackError,
    ReformatError,
)
from reformat.core.profiles import (
    NAMED_PROFILES,
    ProfileType,
    get_faction_description,
    get_faction_name,
)
from reformat.core.settings import (
    ColorTheme,
    Customizations,
    FontFamily,
    FontSize,
    LineSpacing,
    UserSettings,
)
from reformat.core.settings_resolver import (
    DEFAULT_CUSTOMIZATIONS,
    resolve_custom,
    resolve_for_profile,
    resolve_from_quiz,
)

__all__ = [
    # Errors
    "ReformatError",
    "InputError",
    "GenerationError",
    "PlaybackError",
    "InvalidTransitionError",
    # Profiles
    "ProfileType",
    "NAMED_PROFILES",
    "get_faction_name",
    "get_faction_description",
    # Settings
    "UserSettings",
    "Customizations",
    "FontFamily",
    "FontSize",
    "LineSpacing",
    "ColorTheme",
    "DEFAULT_CUSTOMIZATIONS",
    "resolve_for_profile",
    "resolve_from_quiz",
    "resolve_custom",
]
