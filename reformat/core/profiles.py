"""
Cognitive-accessibility profiles and their user-facing faction names.

Internal identifiers are clinical; learners only ever see the faction
name, which carries no semantic weight.
"""

from __future__ import annotations

from enum import Enum


class ProfileType(str, Enum):
    """Cognitive-accessibility category driving content and presentation."""
    DYSLEXIA = "DYSLEXIA"
    DYSCALCULIA = "DYSCALCULIA"
    ADHD = "ADHD"
    ELL = "ELL"          # English language learner
    AUTISM = "AUTISM"
    CUSTOM = "CUSTOM"    # catch-all, never produced by classification


NAMED_PROFILES: tuple[ProfileType, ...] = (
    ProfileType.DYSLEXIA,
    ProfileType.DYSCALCULIA,
    ProfileType.ADHD,
    ProfileType.ELL,
    ProfileType.AUTISM,
)

FACTION_NAMES: dict[ProfileType, str] = {
    ProfileType.DYSLEXIA: "Phoenix Faction",      # sees the world visually
    ProfileType.DYSCALCULIA: "Owl Faction",       # logic and structure
    ProfileType.ADHD: "Falcon Faction",           # speed and focus
    ProfileType.ELL: "Griffin Faction",           # bridging worlds
    ProfileType.AUTISM: "Dragon Faction",         # structure and detail
}
FALLBACK_FACTION_NAME = "Chimera Faction"

FACTION_DESCRIPTIONS: dict[ProfileType, str] = {
    ProfileType.DYSLEXIA: (
        "As a Phoenix, you see the world visually. We will adapt content by using "
        "Dyslexia-friendly fonts, adding vivid images for vocabulary, and keeping "
        "sentences short and punchy to stop the words from dancing."
    ),
    ProfileType.DYSCALCULIA: (
        "As an Owl, you need structure. We will break down every math problem into "
        "clear, colorful steps and visualize numbers so they stop getting jumbled "
        "in your head."
    ),
    ProfileType.ADHD: (
        "As a Falcon, you have speed but need focus. We will chop long texts into "
        "'micro-quests' with frequent checkpoints and rewards to keep your momentum "
        "flying high."
    ),
    ProfileType.ELL: (
        "As a Griffin, you are bridging worlds. We will translate complex idioms into "
        "plain English and provide instant definitions for tricky wizard words."
    ),
    ProfileType.AUTISM: (
        "As a Dragon, you value truth and logic. We will remove confusing metaphors "
        "and organize information into perfect, predictable structures that make sense."
    ),
}
FALLBACK_FACTION_DESCRIPTION = "We will adapt the content to be clear, structured, and multimodal."


def get_faction_name(profile: ProfileType | str) -> str:
    """Display name for a profile; unmapped and custom profiles get the fallback."""
    try:
        profile = ProfileType(profile)
    except ValueError:
        return FALLBACK_FACTION_NAME
    return FACTION_NAMES.get(profile, FALLBACK_FACTION_NAME)


def get_faction_description(profile: ProfileType | str) -> str:
    """How the material will be adapted for a profile."""
    try:
        profile = ProfileType(profile)
    except ValueError:
        return FALLBACK_FACTION_DESCRIPTION
    return FACTION_DESCRIPTIONS.get(profile, FALLBACK_FACTION_DESCRIPTION)
