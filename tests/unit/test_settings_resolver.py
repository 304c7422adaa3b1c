"""
Unit tests for settings records and the settings resolver.
"""

import pytest
from pydantic import ValidationError

from reformat.core.profiles import NAMED_PROFILES, ProfileType, get_faction_description, get_faction_name
from reformat.core.settings import ColorTheme, FontFamily, FontSize, LineSpacing, UserSettings
from reformat.core.settings_resolver import (
    DEFAULT_CUSTOMIZATIONS,
    resolve_custom,
    resolve_for_profile,
    resolve_from_quiz,
)


class TestFactions:

    def test_named_profiles_have_distinct_factions(self):
        names = {get_faction_name(p) for p in NAMED_PROFILES}
        assert len(names) == len(NAMED_PROFILES)
        assert get_faction_name(ProfileType.DYSLEXIA) == "Phoenix Faction"

    def test_custom_and_unknown_fall_back(self):
        assert get_faction_name(ProfileType.CUSTOM) == "Chimera Faction"
        assert get_faction_name("SOMETHING_ELSE") == "Chimera Faction"
        assert "adapt the content" in get_faction_description("nope")


class TestResolveForProfile:

    def test_is_pure_apart_from_id(self):
        for profile in ProfileType:
            first = resolve_for_profile(profile)
            second = resolve_for_profile(profile)
            assert first.id != second.id
            assert first.same_presentation(second)

    def test_named_profiles_look_different(self):
        bundles = [resolve_for_profile(p).customizations for p in NAMED_PROFILES]
        assert len({(c.font_family, c.line_spacing, c.color_theme) for c in bundles}) == len(bundles)

    def test_dyslexia_bundle(self):
        settings = resolve_for_profile(ProfileType.DYSLEXIA)
        c = settings.customizations
        assert c.font_family == FontFamily.DYSLEXIC
        assert c.line_spacing == LineSpacing.LOOSE
        assert c.color_theme == ColorTheme.SEPIA
        assert settings.id.startswith("temp_")
        assert settings.name == "Phoenix Faction"

    def test_custom_profile_uses_defaults(self):
        assert resolve_for_profile(ProfileType.CUSTOM).customizations == DEFAULT_CUSTOMIZATIONS

    def test_explicit_id_is_kept(self):
        assert resolve_for_profile(ProfileType.ADHD, settings_id="fixed").id == "fixed"


class TestResolveFromQuiz:

    def test_larger_font_and_dyslexic_font_only_for_dyslexia(self):
        dyslexia = resolve_from_quiz(ProfileType.DYSLEXIA, False)
        adhd = resolve_from_quiz(ProfileType.ADHD, False)
        assert dyslexia.customizations.font_size == FontSize.LG
        assert dyslexia.customizations.font_family == FontFamily.DYSLEXIC
        assert adhd.customizations.font_family == FontFamily.SANS
        assert adhd.id.startswith("quiz_")

    def test_colorblind_sets_high_contrast(self):
        settings = resolve_from_quiz(ProfileType.ELL, True)
        assert settings.customizations.is_color_blind
        assert settings.customizations.color_theme == ColorTheme.HIGH_CONTRAST
        assert settings.effective_color_theme == ColorTheme.HIGH_CONTRAST


class TestColorblindInvariant:

    @pytest.mark.parametrize("theme", list(ColorTheme))
    def test_effective_theme_is_high_contrast(self, theme):
        settings = resolve_custom(overrides={"color_theme": theme, "is_color_blind": True})
        assert settings.customizations.color_theme == theme
        assert settings.effective_color_theme == ColorTheme.HIGH_CONTRAST
        assert settings.is_dark

    def test_without_colorblind_stored_theme_is_used(self):
        settings = resolve_custom(overrides={"colorTheme": "sepia"})
        assert settings.effective_color_theme == ColorTheme.SEPIA
        assert not settings.is_dark


class TestCustomizationUpdates:

    def test_one_field_replaced_original_untouched(self):
        original = resolve_for_profile(ProfileType.ADHD)
        updated = original.with_customization("fontSize", "text-2xl")
        assert updated.customizations.font_size == FontSize.XXL
        assert original.customizations.font_size == FontSize.BASE
        assert updated.customizations.font_family == original.customizations.font_family

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="Unknown customization"):
            resolve_for_profile(ProfileType.ADHD).with_customization("sparkles", True)

    def test_invalid_value_rejected(self):
        settings = resolve_for_profile(ProfileType.ADHD)
        with pytest.raises(ValidationError):
            settings.with_customization("tts_speed", 0)
        with pytest.raises(ValidationError):
            settings.with_customization("font_family", "comic-sans")

    def test_dark_mode_toggle_round_trip(self):
        settings = resolve_for_profile(ProfileType.DYSLEXIA)
        dark = settings.with_dark_mode_toggled()
        assert dark.customizations.color_theme == ColorTheme.DARK
        assert dark.with_dark_mode_toggled().customizations.color_theme == ColorTheme.DEFAULT

    def test_resolve_custom_name_and_overrides(self):
        settings = resolve_custom(ProfileType.AUTISM, {"showImages": False}, name="Quiet")
        assert settings.name == "Quiet"
        assert settings.base_profile == ProfileType.AUTISM
        assert settings.customizations.show_images is False
        assert settings.customizations.line_spacing == LineSpacing.LOOSE


class TestStorageLayout:

    def test_camel_case_keys(self):
        stored = resolve_from_quiz(ProfileType.DYSCALCULIA, True, settings_id="quiz_1").to_storage()
        assert stored["id"] == "quiz_1"
        assert stored["baseProfile"] == "DYSCALCULIA"
        assert stored["customizations"]["isColorBlind"] is True
        assert stored["customizations"]["fontSize"] == "text-lg"
        assert UserSettings.from_storage(stored).customizations.is_color_blind
