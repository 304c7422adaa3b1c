"""
Rendering tests for the terminal views.
"""

import pytest
from rich.console import Console

from reformat.content.mindmap import ExpansionState, MindmapIndex
from reformat.content.validator import parse_document
from reformat.core.profiles import ProfileType
from reformat.core.settings import ColorTheme
from reformat.core.settings_resolver import resolve_custom, resolve_for_profile
from reformat.delivery.views import (
    PALETTES,
    ViewMode,
    mindmap_tree,
    render_view,
    run_practice,
    theme_for,
)


@pytest.fixture
def document(full_payload):
    full_payload["mindmap"].append({"id": "m9", "parentId": "ghost", "label": "Stray"})
    return parse_document(full_payload)


def _console():
    return Console(record=True, width=100, color_system=None)


class TestTheme:

    def test_colorblind_always_uses_high_contrast_palette(self):
        for theme in ColorTheme:
            settings = resolve_custom(overrides={"colorTheme": theme, "isColorBlind": True})
            assert theme_for(settings).text == PALETTES[ColorTheme.HIGH_CONTRAST]["text"]

    def test_layout_follows_customizations(self):
        dyslexia = theme_for(resolve_for_profile(ProfileType.DYSLEXIA))
        dyscalculia = theme_for(resolve_for_profile(ProfileType.DYSCALCULIA))
        assert dyslexia.spacing == 2
        assert dyscalculia.plain_markup is True
        assert dyslexia.text == PALETTES[ColorTheme.SEPIA]["text"]


class TestRenderers:

    @pytest.mark.parametrize("mode", [ViewMode.READ, ViewMode.WATCH, ViewMode.LISTEN, ViewMode.FLASHCARDS])
    def test_static_views_render(self, document, mode):
        console = _console()
        render_view(console, mode, document, resolve_for_profile(ProfileType.ADHD))
        assert console.export_text().strip()

    def test_reader_shows_steps_and_visual_aid(self, document):
        console = _console()
        render_view(console, ViewMode.READ, document, resolve_for_profile(ProfileType.ADHD))
        text = console.export_text()
        assert "Count carbon atoms" in text
        assert "🌱" in text

    def test_hidden_images(self, document):
        console = _console()
        settings = resolve_custom(overrides={"showImages": False})
        render_view(console, ViewMode.WATCH, document, settings)
        assert "☀️" not in console.export_text()

    def test_mindmap_lists_orphans(self, document):
        console = _console()
        render_view(console, ViewMode.MINDMAP, document, resolve_for_profile(ProfileType.AUTISM))
        text = console.export_text()
        assert "Inputs" in text
        assert "Stray" in text.split("Not connected to the map:")[1]

    def test_collapsed_nodes_hide_children(self, document):
        index = MindmapIndex(document.mindmap)
        console = _console()
        console.print(mindmap_tree(document, index, resolve_for_profile(ProfileType.ADHD)))
        collapsed = console.export_text()
        assert "Sunlight" not in collapsed

        expansion = ExpansionState.initial(index)
        expansion.expand_all(index)
        console = _console()
        console.print(mindmap_tree(document, index, resolve_for_profile(ProfileType.ADHD), expansion))
        assert "Sunlight" in console.export_text()

    def test_practice_grades_answers(self, document):
        console = _console()
        results = run_practice(
            console, document, resolve_for_profile(ProfileType.DYSCALCULIA),
            ask=lambda prompt, choices: "3",
        )
        assert [r.correct for r in results] == [True]
        assert "Score: 1/1" in console.export_text()
