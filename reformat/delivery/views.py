"""
Terminal views of a transformed document.

One renderer per learning mode:
- read: blocks (immersive reader), with visual aids and math steps
- watch: slides with their narration notes
- listen: the long-form audio script
- practice: quiz activities graded by the answer verifier
- mindmap: the concept tree from the id -> children index
- flashcards: term / definition / mnemonic

Every view styles itself from the *effective* color theme, so colorblind
mode always renders in high contrast.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from rich import box
from rich.console import Console, Group, RenderableType
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.style import Style
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from reformat.content.mindmap import ExpansionState, MindmapIndex
from reformat.content.models import (
    Activity,
    BlockType,
    ContentBlock,
    MindmapNode,
    TransformedDocument,
)
from reformat.core.profiles import get_faction_name
from reformat.core.settings import ColorTheme, FontFamily, FontSize, LineSpacing, UserSettings
from reformat.practice.base import AnswerResult
from reformat.practice.verifier import check_activity


class ViewMode(str, Enum):
    READ = "read"
    WATCH = "watch"
    LISTEN = "listen"
    PRACTICE = "practice"
    MINDMAP = "mindmap"
    FLASHCARDS = "flashcards"


# =============================================================================
# THEMES
# =============================================================================

@dataclass(frozen=True)
class ViewTheme:
    """Palette plus layout derived from one settings record."""

    text: str
    accent: str
    muted: str
    success: str
    error: str
    border: str
    bold_text: bool = False
    spacing: int = 1
    plain_markup: bool = False
    show_images: bool = True


PALETTES: dict[ColorTheme, dict[str, str]] = {
    ColorTheme.DEFAULT: {
        "text": "#1e293b", "accent": "#0ea5e9", "muted": "#64748b",
        "success": "#16a34a", "error": "#dc2626", "border": "#94a3b8",
    },
    ColorTheme.SEPIA: {
        "text": "#5b4636", "accent": "#b45309", "muted": "#8b7355",
        "success": "#4d7c0f", "error": "#b91c1c", "border": "#d6c4a8",
    },
    ColorTheme.DARK: {
        "text": "#e2e8f0", "accent": "#38bdf8", "muted": "#94a3b8",
        "success": "#4ade80", "error": "#f87171", "border": "#475569",
    },
    # Blue/orange instead of green/red for the colorblind palette
    ColorTheme.HIGH_CONTRAST: {
        "text": "#ffffff", "accent": "#ffff00", "muted": "#ffffff",
        "success": "#00bfff", "error": "#ff8c00", "border": "#ffffff",
    },
}

SPACING = {LineSpacing.NORMAL: 0, LineSpacing.RELAXED: 1, LineSpacing.LOOSE: 2}


def theme_for(settings: UserSettings) -> ViewTheme:
    c = settings.customizations
    palette = PALETTES[settings.effective_color_theme]
    return ViewTheme(
        **palette,
        bold_text=c.font_size in (FontSize.XL, FontSize.XXL),
        spacing=SPACING[c.line_spacing],
        plain_markup=c.font_family == FontFamily.MONO,
        show_images=c.show_images,
    )


def _style(color: str, bold: bool = False) -> Style:
    return Style(color=color, bold=bold)


def _body(markup: str, theme: ViewTheme) -> RenderableType:
    if theme.plain_markup:
        return Text(markup, style=_style(theme.text, theme.bold_text))
    return Markdown(markup, style=_style(theme.text, theme.bold_text))


def _gap(console: Console, theme: ViewTheme) -> None:
    for _ in range(theme.spacing):
        console.print()


# =============================================================================
# HEADER
# =============================================================================

def render_header(console: Console, document: TransformedDocument, settings: UserSettings) -> None:
    theme = theme_for(settings)
    title = Text(document.title, style=_style(theme.accent, bold=True))
    subtitle = Text(
        f"{settings.name} · {get_faction_name(settings.base_profile)}",
        style=_style(theme.muted),
    )
    console.print(Panel(Group(title, subtitle), border_style=theme.border, box=box.HEAVY))


# =============================================================================
# READ
# =============================================================================

BLOCK_LABELS = {
    BlockType.VOCABULARY: "Vocabulary",
    BlockType.CHECKPOINT: "Checkpoint",
    BlockType.SUMMARY: "Summary",
    BlockType.MATH: "Step by step",
}


def block_renderable(block: ContentBlock, theme: ViewTheme) -> RenderableType:
    if block.type == BlockType.HEADING:
        return Text(block.content.strip("# "), style=_style(theme.accent, bold=True))

    parts: list[RenderableType] = [_body(block.content, theme)]
    if block.highlight:
        parts.append(Text(f"★ {block.highlight}", style=_style(theme.accent, bold=True)))
    if block.simplification:
        parts.append(Text(f"In short: {block.simplification}", style=_style(theme.muted)))
    for number, step in enumerate(block.step_list, start=1):
        parts.append(_body(f"{number}. {step}", theme))

    if block.type == BlockType.TEXT:
        if theme.show_images and block.visual_aid:
            parts.insert(0, Text(block.visual_aid))
        return Group(*parts)

    title = BLOCK_LABELS.get(block.type, block.type.value.title())
    if theme.show_images and block.visual_aid:
        title = f"{block.visual_aid} {title}"
    return Panel(Group(*parts), title=title, title_align="left", border_style=theme.border)


def render_reader(console: Console, document: TransformedDocument, settings: UserSettings) -> None:
    theme = theme_for(settings)
    for block in document.blocks:
        console.print(block_renderable(block, theme))
        _gap(console, theme)


# =============================================================================
# WATCH / LISTEN
# =============================================================================

def render_slides(console: Console, document: TransformedDocument, settings: UserSettings) -> None:
    theme = theme_for(settings)
    total = len(document.slides)
    for number, slide in enumerate(document.slides, start=1):
        parts: list[RenderableType] = []
        if theme.show_images and slide.visual_cue:
            parts.append(Text(slide.visual_cue, style=_style(theme.accent)))
        parts.append(_body(slide.content, theme))
        if slide.narration:
            parts.append(Text(f"\n🎙 {slide.narration}", style=_style(theme.muted)))
        console.print(Panel(
            Group(*parts),
            title=f"Slide {number} of {total}",
            border_style=theme.border,
            box=box.ROUNDED,
            padding=(1, 2),
        ))
        _gap(console, theme)


def render_listen(console: Console, document: TransformedDocument, settings: UserSettings) -> None:
    theme = theme_for(settings)
    speed = settings.customizations.tts_speed
    console.print(Panel(
        _body(document.audio_script, theme),
        title=f"Audio script · {speed:g}x",
        border_style=theme.border,
        padding=(1, 2),
    ))


# =============================================================================
# PRACTICE
# =============================================================================

def result_panel(result: AnswerResult, settings: UserSettings) -> Panel:
    theme = theme_for(settings)
    color = theme.success if result.correct else theme.error
    content = Text()
    content.append(f"{'◉' if result.correct else '✗'} {result.feedback}", style=_style(color, bold=True))
    if result.explanation:
        content.append(f"\n\n{result.explanation}", style=_style(theme.muted))
    return Panel(content, border_style=color, box=box.HEAVY)


def activity_panel(activity: Activity, number: int, settings: UserSettings) -> Panel:
    theme = theme_for(settings)
    parts: list[RenderableType] = [_body(activity.question, theme)]
    for index, option in enumerate(activity.options or (), start=1):
        parts.append(Text(f"  {index}. {option}", style=_style(theme.text)))
    return Panel(
        Group(*parts),
        title=f"Question {number}",
        title_align="left",
        border_style=theme.accent,
        box=box.HEAVY,
    )


def run_practice(
    console: Console,
    document: TransformedDocument,
    settings: UserSettings,
    ask: Callable[..., str] = Prompt.ask,
) -> list[AnswerResult]:
    """Ask each quiz in turn and grade the chosen option."""
    results: list[AnswerResult] = []
    quizzes = document.quizzes
    if not quizzes:
        console.print(Text("No practice questions for this document.", style=_style(theme_for(settings).muted)))
        return results

    for number, activity in enumerate(quizzes, start=1):
        console.print(activity_panel(activity, number, settings))
        options = activity.options or ()
        choices = [str(i) for i in range(1, len(options) + 1)]
        picked = ask("Your answer", choices=choices)
        result = check_activity(activity, options[int(picked) - 1])
        results.append(result)
        console.print(result_panel(result, settings))

    score = sum(1 for r in results if r.correct)
    console.print(Text(f"Score: {score}/{len(results)}", style=_style(theme_for(settings).accent, bold=True)))
    return results


# =============================================================================
# MINDMAP
# =============================================================================

def mindmap_tree(
    document: TransformedDocument,
    index: MindmapIndex,
    settings: UserSettings,
    expansion: ExpansionState | None = None,
) -> Tree:
    """Rich tree of the reachable forest; collapsed nodes hide their children."""
    theme = theme_for(settings)
    expansion = expansion or ExpansionState.initial(index)
    tree = Tree(Text(document.title, style=_style(theme.accent, bold=True)), guide_style=theme.border)

    stack: list[tuple[Tree, MindmapNode]] = [(tree, root) for root in reversed(index.roots)]
    seen: set[int] = set()

    while stack:
        parent, node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        node_id = node.id

        label = Text(node.label, style=_style(theme.text, bold=index.has_children(node_id)))
        if node.description:
            label.append(f" - {node.description}", style=_style(theme.muted))
        if index.has_children(node_id) and not expansion.is_open(node_id):
            label.append(" [+]", style=_style(theme.accent))
        branch = parent.add(label)

        if expansion.is_open(node_id):
            for child in reversed(index.children_of(node_id)):
                stack.append((branch, child))
    return tree


def render_mindmap(
    console: Console,
    document: TransformedDocument,
    index: MindmapIndex,
    settings: UserSettings,
    expansion: ExpansionState | None = None,
) -> None:
    theme = theme_for(settings)
    console.print(mindmap_tree(document, index, settings, expansion))
    if index.orphans:
        names = ", ".join(node.label for node in index.orphans)
        console.print(Text(f"Not connected to the map: {names}", style=_style(theme.muted)))


# =============================================================================
# FLASHCARDS
# =============================================================================

def render_flashcards(console: Console, document: TransformedDocument, settings: UserSettings) -> None:
    theme = theme_for(settings)
    table = Table(box=box.ROUNDED, border_style=theme.border, show_lines=theme.spacing > 0)
    table.add_column("Term", style=_style(theme.accent, bold=True))
    table.add_column("Definition", style=_style(theme.text, theme.bold_text))
    table.add_column("Memory aid", style=_style(theme.muted))
    for card in document.flashcards:
        table.add_row(card.front, card.back, card.mnemonic or "")
    console.print(table)


def render_view(
    console: Console,
    mode: ViewMode,
    document: TransformedDocument,
    settings: UserSettings,
    index: MindmapIndex | None = None,
) -> list[AnswerResult] | None:
    """Dispatch to the renderer for one view mode."""
    mode = ViewMode(mode)
    if mode == ViewMode.READ:
        render_reader(console, document, settings)
    elif mode == ViewMode.WATCH:
        render_slides(console, document, settings)
    elif mode == ViewMode.LISTEN:
        render_listen(console, document, settings)
    elif mode == ViewMode.PRACTICE:
        return run_practice(console, document, settings)
    elif mode == ViewMode.MINDMAP:
        render_mindmap(console, document, index or MindmapIndex(document.mindmap), settings)
    elif mode == ViewMode.FLASHCARDS:
        render_flashcards(console, document, settings)
    return None
