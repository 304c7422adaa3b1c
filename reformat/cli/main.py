"""
Typer CLI for ReFormat.

Commands:
    reformat open PATH|URL                - Transform a document and view it
    reformat open notes.pdf --profile DYSLEXIA --view mindmap
    reformat open notes.pdf --saved saved_1a2b3c4d --view practice
    reformat open notes.pdf --quiz --save-as "My Falcon"
    reformat quiz                         - Take the sorting ceremony on its own
    reformat profiles list                - List saved profiles
    reformat profiles delete ID           - Delete a saved profile
    reformat validate FILE.json           - Structural check of a generator payload
    reformat about                        - About ReFormat
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from reformat.adaptive.sorting import SortingCeremony, SortingResult
from reformat.audio.pcm import NarrationPlayer, WavFileSink
from reformat.config import AppSettings, get_settings
from reformat.content.artifacts import Artifact, fetch_artifact, load_artifact
from reformat.content.validator import DocumentValidationError, collect_warnings, parse_document
from reformat.core.errors import GenerationError, InputError, InvalidTransitionError, PlaybackError
from reformat.core.profiles import (
    NAMED_PROFILES,
    ProfileType,
    get_faction_description,
    get_faction_name,
)
from reformat.delivery.views import ViewMode, render_header, render_view
from reformat.integrations.gemini_client import GeminiGateway
from reformat.logging import configure_logging
from reformat.session.orchestrator import AppMode, SessionOrchestrator
from reformat.session.profile_store import JsonProfileRepository
from reformat.session.transcript import ExplainSession

app = typer.Typer(
    help="ReFormat: adaptive restructuring of learning material",
    no_args_is_help=True,
)
profiles_app = typer.Typer(help="Manage saved profiles")
app.add_typer(profiles_app, name="profiles")

console = Console()


def _repository(settings: AppSettings) -> JsonProfileRepository:
    return JsonProfileRepository(settings.profiles_path)


def _load_source(source: str, settings: AppSettings) -> Artifact:
    if source.startswith(("http://", "https://")):
        return fetch_artifact(
            source,
            timeout=settings.request_timeout_seconds,
            max_bytes=settings.max_artifact_bytes,
        )
    return load_artifact(Path(source), max_bytes=settings.max_artifact_bytes)


# ========================================
# SORTING CEREMONY
# ========================================

def _run_ceremony() -> SortingResult | None:
    """Ask the sorting questions interactively. None if the learner quits."""
    ceremony = SortingCeremony()
    console.print("[bold magenta]✨ Sorting Ceremony[/bold magenta]  [dim](q to cancel)[/dim]\n")

    while not ceremony.finished:
        question = ceremony.current_question
        total = len(ceremony.questions)
        console.print(f"[dim]Question {ceremony.step + 1} of {total}[/dim]")
        console.print(f"[bold]{question.text}[/bold]")
        for number, option in enumerate(question.options, start=1):
            console.print(f"  {number}. {option.text}")

        choices = [str(i) for i in range(1, len(question.options) + 1)] + ["q"]
        picked = Prompt.ask("Your choice", choices=choices, show_choices=False)
        if picked == "q":
            ceremony.cancel()
            return None
        ceremony.answer(int(picked) - 1)
        console.print()

    result = ceremony.result
    console.print(Panel(
        f"[bold]You belong to... {get_faction_name(result.profile)}[/bold]\n\n"
        f"{get_faction_description(result.profile)}",
        title="The Sorting Hat Has Spoken!",
        border_style="magenta",
    ))
    return result


def _choose_profile(session: SessionOrchestrator) -> str:
    """Prompt for a saved profile, a named profile, or the quiz."""
    table = Table(title="Choose how to learn")
    table.add_column("#", style="dim")
    table.add_column("Profile")
    table.add_column("Faction", style="cyan")

    options: list[str] = []
    for saved in session.saved_profiles:
        options.append(f"saved:{saved.id}")
        table.add_row(str(len(options)), f"{saved.name} (saved)", get_faction_name(saved.base_profile))
    for profile in NAMED_PROFILES:
        options.append(f"profile:{profile.value}")
        table.add_row(str(len(options)), profile.value, get_faction_name(profile))
    options.append("quiz")
    table.add_row(str(len(options)), "Take the sorting quiz", "")

    console.print(table)
    picked = Prompt.ask("Pick one", choices=[str(i) for i in range(1, len(options) + 1)], show_choices=False)
    return options[int(picked) - 1]


# ========================================
# OPEN
# ========================================

async def _open_session(
    session: SessionOrchestrator,
    profile: ProfileType | None,
    saved_id: str | None,
    quiz: bool,
) -> bool:
    choice: str | None = None
    if saved_id:
        choice = f"saved:{saved_id}"
    elif profile:
        choice = f"profile:{profile.value}"
    elif quiz or session.mode == AppMode.QUIZ:
        choice = "quiz"

    while True:
        if choice is None:
            choice = _choose_profile(session)

        if choice.startswith("saved:"):
            wanted = choice.split(":", 1)[1]
            saved = next((p for p in session.saved_profiles if p.id == wanted), None)
            if saved is None:
                console.print(f"[red]No saved profile with id {wanted}[/red]")
                return False
            status = f"Restructuring for {saved.name}..."
            with console.status(status):
                ok = await session.select_saved(saved)
        elif choice.startswith("profile:"):
            chosen = ProfileType(choice.split(":", 1)[1])
            with console.status(f"Restructuring for {get_faction_name(chosen)}..."):
                ok = await session.select_profile(chosen)
        else:
            if session.mode == AppMode.SELECT_PROFILE:
                session.start_quiz()
            result = _run_ceremony()
            if result is None:
                session.cancel_quiz()
                choice = None
                continue
            with console.status(f"Restructuring for {get_faction_name(result.profile)}..."):
                ok = await session.complete_quiz(result)

        if ok:
            return True

        console.print(f"[red]{session.error}[/red]")
        session.dismiss_error()
        if not typer.confirm("Try again with a different profile?", default=True):
            return False
        choice = None


async def _explain(explain: ExplainSession) -> None:
    console.print(f"[cyan]Tutor:[/cyan] {explain.transcript.messages[0].text}")
    console.print("[dim](empty line to finish)[/dim]")
    while True:
        text = Prompt.ask("[bold]You[/bold]", default="", show_default=False)
        if not text.strip():
            return
        try:
            with console.status("Thinking..."):
                reply = await explain.send(text)
        except GenerationError as e:
            console.print(f"[red]The tutor could not answer: {e}[/red]")
            continue
        console.print(f"[cyan]Tutor:[/cyan] {reply.text}")


async def _narrate(session: SessionOrchestrator, path: Path) -> None:
    """Synthesize the audio script and play it into a WAV file."""
    try:
        with console.status("Recording narration..."):
            clip = await session.narration()
        NarrationPlayer(WavFileSink(path), speed=session.active_settings.customizations.tts_speed).play(clip)
    except (GenerationError, PlaybackError) as e:
        console.print(f"[red]Narration unavailable: {e}[/red]")
        return
    console.print(f"[green]Narration saved to {path}[/green] [dim]({clip.duration:.0f}s)[/dim]")


async def _run_open(
    settings: AppSettings,
    artifact: Artifact,
    profile: ProfileType | None,
    saved_id: str | None,
    quiz: bool,
    views: list[ViewMode],
    overrides: list[tuple[str, str]],
    dark: bool,
    save_as: str | None,
    explain: bool,
    narrate: Path | None = None,
) -> bool:
    async with GeminiGateway(settings) as gateway:
        session = SessionOrchestrator(gateway, _repository(settings))
        session.capture(artifact)

        if not await _open_session(session, profile, saved_id, quiz):
            return False

        for field_name, value in overrides:
            session.update_settings(field_name, value)
        if dark:
            session.toggle_dark_mode()

        render_header(console, session.document, session.active_settings)
        for warning in session.warnings:
            console.print(f"[yellow]⚠ {warning.message}[/yellow]")
        for view in views:
            render_view(console, view, session.document, session.active_settings, session.mindmap)

        if narrate:
            await _narrate(session, narrate)

        if explain:
            await _explain(session.explain_session())

        if save_as:
            saved = session.save_profile(save_as)
            console.print(f"[green]Faction Profile saved![/green] [dim]{saved.id}[/dim]")
        return True


def _parse_overrides(values: list[str]) -> list[tuple[str, str]]:
    pairs = []
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected KEY=VALUE, got {item!r}", param_hint="--set")
        pairs.append((key.strip(), value.strip()))
    return pairs


@app.command("open")
def open_document(
    source: str = typer.Argument(..., help="File path or http(s) URL of the learning material"),
    profile: ProfileType | None = typer.Option(
        None, "--profile", "-p", case_sensitive=False, help="Use a named profile"
    ),
    saved: str | None = typer.Option(None, "--saved", "-s", help="Use a saved profile by id"),
    quiz: bool = typer.Option(False, "--quiz", "-q", help="Take the sorting quiz first"),
    view: list[ViewMode] = typer.Option(
        [ViewMode.READ], "--view", "-v", help="View(s) to show, in order"
    ),
    set_values: list[str] = typer.Option(
        [], "--set", help="Customization override, e.g. fontSize=text-xl (repeatable)"
    ),
    dark: bool = typer.Option(False, "--dark", help="Toggle dark mode"),
    save_as: str | None = typer.Option(None, "--save-as", help="Save the active settings under a name"),
    explain: bool = typer.Option(False, "--explain", help="Explain the topic back to a tutor"),
    narrate: Path | None = typer.Option(
        None, "--narrate", help="Write the narrated audio script to a WAV file"
    ),
) -> None:
    """Transform a document for a learner profile and show it."""
    if sum(bool(x) for x in (profile, saved, quiz)) > 1:
        raise typer.BadParameter("Use only one of --profile, --saved, --quiz")

    settings = get_settings()
    if not settings.has_gemini_configured():
        console.print("[red]No Gemini API key configured. Set GEMINI_API_KEY.[/red]")
        raise typer.Exit(code=1)

    overrides = _parse_overrides(set_values)
    try:
        artifact = _load_source(source, settings)
    except InputError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    try:
        ok = asyncio.run(
            _run_open(
                settings, artifact, profile, saved, quiz, view, overrides, dark, save_as, explain, narrate
            )
        )
    except (InvalidTransitionError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    if not ok:
        raise typer.Exit(code=1)


# ========================================
# QUIZ / PROFILES
# ========================================

@app.command("quiz")
def quiz_command() -> None:
    """Take the sorting ceremony and see your faction."""
    if _run_ceremony() is None:
        console.print("[dim]Sorting ceremony cancelled.[/dim]")


@profiles_app.command("list")
def profiles_list() -> None:
    """List saved profiles."""
    profiles = _repository(get_settings()).load()
    if not profiles:
        console.print("[dim]No saved profiles yet. Use `reformat open ... --save-as NAME`.[/dim]")
        return

    table = Table(title="Saved Profiles")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Faction", style="cyan")
    table.add_column("Font")
    table.add_column("Theme")
    for p in profiles:
        c = p.customizations
        table.add_row(
            p.id,
            p.name,
            get_faction_name(p.base_profile),
            f"{c.font_family.value} / {c.font_size.value}",
            p.effective_color_theme.value,
        )
    console.print(table)


@profiles_app.command("delete")
def profiles_delete(settings_id: str = typer.Argument(..., help="Saved profile id")) -> None:
    """Delete a saved profile."""
    repository = _repository(get_settings())
    profiles = repository.load()
    remaining = [p for p in profiles if p.id != settings_id]
    if len(remaining) == len(profiles):
        console.print(f"[red]No saved profile with id {settings_id}[/red]")
        raise typer.Exit(code=1)
    repository.save(remaining)
    console.print(f"[green]Deleted {settings_id}[/green]")


# ========================================
# VALIDATE / ABOUT
# ========================================

@app.command("validate")
def validate(path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Payload JSON file")) -> None:
    """Check a saved generator payload against the content model."""
    try:
        document = parse_document(path.read_bytes())
    except DocumentValidationError as e:
        table = Table(title=f"{len(e.issues)} issue(s)")
        table.add_column("Kind", style="red")
        table.add_column("Path", style="cyan")
        table.add_column("Message")
        for issue in e.issues:
            table.add_row(issue.kind.value, issue.path or "(root)", issue.message)
        console.print(table)
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Valid:[/green] {document.title}")
    console.print(json.dumps({
        "blocks": len(document.blocks),
        "slides": len(document.slides),
        "activities": len(document.activities),
        "mindmap": len(document.mindmap),
        "flashcards": len(document.flashcards),
    }))
    for warning in collect_warnings(document):
        console.print(f"[yellow]⚠ {warning.kind.value} at {warning.path}: {warning.message}[/yellow]")


@app.command("about")
def about() -> None:
    """About ReFormat."""
    console.print(Panel(
        "ReFormat restructures learning material for how you learn.\n\n"
        "Upload notes, a worksheet or a page of a textbook. Pick a learner profile "
        "or take the sorting quiz, and get the same material as an immersive reader, "
        "slides, an audio script, practice questions, a mind map and flashcards.",
        title="About ReFormat",
        border_style="cyan",
    ))


# ========================================
# Entry Point
# ========================================

def main() -> None:
    """CLI entry point."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)
    logger.debug(f"Data directory: {settings.data_dir}")
    app()


if __name__ == "__main__":
    main()
