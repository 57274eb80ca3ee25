"""
Forne CLI - a dead-simple, scriptable spaced repetition tool.

Usage:
    forne new notes.org cards.json -a org -m speed   # Create a set
    forne learn cards.json                           # Learn (or resume)
    forne learn cards.json -t starred -c 30          # Learn 30 starred cards
    forne test cards.json --no-unstar                # Test yourself
    forne list cards.json -t difficult               # Show difficult cards

Methods and adapters are either the name of a bundled script (see
`forne methods` and `forne adapters`) or a path to your own.
"""

from __future__ import annotations

import random
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from forne.config import Settings, get_settings
from forne.core import CardType, Driver
from forne.errors import ForneError
from forne.methods import resolve_method
from forne.resources import CustomScript, InbuiltScript, RawAdapter, RawMethod, ResourceTable
from forne.scripting import ScriptEngine
from forne.session import Forne

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="forne",
    help="Forne - a dead-simple, scriptable spaced repetition CLI that helps you learn stuff",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

STAR = "⦿ "


def configure_logging(settings: Settings) -> None:
    """Replace loguru's default sink with the configured ones."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="1 MB")


@app.callback()
def main() -> None:
    """Forne: learn anything with a spaced repetition method you can script."""
    configure_logging(get_settings())


@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn recoverable errors into a message and exit code 1."""
    try:
        yield
    except (ForneError, OSError, UnicodeDecodeError) as err:
        logger.debug(f"Command failed: {err!r}")
        err_console.print(Text(f"Error: {err}", style="bold red"))
        raise typer.Exit(code=1) from err


def confirm(message: str) -> bool:
    try:
        return Confirm.ask(escape(message), default=False, console=console)
    except EOFError:
        return False


def method_from_string(value: str, resources: ResourceTable, settings: Settings) -> RawMethod:
    """
    Interpret a --method argument.

    Bundled names win. Anything else is a path to a custom script, named
    `<owner>/<filename>` so scripts from different authors cannot collide.
    """
    if resources.is_inbuilt_method(value):
        return InbuiltScript(value)
    path = Path(value)
    body = path.read_text(encoding="utf-8")
    return CustomScript(name=f"{settings.custom_method_owner}/{path.name}", body=body)


def method_for_set(
    value: str | None, forne: Forne, resources: ResourceTable, settings: Settings
) -> RawMethod:
    """
    The --method argument, or else the method the set was made with.

    Raises:
        ForneError: If the set's method is custom, since only its name is stored.
    """
    if value is not None:
        return method_from_string(value, resources, settings)
    recorded = forne.card_set.method
    if resources.is_inbuilt_method(recorded):
        return InbuiltScript(recorded)
    raise ForneError(
        f"this set uses the custom method '{recorded}'; pass its script with --method"
    )


def adapter_from_string(value: str, resources: ResourceTable) -> RawAdapter:
    if resources.is_inbuilt_adapter(value):
        return InbuiltScript(value)
    path = Path(value)
    return CustomScript(name=path.name, body=path.read_text(encoding="utf-8"))


def _rng(settings: Settings) -> random.Random | None:
    if settings.random_seed is None:
        return None
    return random.Random(settings.random_seed)


def _load(set_file: Path, settings: Settings, resources: ResourceTable) -> Forne:
    data = set_file.read_bytes()
    return Forne.from_json(data, resources=resources, rng=_rng(settings))


def _save(set_file: Path, forne: Forne, settings: Settings) -> None:
    set_file.write_text(forne.save_set(indent=settings.json_indent), encoding="utf-8")


def drive(driver: Driver, forne: Forne, set_file: Path, settings: Settings) -> int:
    """
    Show cards and collect responses until the session ends.

    The set is saved before every card and again on the way out, so at most
    the card on screen is lost if the process dies. End of input stops the
    session with progress kept.

    Returns:
        Number of cards reviewed
    """
    try:
        card = driver.first()
        while card is not None:
            _save(set_file, forne, settings)

            prefix = STAR if card.starred else ""
            console.print(Text(f"{prefix}Q: {card.question}", style="yellow"))
            try:
                Prompt.ask("[dim]Press Enter to reveal[/dim]", default="", show_default=False, console=console)
            except EOFError:
                break
            console.print(Text(f"A: {card.answer}", style="green"))

            try:
                response = Prompt.ask(
                    "How did you do?",
                    choices=list(driver.allowed_responses()),
                    console=console,
                )
            except EOFError:
                break

            if console.is_terminal:
                console.clear()
            else:
                console.print("---")

            card = driver.next(response)
    finally:
        _save(set_file, forne, settings)

    return driver.get_count()


# =============================================================================
# Set Commands
# =============================================================================


@app.command()
def new(
    source: Annotated[Path, typer.Argument(metavar="INPUT", help="Document to create the set from")],
    output: Annotated[Path, typer.Argument(help="File to write the new set to")],
    adapter: Annotated[
        str, typer.Option("--adapter", "-a", help="Bundled adapter name or path to an adapter script")
    ],
    method: Annotated[
        str | None, typer.Option("--method", "-m", help="Bundled method name or path to a method script")
    ] = None,
) -> None:
    """Create a new set from a document."""
    settings = get_settings()
    resources = ResourceTable.bundled()
    with reported_errors():
        raw_method = method_from_string(method or settings.default_method, resources, settings)
        raw_adapter = adapter_from_string(adapter, resources)
        text = source.read_text(encoding="utf-8")
        forne = Forne.new_set(text, raw_adapter, raw_method, resources=resources)
        _save(output, forne, settings)

    console.print(f"[green]New set created with {len(forne.card_set.cards)} card(s)![/]")


@app.command()
def update(
    set_file: Annotated[Path, typer.Argument(metavar="SET", help="The file the set is in")],
    source: Annotated[Path, typer.Argument(metavar="INPUT", help="Document to re-import")],
    adapter: Annotated[
        str, typer.Option("--adapter", "-a", help="Bundled adapter name or path to an adapter script")
    ],
    method: Annotated[
        str | None,
        typer.Option("--method", "-m", help="Method of the set (defaults to the one it records)"),
    ] = None,
) -> None:
    """
    Re-import a document into an existing set.

    Cards whose question appears again are replaced outright, losing their
    progress; new questions become new cards.
    """
    settings = get_settings()
    resources = ResourceTable.bundled()
    with reported_errors():
        forne = _load(set_file, settings, resources)
        raw_method = method_for_set(method, forne, resources, settings)
        raw_adapter = adapter_from_string(adapter, resources)
        summary = forne.update_set(source.read_text(encoding="utf-8"), raw_adapter, raw_method)
        _save(set_file, forne, settings)

    console.print(
        f"[green]Set updated:[/] {summary.added} card(s) added, {summary.replaced} replaced."
    )


@app.command("list")
def list_cards(
    set_file: Annotated[Path, typer.Argument(metavar="SET", help="The file the set is in")],
    target: Annotated[
        CardType, typer.Option("--type", "-t", case_sensitive=False, help="Cards to list")
    ] = CardType.ALL,
) -> None:
    """List the cards in a set."""
    settings = get_settings()
    with reported_errors():
        forne = _load(set_file, settings, ResourceTable.bundled())

    cards = forne.list(target)
    for index, card in enumerate(cards):
        prefix = STAR if card.starred else ""
        console.print(Text(f"{prefix}Q: {card.question}", style="yellow"))
        console.print(Text(f"A: {card.answer}", style="green"))
        if index != len(cards) - 1:
            console.print("---")


@app.command("reset-stars")
def reset_stars(
    set_file: Annotated[Path, typer.Argument(metavar="SET", help="The file the set is in")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")] = False,
) -> None:
    """Unstar every card in a set."""
    settings = get_settings()
    with reported_errors():
        forne = _load(set_file, settings, ResourceTable.bundled())
        if not yes and not confirm("Are you sure you want to unstar every card? This is IRREVERSIBLE!"):
            console.print("Nothing changed.")
            return
        forne.reset_stars()
        _save(set_file, forne, settings)

    console.print("[green]All stars cleared.[/]")


# =============================================================================
# Session Commands
# =============================================================================


@app.command()
def learn(
    set_file: Annotated[Path, typer.Argument(metavar="SET", help="The file the set is in")],
    method: Annotated[
        str | None,
        typer.Option("--method", "-m", help="Bundled method name or path (defaults to the set's method)"),
    ] = None,
    target: Annotated[
        CardType, typer.Option("--type", "-t", case_sensitive=False, help="Cards to learn")
    ] = CardType.ALL,
    count: Annotated[
        int | None, typer.Option("--count", "-c", min=0, help="Stop after this many cards")
    ] = None,
    reset: Annotated[
        bool, typer.Option("--reset", help="Start from scratch, deleting previous learn progress")
    ] = False,
) -> None:
    """Start or resume a learning session."""
    settings = get_settings()
    resources = ResourceTable.bundled()
    with reported_errors():
        forne = _load(set_file, settings, resources)
        raw_method = method_for_set(method, forne, resources, settings)
        if reset:
            if confirm(
                "Are you absolutely certain you want to reset your learn progress? "
                "This action is IRREVERSIBLE!!!"
            ):
                forne.reset_learn(raw_method)
            else:
                console.print("Continuing with previous progress...")

        driver = forne.learn(raw_method).set_target(target)
        if count is not None:
            driver.set_max_count(count)
        reviewed = drive(driver, forne, set_file, settings)

    console.print(f"\n[green]Learn session complete! You reviewed {reviewed} card(s).[/]")


@app.command()
def test(
    set_file: Annotated[Path, typer.Argument(metavar="SET", help="The file the set is in")],
    static: Annotated[
        bool,
        typer.Option("--static", help="Neither star cards you get wrong nor unstar cards you get right"),
    ] = False,
    no_star: Annotated[
        bool, typer.Option("--no-star", help="Do not star cards you get wrong")
    ] = False,
    no_unstar: Annotated[
        bool, typer.Option("--no-unstar", help="Do not unstar cards you get right")
    ] = False,
    target: Annotated[
        CardType, typer.Option("--type", "-t", case_sensitive=False, help="Cards to test")
    ] = CardType.ALL,
    count: Annotated[
        int | None, typer.Option("--count", "-c", min=0, help="Stop after this many cards")
    ] = None,
    reset: Annotated[
        bool, typer.Option("--reset", help="Start a new test, deleting previous test progress")
    ] = False,
) -> None:
    """Start or resume a test."""
    settings = get_settings()
    with reported_errors():
        forne = _load(set_file, settings, ResourceTable.bundled())
        if reset:
            if confirm("Are you sure you want to reset your test progress?"):
                forne.reset_test()
            else:
                console.print("Continuing with previous progress...")

        driver = forne.test().set_target(target)
        if count is not None:
            driver.set_max_count(count)
        if static or no_star:
            driver.no_mark_starred()
        if static or no_unstar:
            driver.no_mark_unstarred()
        reviewed = drive(driver, forne, set_file, settings)

    console.print(f"\n[green]Test complete! You reviewed {reviewed} card(s).[/]")


# =============================================================================
# Bundled Scripts
# =============================================================================


@app.command()
def methods() -> None:
    """List the bundled learning methods."""
    resources = ResourceTable.bundled()
    engine = ScriptEngine.with_helpers()
    table = Table(title="Bundled methods")
    table.add_column("Name", style="cyan")
    table.add_column("Responses")
    for name in resources.method_names():
        # Bundled methods are trusted, a failure here is a bug and propagates
        resolved = resolve_method(InbuiltScript(name), engine, resources)
        table.add_row(name, escape(" / ".join(resolved.responses)))
    console.print(table)


@app.command()
def adapters() -> None:
    """List the bundled adapters."""
    for name in ResourceTable.bundled().adapter_names():
        console.print(f"[cyan]{name}[/]")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
