"""CLI interface for devglosario using Typer."""

from __future__ import annotations

import asyncio
import logging
import sys
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from devglosario import __version__
from devglosario.terms.base import DictionaryLoadError, TermProvider
from devglosario.terms.sqlite_store import DB_ENV_VAR, SqliteTermStore


class OutputFormat(str, Enum):
    """How ``translate`` prints its result."""
    text = "text"
    json = "json"
    markdown = "markdown"


app = typer.Typer(
    name="devglosario",
    help="Translate the comments and strings of code snippets to Spanish.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

_verbose = False
_quiet = False


def _print(msg: str, *, verbose_only: bool = False) -> None:
    """Print status to stderr respecting --verbose/--quiet flags."""
    if _quiet:
        return
    if verbose_only and not _verbose:
        return
    err_console.print(msg)


def _fail(msg: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {msg}")
    return typer.Exit(1)


def _open_store(db: Path | None) -> SqliteTermStore:
    try:
        return SqliteTermStore(db)
    except DictionaryLoadError as e:
        raise _fail(str(e)) from e


def version_callback(value: bool) -> None:
    if value:
        console.print(f"devglosario {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Show extra info (dictionary size, segments).",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only show errors.",
    ),
) -> None:
    """devglosario: English-to-Spanish translation of code comments and strings."""
    global _verbose, _quiet
    _verbose = verbose
    _quiet = quiet

    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


@app.command()
def translate(
    file: Path | None = typer.Argument(
        None, help="Source file to translate. Reads stdin when omitted.",
    ),
    lang: str = typer.Option(
        "plain", "--lang", "-l",
        help="Language tag: js, ts, jsx, tsx, python... Others use fallback.",
    ),
    glossary: list[Path] | None = typer.Option(
        None, "--glossary", "-g",
        help="Glossary TOML file(s) to use instead of the term store.",
    ),
    db: Path | None = typer.Option(
        None, "--db", envvar=DB_ENV_VAR,
        help="Term store path (default ~/.devglosario/terms.db).",
    ),
    no_defaults: bool = typer.Option(
        False, "--no-defaults",
        help="Do not add the built-in developer vocabulary.",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text, "--format", "-f",
        help="Output: text (translated code), json or markdown.",
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o",
        help="Write the result to a file (.json/.md/other) instead of stdout.",
    ),
) -> None:
    """Translate the strings and comments of a code snippet."""
    from devglosario.reporting.formatters import save_result, to_json, to_markdown
    from devglosario.translation.cache import DictionaryCache
    from devglosario.translation.structural import (
        InvalidTranslationRequest,
        translate_structural,
    )

    if file is not None:
        if not file.exists():
            raise _fail(f"File not found: {file}")
        try:
            code = file.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise _fail(f"{file} is not valid UTF-8 text: {e.reason}") from e
    else:
        code = sys.stdin.read()

    store: SqliteTermStore | None = None
    provider: TermProvider
    if glossary:
        from devglosario.terms.toml_file import TomlTermProvider
        provider = TomlTermProvider(*glossary)
    else:
        store = _open_store(db)
        provider = store

    cache = DictionaryCache(provider, include_defaults=not no_defaults)
    try:
        result = asyncio.run(translate_structural(code, lang, cache=cache))
    except InvalidTranslationRequest as e:
        raise _fail(str(e)) from e
    except DictionaryLoadError as e:
        raise _fail(f"Could not load dictionary: {e}") from e
    finally:
        if store is not None:
            store.close()

    _print(
        f"Language: [cyan]{result.language}[/cyan]"
        f"{' (fallback)' if result.fallback_applied else ''}, "
        f"strings: [green]{result.replaced_strings}[/green], "
        f"comments: [green]{result.replaced_comments}[/green]",
        verbose_only=True,
    )

    if output is not None:
        save_result(result, output)
        _print(f"Result saved: [cyan]{output}[/cyan]")
        return

    if output_format == OutputFormat.json:
        typer.echo(to_json(result))
    elif output_format == OutputFormat.markdown:
        typer.echo(to_markdown(result), nl=False)
    else:
        typer.echo(result.code, nl=False)


@app.command()
def languages() -> None:
    """List language tags that have a structural scanner."""
    from devglosario.scanning.registry import registered_tags

    table = Table(title="Registered languages")
    table.add_column("Tag")
    table.add_column("Language", style="cyan")
    table.add_column("Scanner", style="dim")
    for tag, reg in registered_tags().items():
        table.add_row(tag, reg.language, reg.scanner.__name__)
    console.print(table)
    console.print("Any other tag is translated as plain text (fallback).")


@app.command(name="terms-import")
def terms_import(
    glossary: Path = typer.Argument(..., help="Glossary TOML file to import."),
    db: Path | None = typer.Option(None, "--db", envvar=DB_ENV_VAR),
) -> None:
    """Import a glossary TOML file into the term store."""
    from devglosario.terms.toml_file import read_glossary

    if not glossary.exists():
        raise _fail(f"File not found: {glossary}")
    try:
        entries = read_glossary(glossary)
    except DictionaryLoadError as e:
        raise _fail(str(e)) from e

    store = _open_store(db)
    store.put_batch(entries)
    total = store.count()
    store.close()
    console.print(
        f"Imported [green]{len(entries)}[/green] terms ({total} in store)."
    )


@app.command(name="terms-list")
def terms_list(
    db: Path | None = typer.Option(None, "--db", envvar=DB_ENV_VAR),
) -> None:
    """List the terms in the term store."""
    store = _open_store(db)
    try:
        entries = store.all_terms()
    except DictionaryLoadError as e:
        raise _fail(str(e)) from e
    finally:
        store.close()

    if not entries:
        console.print("[yellow]The term store is empty.[/yellow]")
        raise typer.Exit()

    table = Table(title=f"Terms ({len(entries)})")
    table.add_column("Term")
    table.add_column("Translation", style="green")
    table.add_column("Aliases", style="dim")
    for e in entries:
        table.add_row(e.term, e.translation, ", ".join(e.aliases))
    console.print(table)


@app.command(name="terms-count")
def terms_count(
    db: Path | None = typer.Option(None, "--db", envvar=DB_ENV_VAR),
) -> None:
    """Show term store statistics."""
    store = _open_store(db)
    console.print(f"Stored terms: [green]{store.count()}[/green]")
    console.print(f"Store location: [dim]{store.db_path}[/dim]")
    store.close()


@app.command(name="terms-clear")
def terms_clear(
    db: Path | None = typer.Option(None, "--db", envvar=DB_ENV_VAR),
) -> None:
    """Delete every term from the term store."""
    store = _open_store(db)
    deleted = store.clear()
    console.print(f"Cleared [yellow]{deleted}[/yellow] terms.")
    store.close()


if __name__ == "__main__":
    app()
