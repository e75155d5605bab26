"""Command line interface for findhighlight."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from findhighlight.config import HighlightConfig
from findhighlight.highlight.locator import iter_match_records, locate_matches
from findhighlight.highlight.pattern import InvalidPatternError, compile_query
from findhighlight.highlight.session import HighlightSession
from findhighlight.models import Pattern
from findhighlight.rendering.document import RenderedDocument, StaticQueryInput
from findhighlight.utils.files import iter_text_paths, read_text
from findhighlight.utils.text import join_lines, split_lines
from findhighlight.web.app import app as web_app


console = Console()
app = typer.Typer(help="findhighlight - highlight search matches inside rendered markup")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _compile_or_fail(query: str) -> Optional[Pattern]:
    try:
        return compile_query(query)
    except InvalidPatternError as exc:
        raise typer.BadParameter(str(exc), param_hint="--query") from exc


def _build_config(
    start_marker: Optional[str],
    end_marker: Optional[str],
    tab_width: Optional[int],
    legacy_tabs: bool,
) -> HighlightConfig:
    try:
        base = HighlightConfig.from_env()
        return HighlightConfig(
            start_marker=start_marker if start_marker is not None else base.start_marker,
            end_marker=end_marker if end_marker is not None else base.end_marker,
            tab_width=tab_width if tab_width is not None else base.tab_width,
            legacy_tabs=legacy_tabs or base.legacy_tabs,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _viewport_height(first: int, last: Optional[int]) -> Optional[int]:
    if last is None:
        return None
    if last < first:
        raise typer.BadParameter(f"--last ({last}) must not be before --first ({first})")
    return last - first + 1


@app.command()
def highlight(
    inputs: List[Path] = typer.Argument(
        ..., help="Text files or directories to scan.", exists=True, resolve_path=True
    ),
    query: str = typer.Option(..., "--query", "-q", help="Literal text or /regex/flags"),
    lexer: Optional[str] = typer.Option(None, help="Pygments lexer used to render lines"),
    first: int = typer.Option(0, help="First visible line (0-based)"),
    last: Optional[int] = typer.Option(None, help="Last visible line (inclusive)"),
    tab_width: Optional[int] = typer.Option(None, help="Spaces per rendered tab"),
    legacy_tabs: bool = typer.Option(False, "--legacy-tabs", help="Shift every match by the line's total tab expansion"),
    start_marker: Optional[str] = typer.Option(None, help="Markup opening a highlight"),
    end_marker: Optional[str] = typer.Option(None, help="Markup closing a highlight"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the rendered markup of the visible lines with matches highlighted."""
    _setup_logging(verbose)
    if _compile_or_fail(query) is None:
        console.print("[yellow]Empty query, nothing to highlight.[/yellow]")
        return

    config = _build_config(start_marker, end_marker, tab_width, legacy_tabs)
    height = _viewport_height(first, last)

    paths = list(iter_text_paths(inputs))
    if not paths:
        console.print("[yellow]No files found.[/yellow]")
        return

    total = 0
    for path in paths:
        try:
            document = RenderedDocument(
                read_text(path), lexer=lexer, tab_width=config.tab_width, viewport_height=height
            )
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--lexer") from exc
        document.scroll_to(first)

        session = HighlightSession(document, StaticQueryInput(query), config)
        session.start()
        count = session.apply_highlights(query)
        total += count

        if len(paths) > 1:
            console.print(f"[bold]{path}[/bold]", soft_wrap=True)
        for markup in document.visible_markup():
            console.print(markup, markup=False, highlight=False, emoji=False, soft_wrap=True)
        session.close()

    console.print(f"Highlighted {total} matches.", highlight=False)


@app.command()
def matches(
    inputs: List[Path] = typer.Argument(
        ..., help="Text files or directories to scan.", exists=True, resolve_path=True
    ),
    query: str = typer.Option(..., "--query", "-q", help="Literal text or /regex/flags"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List every match with its line, offset and rendered width."""
    _setup_logging(verbose)
    pattern = _compile_or_fail(query)
    if pattern is None:
        console.print("[yellow]Empty query, nothing to search.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("File")
    table.add_column("Line")
    table.add_column("Offset")
    table.add_column("Width")
    table.add_column("Match")

    found = 0
    for path in iter_text_paths(inputs):
        lines = split_lines(read_text(path))
        for record in iter_match_records(locate_matches(join_lines(lines), pattern)):
            table.add_row(
                path.name,
                str(record.line_number),
                str(record.raw_offset),
                str(record.rendered_width),
                Text(record.text),
            )
            found += 1

    if not found:
        console.print("[yellow]No matches found.[/yellow]")
        return
    console.print(table)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the web interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    console.print(f"Starting web interface on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":  # pragma: no cover
    app()
