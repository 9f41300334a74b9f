"""
CLI for codesplit.

Provides command-line access to the AST splitter: split a file into chunks,
list supported languages and check grammar installation.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from codesplit.core.chunker import create_splitter
from codesplit.core.config import LoggingConfig, load_config
from codesplit.core.languages import get_language_registry

# Load .env before any configuration is read
load_dotenv()

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="codesplit",
    help="codesplit - AST-driven source chunking",
    add_completion=False,
)


def _configure_logging(config: LoggingConfig) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=config.level.upper(),
        format=config.format,
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def split(
    path: Path = typer.Argument(..., help="Source file to split"),
    language: Optional[str] = typer.Option(
        None, "--language", "-l", help="Language id (detected from the extension if omitted)"
    ),
    no_context: bool = typer.Option(
        False, "--no-context", help="Do not prepend context to chunks"
    ),
    chunk_size: Optional[int] = typer.Option(
        None, "--chunk-size", help="Fallback window size in characters"
    ),
    chunk_overlap: Optional[int] = typer.Option(
        None, "--chunk-overlap", help="Fallback window overlap in characters"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print chunks as JSON"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON configuration file"
    ),
):
    """Split a source file into chunks."""
    if not path.is_file():
        console.print(f"[bold red]Error:[/bold red] Not a file: {path}")
        raise typer.Exit(1)

    try:
        cfg = load_config(config_path)
        _configure_logging(cfg.logging)

        # CLI flags override config values
        if chunk_size is not None:
            cfg.splitter.chunk_size = chunk_size
        if chunk_overlap is not None:
            cfg.splitter.chunk_overlap = chunk_overlap
        if no_context:
            cfg.splitter.include_context = False
        cfg.splitter.__post_init__()

        registry = get_language_registry()
        language_id = language or registry.detect_from_path(path)
        source = path.read_text(encoding="utf-8", errors="replace")

        with create_splitter(cfg, registry=registry) as splitter:
            chunks = splitter.split(source, language_id, str(path))

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps([chunk.to_dict() for chunk in chunks], indent=2))
        return

    if not chunks:
        console.print("[yellow]No chunks produced.[/yellow]")
        return

    table = Table(title=f"Chunks for {path} ({language_id})", border_style="blue")
    table.add_column("#", justify="right")
    table.add_column("Lines", style="cyan", no_wrap=True)
    table.add_column("Node Type", style="magenta")
    table.add_column("Description")
    table.add_column("Context", justify="center")
    table.add_column("Chars", justify="right")

    for index, chunk in enumerate(chunks, start=1):
        table.add_row(
            str(index),
            f"{chunk.start_line}-{chunk.end_line}",
            chunk.node_type,
            chunk.description,
            "yes" if chunk.has_context else "-",
            str(len(chunk.content)),
        )

    console.print(table)
    console.print(f"[bold green]{len(chunks)}[/bold green] chunks")


@app.command()
def languages():
    """List languages with AST support, with their aliases and extensions."""
    registry = get_language_registry()

    table = Table(title="Supported Languages", border_style="blue")
    table.add_column("Language", style="cyan", no_wrap=True)
    table.add_column("Aliases")
    table.add_column("Extensions")
    table.add_column("Global Context", justify="center")

    for config in registry.languages():
        table.add_row(
            config.name,
            ", ".join(config.aliases) or "-",
            ", ".join(config.extensions) or "-",
            "yes" if config.global_context else "-",
        )

    console.print(table)


@app.command()
def check():
    """Load every registered grammar and report which ones work."""
    registry = get_language_registry()

    with console.status("[bold blue]Loading grammars...[/bold blue]"):
        results = registry.check_grammar_setup()

    table = Table(title="Grammar Status", box=None, show_header=True)
    table.add_column("Language", style="cyan")
    table.add_column("Status")
    for name, ok in results.items():
        table.add_row(name, "[green]OK[/green]" if ok else "[red]FAILED[/red]")
    console.print(table)

    failed = [name for name, ok in results.items() if not ok]
    if failed:
        console.print(
            Panel(
                f"Grammars missing or with unknown node kinds: {', '.join(failed)}",
                title="[bold red]Setup Incomplete[/bold red]",
                border_style="red",
                expand=False,
            )
        )
        raise typer.Exit(1)

    console.print("[bold green]All grammars loaded.[/bold green]")


if __name__ == "__main__":
    app()
