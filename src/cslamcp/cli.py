"""Command line interface for the CSLA MCP server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from cslamcp.config import AppConfig, EmbeddingSettings
from cslamcp.embedding.client import AzureEmbeddingClient
from cslamcp.embedding.generator import EmbeddingsGenerator, write_embeddings
from cslamcp.library.errors import CorpusUnavailableError, LibraryError
from cslamcp.library.search import ExampleLibrary
from cslamcp.utils.files import has_example_files

LOGGER = logging.getLogger(__name__)

console = Console()
app = typer.Typer(help="CSLA MCP - serve CSLA .NET code examples over MCP")

EXIT_MISSING_FOLDER = 2
EXIT_EMPTY_FOLDER = 3

EXIT_EMBED_MISSING_EXAMPLES = 1
EXIT_EMBED_MISSING_ENDPOINT = 2
EXIT_EMBED_MISSING_KEY = 3
EXIT_EMBED_FAILED = 4


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _resolve_folder(folder: Optional[Path]) -> Path:
    config = AppConfig(examples_path=folder)
    return config.resolve_examples_path(Path.cwd()).resolve()


@app.command()
def serve(
    folder: Optional[Path] = typer.Option(
        None, "--folder", "-f", help="Directory containing the code samples"
    ),
    host: str = typer.Option(AppConfig().host, help="Host interface"),
    port: int = typer.Option(AppConfig().port, help="Server port"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Start the MCP server over HTTP."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter("uvicorn is not installed.") from exc

    _setup_logging(verbose)
    examples_path = _resolve_folder(folder)
    if not examples_path.is_dir():
        console.print(f"[red]Error: The specified folder '{examples_path}' does not exist.[/red]")
        raise typer.Exit(code=EXIT_MISSING_FOLDER)
    if not has_example_files(examples_path):
        console.print(
            f"[red]Error: The specified folder '{examples_path}' does not contain "
            "any .cs or .md files.[/red]"
        )
        raise typer.Exit(code=EXIT_EMPTY_FOLDER)

    from cslamcp.web.app import create_app

    config = AppConfig(examples_path=examples_path, host=host, port=port)
    console.print(f"Starting MCP server on http://{host}:{port}/mcp (examples: {examples_path})")
    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        reload=False,
        log_level="debug" if verbose else "info",
    )


@app.command()
def search(
    query: str = typer.Argument(..., help="Free text with the keywords to look for"),
    folder: Optional[Path] = typer.Option(
        None, "--folder", "-f", help="Directory containing the code samples"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rank code samples by keyword matches."""
    _setup_logging(verbose)
    library = ExampleLibrary(_resolve_folder(folder))
    try:
        results = library.search(query)
    except CorpusUnavailableError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("File")
    table.add_column("Matching words")

    for result in results:
        words = ", ".join(f"{match.word} ({match.count})" for match in result.matching_words)
        table.add_row(str(result.score), result.file_name, words)

    console.print(table)


@app.command()
def fetch(
    file_name: str = typer.Argument(..., help="File name relative to the samples folder"),
    folder: Optional[Path] = typer.Option(
        None, "--folder", "-f", help="Directory containing the code samples"
    ),
) -> None:
    """Print the content of one code sample."""
    library = ExampleLibrary(_resolve_folder(folder))
    try:
        content = library.fetch(file_name)
    except LibraryError as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        raise typer.Exit(code=1)
    typer.echo(content, nl=False)


@app.command()
def embeddings(
    examples_path: Path = typer.Option(
        Path("csla-examples"), "--examples-path", help="Directory containing the code samples"
    ),
    output: Path = typer.Option(
        Path("embeddings.json"), "--output", help="Where to write the embeddings JSON"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Generate embeddings for every code sample via Azure OpenAI."""
    _setup_logging(verbose)
    examples_path = examples_path if examples_path.is_absolute() else Path.cwd() / examples_path
    output = output if output.is_absolute() else Path.cwd() / output

    console.print(f"Examples path: {examples_path}")
    console.print(f"Output path: {output}")

    if not examples_path.is_dir():
        console.print(f"[red]Error: Examples directory not found at {examples_path}[/red]")
        raise typer.Exit(code=EXIT_EMBED_MISSING_EXAMPLES)

    settings = EmbeddingSettings.from_env()
    if not settings.endpoint:
        console.print("[red]Error: AZURE_OPENAI_ENDPOINT environment variable is not set[/red]")
        raise typer.Exit(code=EXIT_EMBED_MISSING_ENDPOINT)
    if not settings.api_key:
        console.print("[red]Error: AZURE_OPENAI_API_KEY environment variable is not set[/red]")
        raise typer.Exit(code=EXIT_EMBED_MISSING_KEY)

    console.print(f"Using Azure OpenAI endpoint: {settings.endpoint}")
    console.print(f"Using embedding model: {settings.model}")

    try:
        with AzureEmbeddingClient(settings) as client:
            generator = EmbeddingsGenerator(client)
            records = generator.generate(examples_path)
        write_embeddings(records, output)
    except Exception as exc:
        LOGGER.exception("Embedding generation failed")
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=EXIT_EMBED_FAILED)

    console.print(
        f"Generated {len(records)} embeddings (failed: {generator.stats.failed}), "
        f"saved to {output}"
    )
