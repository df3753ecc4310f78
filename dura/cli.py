"""CLI entry point for Dura."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress
from rich.syntax import Syntax
from rich.table import Table

from dura.blocks import parse_markdown, render_markdown
from dura.config import DuraConfig, load_config
from dura.config.loader import DEFAULT_CONFIG_TEMPLATE
from dura.importer import DocumentImportError, ImportResult, ImportService
from dura.importer import formats
from dura.ocr import OCRUnavailable, create_text_recognizer
from dura.output import NoteWriter
from dura.transcription import TranscriptionUnavailable, create_transcriber

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="dura",
    help="Import documents as markdown notes and inspect their block structure.",
)

config_app = typer.Typer(help="Manage Dura configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: DuraConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def configure_logging(cfg: DuraConfig) -> None:
    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(JsonLineFormatter())
    else:
        handler = RichHandler(show_path=False, rich_tracebacks=True)
    logging.basicConfig(
        level=_LOG_LEVELS[cfg.log_level],
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _get_config() -> DuraConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to dura.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    configure_logging(_config)


def _build_service(cfg: DuraConfig) -> ImportService:
    """Import service with whatever OCR / transcription is available."""
    try:
        recognizer = create_text_recognizer(cfg.ocr)
    except OCRUnavailable as e:
        logger.warning("OCR disabled: %s", e)
        recognizer = None
    try:
        transcriber = create_transcriber(cfg.transcription)
    except TranscriptionUnavailable as e:
        logger.warning("transcription disabled: %s", e)
        transcriber = None
    return ImportService(config=cfg.imports, recognizer=recognizer, transcriber=transcriber)


def _import(path: Path, cfg: DuraConfig, show_progress: bool = False) -> ImportResult:
    service = _build_service(cfg)
    try:
        if not show_progress:
            return asyncio.run(service.import_file(path))
        with Progress(transient=True) as progress:
            task = progress.add_task(f"Importing {path.name}", total=1.0)
            return asyncio.run(
                service.import_file(path, lambda f: progress.update(task, completed=f))
            )
    except DocumentImportError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command("import")
def import_(
    file: Path = typer.Argument(..., help="Document to import"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output directory"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without writing"),
) -> None:
    """Import a document and write it as a markdown note."""
    cfg = _get_config()
    if output:
        cfg = cfg.model_copy(update={"output": cfg.output.model_copy(update={"base_dir": output})})

    result = _import(file, cfg, show_progress=True)
    dest = NoteWriter(cfg.output).write(result, dry_run=dry_run)

    panel_text = (
        f"[bold]{result.title}[/bold]\n\n"
        f"[dim]Source:[/dim]  {result.source_format.value}\n"
        f"[dim]MIME:[/dim]    {result.mime_type}\n"
        f"[dim]Length:[/dim]  {len(result.body)} chars\n"
        f"[dim]OCR:[/dim]     {'yes' if result.ocr_text else 'no'}"
    )
    rprint(Panel(panel_text, title="Imported", border_style="blue"))
    if dry_run:
        rprint(f"[yellow](dry run)[/yellow] would write {dest}")
    else:
        rprint(f"[green]Wrote[/green] {dest}")


@app.command()
def blocks(
    file: Path = typer.Argument(..., help="Document to parse into blocks"),
) -> None:
    """Show the block structure of a document."""
    result = _import(file, _get_config())
    parsed = parse_markdown(result.body)

    table = Table(title=f"Blocks ({len(parsed)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Content")
    table.add_column("Metadata", style="yellow")
    for i, block in enumerate(parsed, 1):
        content = block.content if len(block.content) <= 80 else block.content[:77] + "..."
        meta = ", ".join(f"{k}={v}" for k, v in (block.metadata or {}).items())
        table.add_row(str(i), block.display_name, content, meta or "-")
    rprint(table)


@app.command()
def render(
    file: Path = typer.Argument(..., help="Document to normalize"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to file instead of stdout"),
) -> None:
    """Parse a document into blocks and render them back to markdown."""
    result = _import(file, _get_config())
    markdown = render_markdown(parse_markdown(result.body))

    if output is None:
        rprint(Syntax(markdown, "markdown"))
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(markdown + "\n", encoding="utf-8")
    rprint(f"[green]Wrote[/green] {output}")


@app.command("formats")
def list_formats() -> None:
    """List the file types that can be imported."""
    service = ImportService(config=_get_config().imports)
    supported = set(service.supported_extensions())

    table = Table(title="Supported formats")
    table.add_column("Extensions", style="cyan")
    table.add_column("Identifier", style="green")
    table.add_column("MIME type")
    for fmt in formats.all_formats():
        exts = [e for e in fmt.extensions if e in supported]
        if exts:
            table.add_row(", ".join(f".{e}" for e in exts), fmt.identifier, fmt.mime_type)
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default dura.yaml in current directory."""
    target = Path("dura.yaml")
    if target.exists() and not force:
        rprint("[yellow]dura.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
