"""
sketchback CLI.

Command-line interface for unpacking, decrypting and decompiling project
backups.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.config import get_config
from .core.exceptions import SketchbackError
from .core.logging import setup_logging

app = typer.Typer(
    name="sketchback",
    help="Recover Android layouts and activity sources from Sketchware backups",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"sketchback v{__version__}")
        raise typer.Exit()


def _fail(error: SketchbackError) -> None:
    console.print(f"\n[bold red]✗ {type(error).__name__}[/bold red]")
    console.print(str(error))
    raise typer.Exit(1)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
) -> None:
    """sketchback: Sketchware backup to Android sources."""
    config = get_config()
    if verbose:
        config = config.model_copy(update={"log_level": "DEBUG"})
    setup_logging(config)


@app.command()
def extract(
    backup: Path = typer.Argument(
        ...,
        help="Backup file to unpack",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    output: Path = typer.Option(..., "--output", "-o", help="Folder to write the six sections to"),
    no_decrypt: bool = typer.Option(False, "--no-decrypt", help="Write sections exactly as stored"),
) -> None:
    """Unpack a backup into one file per section."""
    from .services.unpacking import decrypt_project, unpack, write_folder

    try:
        raw = unpack(backup)
        project = raw if no_decrypt else decrypt_project(raw)
        written = write_folder(project, output)
    except SketchbackError as e:
        _fail(e)

    table = Table(title="Sections")
    table.add_column("Section", style="cyan")
    table.add_column("Size", justify="right")
    for path in written:
        table.add_row(path.name, f"{path.stat().st_size} B")
    console.print(table)
    console.print(f"\n[bold green]✓ Extracted to[/bold green] {output}")


@app.command()
def decrypt(
    file: Path = typer.Argument(
        ...,
        help="Section file to decrypt",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    output: Path = typer.Option(..., "--output", "-o", help="Where to write the plaintext"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing output file"),
) -> None:
    """Decrypt a single section file. Plaintext input is copied unchanged."""
    from .services.unpacking import decrypt_if_needed, looks_encrypted

    if output.exists() and not force:
        console.print(f"[red]Error: {output} exists (use --force to overwrite)[/red]")
        raise typer.Exit(1)

    data = file.read_bytes()
    try:
        text = decrypt_if_needed(data, section=file.name)
    except SketchbackError as e:
        _fail(e)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    state = "decrypted" if looks_encrypted(data) else "already plaintext, copied"
    console.print(f"[bold green]✓[/bold green] {file.name}: {state} → {output}")


@app.command()
def generate(
    source: Path = typer.Argument(
        ...,
        help="Backup file or extracted section folder",
        exists=True,
        resolve_path=True,
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output directory"),
    activity: List[str] = typer.Option([], "--activity", "-a", help="Only this activity (repeatable)"),
    layout: List[str] = typer.Option([], "--layout", "-l", help="Only this layout (repeatable)"),
    layout_only: bool = typer.Option(False, "--layout-only", help="Generate layouts only"),
    java_only: bool = typer.Option(False, "--java-only", help="Generate sources only"),
) -> None:
    """Generate layout XML and activity sources from a backup."""
    from .services.decompile import DecompileInput, DecompileService
    from .storage import LocalStorageBackend

    output_dir = output or get_config().output.base_path
    if output_dir.exists():
        kind = "file" if output_dir.is_file() else "folder"
        console.print(f"[red]Error: {output_dir} already exists as a {kind}[/red]")
        raise typer.Exit(1)

    console.print(Panel.fit(
        "[bold blue]sketchback[/bold blue]\n"
        "Backup → Layouts + Activities",
        border_style="blue",
    ))
    console.print(f"\n[bold]Input:[/bold] {source}")
    console.print(f"[bold]Output:[/bold] {output_dir}\n")

    service = DecompileService(LocalStorageBackend(output_dir))
    try:
        result = service.decompile(DecompileInput(
            source=source,
            activities=activity,
            layouts=layout,
            layout_only=layout_only,
            java_only=java_only,
        ))
    except SketchbackError as e:
        _fail(e)

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    data = result.data
    table = Table(title=f"Generated for {data.package_name}")
    table.add_column("Kind", style="cyan")
    table.add_column("File", style="green")
    for key in data.layout_keys:
        table.add_row("layout", key)
    for key in data.source_keys:
        table.add_row("source", key)
    console.print(table)
    console.print(
        f"\n[bold green]✓ {len(data.keys)} file(s) written[/bold green] "
        f"in {result.metadata.get('duration_ms', 0):.0f} ms"
    )


@app.command()
def config() -> None:
    """Show the current configuration."""
    cfg = get_config()

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", cfg.log_level)
    table.add_row("Cipher Key", cfg.decoding.cipher_key)
    table.add_row("Cipher IV", cfg.decoding.cipher_iv)
    table.add_row("Skipped View Extensions", ", ".join(cfg.decoding.skipped_view_extensions) or "None")
    table.add_row("Output Path", str(cfg.output.base_path))
    table.add_row("Layout Dir", cfg.output.layout_dir)
    table.add_row("Source Dir", cfg.output.source_dir)

    console.print(table)

    console.print("\n[dim]Configure via environment variables:[/dim]")
    console.print("  SKB_LOG_LEVEL, SKB_OUTPUT_PATH, SKB_LAYOUT_DIR, SKB_SOURCE_DIR")
    console.print("  SKB_CIPHER_KEY, SKB_CIPHER_IV")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
