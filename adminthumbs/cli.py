"""CLI commands for adminthumbs."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from adminthumbs.settings import Settings
from adminthumbs.thumbnails import ResizeOptions, ThumbnailCache, ThumbnailGenerator

console = Console()


def get_settings(config: str | None, output_dir: str | None) -> Settings:
    settings = Settings.from_yaml(Path(config)) if config else Settings()
    if output_dir:
        settings.output_dir = Path(output_dir)
    return settings


@click.group()
@click.option("--config", "-c", default=None, help="YAML settings file")
@click.option("--output-dir", "-o", default=None, help="Output directory")
@click.option("--log-level", default=None, help="Logging level (default from settings)")
@click.pass_context
def main(
    ctx: click.Context, config: str | None, output_dir: str | None, log_level: str | None
) -> None:
    """adminthumbs - Output thumbnail service CLI."""
    ctx.ensure_object(dict)
    settings = get_settings(config, output_dir)
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    ctx.obj["settings"] = settings


@main.command()
@click.option("--host", default="127.0.0.1", help="Host to bind")
@click.option("--port", "-p", default=8000, help="Port to bind")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Start the thumbnail server."""
    import uvicorn

    from adminthumbs.api import create_app

    settings: Settings = ctx.obj["settings"]
    app = create_app(settings)

    console.print(f"[green]Starting server at http://{host}:{port}[/green]")
    console.print(f"[dim]Output directory: {settings.resolve_output_dir()}[/dim]")
    uvicorn.run(app, host=host, port=port)


# Thumbnails command group


@main.group()
def thumbnails() -> None:
    """Manage the thumbnail cache."""
    pass


@thumbnails.command("generate")
@click.argument("paths", nargs=-1)
@click.option("--width", "-w", type=float, default=None, help="Bounding width")
@click.option("--height", "-h", type=float, default=None, help="Bounding height (0 = auto)")
@click.option("--quality", "-q", type=float, default=None, help="JPEG quality")
@click.option("--force", "-f", is_flag=True, help="Regenerate fresh thumbnails")
@click.pass_context
def thumbnails_generate(
    ctx: click.Context,
    paths: tuple[str, ...],
    width: float | None,
    height: float | None,
    quality: float | None,
    force: bool,
) -> None:
    """Generate thumbnails for files in the output directory (default: all)."""
    settings: Settings = ctx.obj["settings"]
    output_dir = settings.resolve_output_dir()
    if not output_dir.is_dir():
        raise click.ClickException(f"Output directory not found: {output_dir}")

    generator = ThumbnailGenerator(ThumbnailCache(config=settings.thumbnails))
    options = ResizeOptions.normalize(width, height, quality, config=settings.thumbnails)
    if paths:
        targets = [_relative_to_output(output_dir, p) for p in paths]
    else:
        targets = generator.scan(output_dir)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Generating thumbnails...", total=len(targets))

        def advance(completed: int, total: int) -> None:
            progress.update(task, completed=completed)

        result = asyncio.run(
            generator.generate(output_dir, targets, options, force=force, progress_callback=advance)
        )

    table = Table(title="Thumbnail Results")
    table.add_column("Generated", justify="right", style="green")
    table.add_column("Fresh", justify="right", style="dim")
    table.add_column("Failed", justify="right", style="red")
    table.add_row(str(result.generated), str(result.skipped), str(result.failed))
    console.print(table)

    if result.errors:
        for rel_path, error in result.errors[:5]:
            console.print(f"[red]  Error: {rel_path}: {error}[/red]")
        if len(result.errors) > 5:
            console.print(f"[red]  ... and {len(result.errors) - 5} more[/red]")


@thumbnails.command("stats")
@click.pass_context
def thumbnails_stats(ctx: click.Context) -> None:
    """Show thumbnail cache statistics."""
    settings: Settings = ctx.obj["settings"]
    stats = ThumbnailCache(config=settings.thumbnails).get_stats(settings.resolve_output_dir())

    console.print("[bold]Thumbnail Statistics[/bold]")
    console.print(f"  Total: {stats.total_count}")
    console.print(f"  Size: {_format_bytes(stats.total_size_bytes)}")


def _relative_to_output(output_dir: Path, path: str) -> str:
    """Turn an absolute path inside the output directory into a relative one.

    Anything else is passed through for the generator to validate.
    """
    candidate = Path(path)
    if not candidate.is_absolute():
        return path
    try:
        return candidate.resolve().relative_to(output_dir.resolve()).as_posix()
    except ValueError:
        return path


def _format_bytes(size: float) -> str:
    """Format bytes to human readable."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


if __name__ == "__main__":
    main()
