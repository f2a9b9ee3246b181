"""
avswap.cli - Typer CLI entry point.

`avswap run` picks the mode from MODE (or --mode); `avswap extract` and
`avswap merge` run one mode directly.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from avswap import __version__
from avswap.config import AvswapConfig, load_config
from avswap.exceptions import ConfigError, DependencyError, ValidationError
from avswap.ffmpeg import CommandRunner, run_command
from avswap.formats import AUDIO_FORMATS
from avswap.logging import configure_logging
from avswap.validation import check_ffmpeg, validate_directory

app = typer.Typer(
    name="avswap",
    help="Batch audio extraction and audio replacement for video files.\n\n"
    "Extract mode writes each video's audio to <name>_audio.<format> for editing; "
    "merge mode puts the edited audio back as <name>_final.mp4.",
    add_completion=False,
)
console = Console()

USAGE_EXAMPLES = [
    "  Merge mode:    avswap run",
    "  Extract mode:  MODE=extract avswap run",
    "  Custom format: MODE=extract EXTRACT_FORMAT=flac avswap run",
]

DIR_HELP = "Directory with the video files (env: DIR, default: current directory)"
FORMAT_HELP = "Audio format for extraction (env: EXTRACT_FORMAT, default: mp3)"
FFMPEG_HELP = "FFmpeg executable (env: FFMPEG, default: ffmpeg)"
CONFIG_HELP = "YAML config file (default: ./avswap.yaml if present)"


def get_runner() -> CommandRunner:
    """Command runner used to invoke FFmpeg."""
    return run_command


def version_callback(value: bool) -> None:
    if value:
        console.print(f"avswap {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log FFmpeg commands and resolved config"
    ),
) -> None:
    """avswap - batch audio extraction and replacement."""
    configure_logging(verbose)


def print_banner() -> None:
    console.print("╔════════════════════════════════════════════╗")
    console.print("║   Video Audio Merger & Extractor Tool      ║")
    console.print("╚════════════════════════════════════════════╝")


def resolve_config(
    mode: str | None,
    directory: Path | None,
    extract_format: str | None,
    ffmpeg: str | None,
    config_file: Path | None,
) -> AvswapConfig:
    """Build the run config, exiting with status 1 if it is invalid."""
    try:
        config = load_config(
            {
                "mode": mode,
                "directory": directory,
                "extract_format": extract_format,
                "ffmpeg": ffmpeg,
            },
            config_file=config_file,
        )
        config = config.model_copy(update={"directory": validate_directory(config.directory)})
    except ConfigError as e:
        console.print(f"\n[red]Error: {escape(str(e))}[/red]")
        if e.field == "mode":
            console.print("\nUsage examples:")
            for line in USAGE_EXAMPLES:
                console.print(line)
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"\n[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    return config


def run_extract(config: AvswapConfig) -> None:
    from avswap.extract import extract_all

    console.print("\n[bold]=== EXTRACT MODE ===[/bold]")
    console.print(f"Directory: {config.directory}")
    console.print(f"Format: {config.extract_format.upper()}\n")

    try:
        results = extract_all(config, runner=get_runner(), console=console)
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if results["total"]:
        console.print(
            f"[green]✓[/green] Extracted {results['extracted']}, "
            f"failed {results['failed']}, total {results['total']}"
        )


def run_merge(config: AvswapConfig) -> None:
    from avswap.merge import merge_all

    console.print("\n[bold]=== MERGE MODE ===[/bold]")
    console.print(f"Directory: {config.directory}\n")

    results = merge_all(config, runner=get_runner(), console=console)

    if results["total"]:
        console.print("\n=== SUMMARY ===")
        console.print(f"Processed: {results['processed']}")
        console.print(f"Skipped: {results['skipped']}")
        if results["failed"]:
            console.print(f"[red]Failed: {results['failed']}[/red]")
        console.print(f"Total: {results['total']}")


@app.command("run")
def run_mode(
    mode: str | None = typer.Option(
        None, "--mode", "-m", help="extract or merge (env: MODE, default: merge)"
    ),
    directory: Path | None = typer.Option(None, "--dir", "-d", help=DIR_HELP),
    extract_format: str | None = typer.Option(None, "--format", "-f", help=FORMAT_HELP),
    ffmpeg: str | None = typer.Option(None, "--ffmpeg", help=FFMPEG_HELP),
    config_file: Path | None = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
) -> None:
    """Run extract or merge mode, chosen by MODE."""
    print_banner()
    config = resolve_config(mode, directory, extract_format, ffmpeg, config_file)

    if config.mode == "extract":
        run_extract(config)
    else:
        run_merge(config)


@app.command("extract")
def extract_cmd(
    directory: Path | None = typer.Option(None, "--dir", "-d", help=DIR_HELP),
    extract_format: str | None = typer.Option(None, "--format", "-f", help=FORMAT_HELP),
    ffmpeg: str | None = typer.Option(None, "--ffmpeg", help=FFMPEG_HELP),
    config_file: Path | None = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
) -> None:
    """Extract audio from every video into <name>_audio.<format>."""
    print_banner()
    config = resolve_config("extract", directory, extract_format, ffmpeg, config_file)
    run_extract(config)


@app.command("merge")
def merge_cmd(
    directory: Path | None = typer.Option(None, "--dir", "-d", help=DIR_HELP),
    ffmpeg: str | None = typer.Option(None, "--ffmpeg", help=FFMPEG_HELP),
    config_file: Path | None = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
) -> None:
    """Replace the audio of every mp4/mov video that has an edited <name>_audio file."""
    print_banner()
    config = resolve_config("merge", directory, None, ffmpeg, config_file)
    run_merge(config)


@app.command("formats")
def list_formats() -> None:
    """Show supported audio formats, in merge lookup order."""
    table = Table(title="Audio Formats")
    table.add_column("Format", style="cyan")
    table.add_column("Codec", style="green")
    table.add_column("Parameters")

    for fmt in AUDIO_FORMATS.values():
        table.add_row(fmt.name, fmt.codec, " ".join(fmt.extra_params) or "-")

    console.print(table)


@app.command("doctor")
def run_doctor(
    ffmpeg: str = typer.Option("ffmpeg", "--ffmpeg", envvar="FFMPEG", help="FFmpeg executable"),
) -> None:
    """Check that FFmpeg is installed."""
    table = Table(title="Dependency Status")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Version/Details")

    try:
        info = check_ffmpeg(ffmpeg)
    except DependencyError as e:
        table.add_row("FFmpeg", "✗ Missing", e.install_hint or e.message)
        console.print(table)
        raise typer.Exit(1)

    table.add_row("FFmpeg", "✓ Installed", f"{info['ffmpeg_version']} ({info['ffmpeg_path']})")
    console.print(table)
    console.print("\n[green]✓ All checks passed[/green]")
