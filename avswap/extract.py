"""
avswap.extract - Extract mode: write each video's audio track to its own file.

For every video in the directory, produces ``<base>_audio.<format>`` next to
it, encoded with the codec settings from the format table. The resulting
audio files are meant to be edited and fed back in through merge mode.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.markup import escape
from rich.table import Table

from avswap.config import AvswapConfig
from avswap.exceptions import ConfigError, ExtractionError, FFmpegError
from avswap.ffmpeg import CommandRunner, build_extract_command, run_command, run_ffmpeg
from avswap.formats import (
    EXTRACT_VIDEO_PATTERN,
    AudioFormat,
    audio_file_name,
    get_format,
    list_videos,
    supported_formats,
)
from avswap.io import commit_partial, discard_partial, partial_path
from avswap.logging import logger
from avswap.utils import format_size


def extract_audio(
    video: Path,
    output: Path,
    fmt: AudioFormat,
    ffmpeg: str = "ffmpeg",
    runner: CommandRunner = run_command,
) -> Path:
    """Extract the audio track of one video file.

    Args:
        video: Source video file
        output: Destination audio file
        fmt: Audio format entry to encode with
        ffmpeg: FFmpeg executable name or path
        runner: Command runner used to invoke FFmpeg

    Returns:
        Path of the written audio file

    Raises:
        ExtractionError: If FFmpeg fails or writes nothing
    """
    partial = partial_path(output)
    cmd = build_extract_command(video, partial, fmt, ffmpeg=ffmpeg)
    try:
        run_ffmpeg(cmd, runner)
        return commit_partial(partial, output)
    except (FFmpegError, FileNotFoundError) as e:
        discard_partial(partial)
        raise ExtractionError(f"Failed to extract audio from {video.name}: {e}") from e
    except BaseException:
        discard_partial(partial)
        raise


def extract_all(
    config: AvswapConfig,
    runner: CommandRunner = run_command,
    console=None,
) -> dict[str, Any]:
    """Extract audio from every video in the configured directory.

    Args:
        config: Resolved run configuration
        runner: Command runner used to invoke FFmpeg
        console: Optional rich console for output

    Returns:
        Dict with extraction summary

    Raises:
        ConfigError: If the configured format is not supported
    """
    try:
        fmt = get_format(config.extract_format)
    except KeyError:
        raise ConfigError(
            f"Unsupported format '{config.extract_format}'. "
            f"Supported formats: {supported_formats()}"
        ) from None

    directory = config.directory
    results: dict[str, Any] = {
        "total": 0,
        "extracted": 0,
        "failed": 0,
        "errors": [],
    }

    videos = list_videos(directory, EXTRACT_VIDEO_PATTERN)
    results["total"] = len(videos)

    if not videos:
        if console:
            console.print("[yellow]No video files found in directory.[/yellow]")
        return results

    if console:
        console.print(f"Found {len(videos)} video file(s).\n")

    table = Table(title="Audio Extraction")
    table.add_column("Video", style="cyan")
    table.add_column("Audio", style="green")
    table.add_column("Size", style="green")
    table.add_column("Status", style="yellow")

    for video in videos:
        output = directory / audio_file_name(video.stem, fmt.extension)

        if console:
            console.print(
                f"[dim]Extracting audio: {video.name} -> {output.name} "
                f"({fmt.name.upper()})[/dim]"
            )

        try:
            extract_audio(video, output, fmt, ffmpeg=config.ffmpeg, runner=runner)
        except ExtractionError as e:
            logger.warning("%s", e)
            if console:
                console.print(f"[red]✗ Failed to extract audio from {video.name}[/red]")
                console.print(f"[dim]{escape(str(e.__cause__ or e))}[/dim]\n")
            table.add_row(video.name, "-", "-", "[red]Failed[/red]")
            results["failed"] += 1
            results["errors"].append({"file": video.name, "error": str(e)})
            continue

        if console:
            console.print(f"[green]✓ Success: {output.name}[/green]\n")
        table.add_row(video.name, output.name, format_size(output), "[green]✓ Extracted[/green]")
        results["extracted"] += 1

    if console:
        console.print(table)
        console.print("\nExtraction complete!")

    return results
