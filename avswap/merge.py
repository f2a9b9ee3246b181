"""
avswap.merge - Merge mode: replace each video's audio with its edited audio file.

For every mp4/mov video, looks for ``<base>_audio.<ext>`` in format priority
order. When one is found, writes ``<base>_final.mp4`` with the original video
stream copied and the edited audio as the only audio stream, cut to the
shorter of the two inputs. Videos without an audio file are skipped.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.markup import escape
from rich.table import Table

from avswap.config import AvswapConfig
from avswap.exceptions import FFmpegError, MergeError
from avswap.ffmpeg import CommandRunner, build_merge_command, run_command, run_ffmpeg
from avswap.formats import (
    AUDIO_FORMATS,
    AUDIO_PRIORITY,
    MERGE_VIDEO_PATTERN,
    audio_file_name,
    final_file_name,
    list_videos,
)
from avswap.io import commit_partial, discard_partial, partial_path
from avswap.logging import logger
from avswap.utils import format_size


def find_audio_file(directory: Path, base: str) -> Path | None:
    """Find the edited audio file for a video base name.

    Extensions are tried in AUDIO_PRIORITY order; the first existing file wins.

    Args:
        directory: Directory holding the video
        base: Video file name without its extension

    Returns:
        Path to the audio file, or None if there is none
    """
    for name in AUDIO_PRIORITY:
        candidate = directory / audio_file_name(base, AUDIO_FORMATS[name].extension)
        if candidate.is_file():
            return candidate
    return None


def replace_audio(
    video: Path,
    audio: Path,
    output: Path,
    ffmpeg: str = "ffmpeg",
    runner: CommandRunner = run_command,
) -> Path:
    """Write a copy of a video with its audio track replaced.

    Raises:
        MergeError: If FFmpeg fails or writes nothing
    """
    partial = partial_path(output)
    cmd = build_merge_command(video, audio, partial, ffmpeg=ffmpeg)
    try:
        run_ffmpeg(cmd, runner)
        return commit_partial(partial, output)
    except (FFmpegError, FileNotFoundError) as e:
        discard_partial(partial)
        raise MergeError(f"Failed to process {video.name}: {e}") from e
    except BaseException:
        discard_partial(partial)
        raise


def merge_all(
    config: AvswapConfig,
    runner: CommandRunner = run_command,
    console=None,
) -> dict[str, Any]:
    """Replace audio in every video of the configured directory that has an edited audio file.

    A video whose merge fails counts as both skipped and failed, so
    ``processed + skipped == total`` always holds.

    Args:
        config: Resolved run configuration
        runner: Command runner used to invoke FFmpeg
        console: Optional rich console for output

    Returns:
        Dict with merge summary
    """
    directory = config.directory
    results: dict[str, Any] = {
        "total": 0,
        "processed": 0,
        "skipped": 0,
        "failed": 0,
        "errors": [],
    }

    videos = list_videos(directory, MERGE_VIDEO_PATTERN)
    results["total"] = len(videos)

    if not videos:
        if console:
            console.print("[yellow]No video files found in directory.[/yellow]")
        return results

    if console:
        console.print(f"Found {len(videos)} video file(s).\n")

    table = Table(title="Audio Replacement")
    table.add_column("Video", style="cyan")
    table.add_column("Audio", style="green")
    table.add_column("Output", style="green")
    table.add_column("Status", style="yellow")

    for video in videos:
        audio = find_audio_file(directory, video.stem)

        if audio is None:
            if console:
                console.print(f"⊘ Skipped: {video.name} (no edited audio file found)\n")
            table.add_row(video.name, "-", "-", "[dim]Skipped (no audio)[/dim]")
            results["skipped"] += 1
            continue

        output = directory / final_file_name(video.stem)

        if console:
            console.print(f"[dim]Replacing audio in: {video.name} with {audio.name}[/dim]")

        try:
            replace_audio(video, audio, output, ffmpeg=config.ffmpeg, runner=runner)
        except MergeError as e:
            logger.warning("%s", e)
            if console:
                console.print(f"[red]✗ Failed to process {video.name}[/red]")
                console.print(f"[dim]{escape(str(e.__cause__ or e))}[/dim]\n")
            table.add_row(video.name, audio.name, "-", "[red]Failed[/red]")
            results["skipped"] += 1
            results["failed"] += 1
            results["errors"].append({"file": video.name, "error": str(e)})
            continue

        if console:
            console.print(f"[green]✓ Created: {output.name}[/green]\n")
        table.add_row(
            video.name,
            audio.name,
            f"{output.name} ({format_size(output)})",
            "[green]✓ Merged[/green]",
        )
        results["processed"] += 1

    if console:
        console.print(table)

    return results
