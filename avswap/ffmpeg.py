"""
avswap.ffmpeg - FFmpeg command construction and invocation.

Commands are built as argument lists and run without a shell. The runner is
injectable so the batch handlers can be exercised without FFmpeg installed.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Protocol

from avswap.exceptions import FFmpegError
from avswap.formats import AudioFormat
from avswap.logging import logger
from avswap.utils import stderr_tail

# Exit status reported when the binary cannot be started at all.
NOT_FOUND_STATUS = 127


class CommandRunner(Protocol):
    """Runs an external command and returns its completed process."""

    def __call__(self, cmd: list[str]) -> subprocess.CompletedProcess[str]: ...


def build_extract_command(
    video: Path,
    output: Path,
    fmt: AudioFormat,
    ffmpeg: str = "ffmpeg",
) -> list[str]:
    """Build the FFmpeg command that writes a video's audio track to a file.

    Args:
        video: Source video file
        output: Destination audio file
        fmt: Audio format entry (codec and extra encoder parameters)
        ffmpeg: FFmpeg executable name or path

    Returns:
        Command as a list of arguments
    """
    return [
        ffmpeg,
        "-y",
        "-i",
        str(video),
        "-vn",
        "-acodec",
        fmt.codec,
        *fmt.extra_params,
        str(output),
    ]


def build_merge_command(
    video: Path,
    audio: Path,
    output: Path,
    ffmpeg: str = "ffmpeg",
) -> list[str]:
    """Build the FFmpeg command that swaps a video's audio track.

    The video stream is copied untouched, the first audio stream of ``audio``
    replaces the original audio, and the output stops at the shorter input.
    """
    return [
        ffmpeg,
        "-y",
        "-i",
        str(video),
        "-i",
        str(audio),
        "-c:v",
        "copy",
        "-map",
        "0:v:0",
        "-map",
        "1:a:0",
        "-shortest",
        str(output),
    ]


def run_command(cmd: list[str]) -> subprocess.CompletedProcess[str]:
    """Run a command to completion, capturing its output.

    A binary that cannot be started is reported as a failed process rather
    than an exception, the same way an FFmpeg encoding error is.
    """
    try:
        return subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        return subprocess.CompletedProcess(cmd, NOT_FOUND_STATUS, "", str(e))


def run_ffmpeg(cmd: list[str], runner: CommandRunner = run_command) -> None:
    """Run an FFmpeg command and raise if it fails.

    Raises:
        FFmpegError: If the process exits with a non-zero status
    """
    logger.debug("Running: %s", " ".join(cmd))
    proc = runner(cmd)
    if proc.returncode != 0:
        stderr = proc.stderr or ""
        raise FFmpegError(
            proc.returncode,
            stderr,
            f"FFmpeg exited with status {proc.returncode}: {stderr_tail(stderr)}",
        )
