"""
avswap.validation - Dependency checks and input validation.

Validates the environment and the working directory before processing.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from avswap.exceptions import DependencyError, ValidationError

INSTALL_HINT = "Install with: brew install ffmpeg (macOS) or apt install ffmpeg (Linux)"


def check_ffmpeg(ffmpeg: str = "ffmpeg") -> dict[str, str]:
    """Check that FFmpeg is installed and get its version.

    Args:
        ffmpeg: Executable name or path

    Returns:
        Dict with 'ffmpeg_path' and 'ffmpeg_version'

    Raises:
        DependencyError: If FFmpeg is not found
    """
    ffmpeg_path = shutil.which(ffmpeg)
    if not ffmpeg_path:
        raise DependencyError("ffmpeg", f"'{ffmpeg}' not found in PATH", INSTALL_HINT)

    result = {"ffmpeg_path": ffmpeg_path}
    try:
        proc = subprocess.run(
            [ffmpeg_path, "-version"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        version_line = proc.stdout.split("\n")[0]
        result["ffmpeg_version"] = version_line.split()[2] if version_line else "unknown"
    except (subprocess.TimeoutExpired, IndexError):
        result["ffmpeg_version"] = "unknown"

    return result


def validate_directory(path: Path) -> Path:
    """Check that the media directory exists and is a directory.

    Returns:
        The resolved directory path

    Raises:
        ValidationError: If the path is missing or not a directory
    """
    if not path.exists():
        raise ValidationError(f"Directory not found: {path}")
    if not path.is_dir():
        raise ValidationError(f"Not a directory: {path}")
    return path.resolve()
