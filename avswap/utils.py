"""
avswap.utils - Shared utility functions.
"""

from __future__ import annotations

from pathlib import Path


def format_size(path: Path) -> str:
    """Format file size in human-readable format."""
    if not path.exists():
        return "-"
    size = path.stat().st_size
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def stderr_tail(stderr: str, lines: int = 5) -> str:
    """Return the last non-empty lines of an FFmpeg stderr dump.

    FFmpeg prints its banner and stream info before the actual error, so the
    useful part is at the end.
    """
    kept = [line for line in stderr.splitlines() if line.strip()]
    return "\n".join(kept[-lines:])
