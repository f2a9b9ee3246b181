"""
avswap.io - Partial-file helpers for FFmpeg outputs.

FFmpeg writes to a ``.partial`` sibling of the final path. The partial file is
renamed into place only after FFmpeg succeeds, so an interrupted or failed run
never leaves a truncated file under the final name.
"""

from __future__ import annotations

from pathlib import Path


def partial_path(path: Path) -> Path:
    """Return the in-progress path for an output file.

    The real suffix is kept last so FFmpeg still infers the container
    from the extension.
    """
    return path.with_name(f"{path.stem}.partial{path.suffix}")


def commit_partial(partial: Path, path: Path) -> Path:
    """Move a finished partial file onto its final path.

    Raises:
        FileNotFoundError: If the partial file was never written
    """
    if not partial.exists():
        raise FileNotFoundError(f"Expected output not written: {partial.name}")
    partial.replace(path)
    return path


def discard_partial(partial: Path) -> None:
    """Delete a partial file left behind by a failed run."""
    partial.unlink(missing_ok=True)
