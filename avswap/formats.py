"""
avswap.formats - Audio format table and file naming conventions.

The format table is fixed: each supported audio format maps to the FFmpeg
encoder and quality parameters used when extracting audio in that format.
Table order doubles as the lookup priority when merge mode searches for an
edited audio file.
"""

from __future__ import annotations

import re
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict


class AudioFormat(BaseModel):
    """Encoder settings for one output audio format."""

    model_config = ConfigDict(frozen=True)

    name: str
    extension: str
    codec: str
    extra_params: tuple[str, ...] = ()


AUDIO_FORMATS: MappingProxyType[str, AudioFormat] = MappingProxyType(
    {
        "mp3": AudioFormat(
            name="mp3", extension="mp3", codec="libmp3lame", extra_params=("-q:a", "2")
        ),
        "wav": AudioFormat(name="wav", extension="wav", codec="pcm_s16le"),
        "aac": AudioFormat(name="aac", extension="aac", codec="aac", extra_params=("-b:a", "192k")),
        "m4a": AudioFormat(name="m4a", extension="m4a", codec="aac", extra_params=("-b:a", "192k")),
        "flac": AudioFormat(name="flac", extension="flac", codec="flac"),
        "ogg": AudioFormat(
            name="ogg", extension="ogg", codec="libvorbis", extra_params=("-q:a", "6")
        ),
        "wma": AudioFormat(
            name="wma", extension="wma", codec="wmav2", extra_params=("-b:a", "192k")
        ),
        "opus": AudioFormat(
            name="opus", extension="opus", codec="libopus", extra_params=("-b:a", "128k")
        ),
    }
)

AUDIO_PRIORITY: tuple[str, ...] = tuple(AUDIO_FORMATS)

EXTRACT_VIDEO_PATTERN = re.compile(r"\.(mp4|mov|avi|mkv|webm|flv|wmv)$", re.IGNORECASE)

# Stream copy into an .mp4 output is only reliable from these containers.
MERGE_VIDEO_PATTERN = re.compile(r"\.(mp4|mov)$", re.IGNORECASE)


def get_format(name: str) -> AudioFormat:
    """Look up a supported audio format by name.

    Raises:
        KeyError: If the format is not supported
    """
    return AUDIO_FORMATS[name]


def supported_formats() -> str:
    """Comma-separated list of supported format names, in priority order."""
    return ", ".join(AUDIO_PRIORITY)


def audio_file_name(base: str, extension: str) -> str:
    """Name of the audio file paired with a video base name."""
    return f"{base}_audio.{extension}"


def final_file_name(base: str) -> str:
    """Name of the merged output video. Always mp4, whatever the input container."""
    return f"{base}_final.mp4"


def list_videos(directory: Path, pattern: re.Pattern[str]) -> list[Path]:
    """List regular files in a directory whose names match a video pattern.

    Args:
        directory: Directory to scan (non-recursive)
        pattern: Compiled extension pattern

    Returns:
        Matching paths, sorted by name
    """
    return sorted(p for p in directory.iterdir() if p.is_file() and pattern.search(p.name))
