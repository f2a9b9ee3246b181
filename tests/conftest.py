"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from avswap.config import AvswapConfig


class FakeRunner:
    """Stands in for FFmpeg: records commands and writes the output file.

    Commands with an input file whose name starts with one of ``fail_on``
    exit with status 1 and write nothing.
    """

    def __init__(self, fail_on: tuple[str, ...] = (), stderr: str = "Invalid data found") -> None:
        self.fail_on = fail_on
        self.stderr = stderr
        self.calls: list[list[str]] = []

    def __call__(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        self.calls.append(cmd)
        names = [Path(arg).name for arg in cmd[:-1]]
        if any(name.startswith(self.fail_on) for name in names if self.fail_on):
            return subprocess.CompletedProcess(cmd, 1, "", self.stderr)
        Path(cmd[-1]).write_bytes(b"media")
        return subprocess.CompletedProcess(cmd, 0, "", "")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def failing_runner() -> FakeRunner:
    """Runner that fails for any input file named broken*."""
    return FakeRunner(fail_on=("broken",), stderr="broken.mp4: Invalid data found when processing input")


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    """Create an empty media directory."""
    directory = tmp_path / "media"
    directory.mkdir()
    return directory


@pytest.fixture
def make_files(media_dir: Path):
    """Return a helper that creates placeholder files in the media directory."""

    def _make(*names: str) -> None:
        for name in names:
            (media_dir / name).write_bytes(b"x")

    return _make


@pytest.fixture
def merge_config(media_dir: Path) -> AvswapConfig:
    return AvswapConfig(directory=media_dir, mode="merge")


@pytest.fixture
def extract_config(media_dir: Path) -> AvswapConfig:
    return AvswapConfig(directory=media_dir, mode="extract", extract_format="mp3")
