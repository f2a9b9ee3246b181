"""Tests for avswap CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from avswap import __version__
from avswap.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear avswap environment variables and run from an empty directory."""
    for var in ("DIR", "MODE", "EXTRACT_FORMAT", "FFMPEG"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def use_fake_runner(monkeypatch: pytest.MonkeyPatch, fake_runner):
    monkeypatch.setattr("avswap.cli.get_runner", lambda: fake_runner)
    return fake_runner


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestRunCommand:
    def test_invalid_mode_exits_before_scan(
        self, media_dir: Path, make_files, use_fake_runner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        make_files("a.mp4", "a_audio.mp3")

        def no_scan(*args, **kwargs):
            raise AssertionError("directory was scanned")

        monkeypatch.setattr("avswap.merge.list_videos", no_scan)
        monkeypatch.setattr("avswap.extract.list_videos", no_scan)

        result = runner.invoke(app, ["run"], env={"MODE": "bogus", "DIR": str(media_dir)})

        assert result.exit_code == 1
        assert "Invalid MODE 'bogus'" in result.output
        assert "Valid modes: 'extract' or 'merge'" in result.output
        assert result.output.count("Valid modes") == 1
        assert "Usage examples" in result.output
        assert use_fake_runner.calls == []

    def test_unsupported_format_exits_without_ffmpeg_calls(
        self, media_dir: Path, make_files, use_fake_runner
    ) -> None:
        make_files("a.mp4")

        result = runner.invoke(
            app, ["run"], env={"MODE": "extract", "EXTRACT_FORMAT": "mp2", "DIR": str(media_dir)}
        )

        assert result.exit_code == 1
        assert "Unsupported format 'mp2'" in result.output
        assert use_fake_runner.calls == []
        assert list(p.name for p in media_dir.iterdir()) == ["a.mp4"]

    @pytest.mark.parametrize(
        "env",
        [
            {"MODE": "extract", "EXTRACT_FORMAT": "FLAC"},
            {"MODE": "EXTRACT"},
            {"MODE": "extract", "EXTRACT_FORMAT": " mp3 "},
        ],
    )
    def test_values_must_match_exactly(
        self, media_dir: Path, make_files, use_fake_runner, env: dict[str, str]
    ) -> None:
        make_files("c.mp4")

        result = runner.invoke(app, ["run"], env={**env, "DIR": str(media_dir)})

        assert result.exit_code == 1
        assert use_fake_runner.calls == []

    def test_format_error_has_no_mode_usage(self, media_dir: Path, use_fake_runner) -> None:
        result = runner.invoke(
            app, ["run"], env={"MODE": "extract", "EXTRACT_FORMAT": "mp2", "DIR": str(media_dir)}
        )
        assert result.exit_code == 1
        assert "Usage examples" not in result.output

    def test_config_file_is_directory(self, tmp_path: Path, use_fake_runner) -> None:
        result = runner.invoke(app, ["run", "--config", str(tmp_path)])
        assert result.exit_code == 1
        assert "Cannot read config file" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_default_mode_is_merge(self, media_dir: Path, make_files, use_fake_runner) -> None:
        make_files("a.mp4", "a_audio.wav", "b.mov")

        result = runner.invoke(app, ["run"], env={"DIR": str(media_dir)})

        assert result.exit_code == 0
        assert "MERGE MODE" in result.output
        assert "Processed: 1" in result.output
        assert "Skipped: 1" in result.output
        assert "Total: 2" in result.output
        assert (media_dir / "a_final.mp4").exists()

    def test_extract_mode_from_environment(
        self, media_dir: Path, make_files, use_fake_runner
    ) -> None:
        make_files("c.mp4")

        result = runner.invoke(
            app, ["run"], env={"MODE": "extract", "EXTRACT_FORMAT": "flac", "DIR": str(media_dir)}
        )

        assert result.exit_code == 0
        assert "EXTRACT MODE" in result.output
        assert "Extraction complete!" in result.output
        assert (media_dir / "c_audio.flac").exists()
        cmd = use_fake_runner.calls[0]
        assert cmd[cmd.index("-acodec") + 1] == "flac"

    def test_options_override_environment(
        self, media_dir: Path, make_files, use_fake_runner
    ) -> None:
        make_files("c.mp4")

        result = runner.invoke(
            app,
            ["run", "--mode", "extract", "--format", "wav", "--dir", str(media_dir)],
            env={"MODE": "merge", "EXTRACT_FORMAT": "flac"},
        )

        assert result.exit_code == 0
        assert (media_dir / "c_audio.wav").exists()

    def test_defaults_to_current_directory(
        self, tmp_path: Path, use_fake_runner
    ) -> None:
        (tmp_path / "a.mp4").write_bytes(b"x")
        (tmp_path / "a_audio.mp3").write_bytes(b"x")

        result = runner.invoke(app, ["run"])

        assert result.exit_code == 0
        assert (tmp_path / "a_final.mp4").exists()

    def test_config_file(self, media_dir: Path, make_files, tmp_path: Path, use_fake_runner) -> None:
        make_files("c.mov")
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(f"mode: extract\nextract_format: ogg\ndirectory: {media_dir}\n")

        result = runner.invoke(app, ["run", "--config", str(config_file)])

        assert result.exit_code == 0
        assert (media_dir / "c_audio.ogg").exists()

    def test_missing_directory(self, tmp_path: Path, use_fake_runner) -> None:
        result = runner.invoke(app, ["run"], env={"DIR": str(tmp_path / "missing")})
        assert result.exit_code == 1
        assert "Directory not found" in result.output

    def test_no_videos(self, media_dir: Path, use_fake_runner) -> None:
        result = runner.invoke(app, ["run"], env={"DIR": str(media_dir)})
        assert result.exit_code == 0
        assert "No video files found" in result.output

    def test_per_file_failures_exit_zero(
        self, media_dir: Path, make_files, monkeypatch: pytest.MonkeyPatch, failing_runner
    ) -> None:
        monkeypatch.setattr("avswap.cli.get_runner", lambda: failing_runner)
        make_files("broken.mp4", "broken_audio.mp3")

        result = runner.invoke(app, ["run"], env={"DIR": str(media_dir)})

        assert result.exit_code == 0
        assert "Failed to process broken.mp4" in result.output
        assert "Failed: 1" in result.output


class TestExtractCommand:
    def test_ignores_merge_mode_in_environment(
        self, media_dir: Path, make_files, use_fake_runner
    ) -> None:
        make_files("c.mkv")

        result = runner.invoke(app, ["extract", "-d", str(media_dir)], env={"MODE": "merge"})

        assert result.exit_code == 0
        assert (media_dir / "c_audio.mp3").exists()

    def test_unsupported_format(self, media_dir: Path, use_fake_runner) -> None:
        result = runner.invoke(app, ["extract", "-d", str(media_dir), "-f", "mp2"])
        assert result.exit_code == 1
        assert "Supported formats" in result.output


class TestMergeCommand:
    def test_ignores_extract_format(self, media_dir: Path, make_files, use_fake_runner) -> None:
        make_files("a.mp4", "a_audio.opus")

        result = runner.invoke(
            app, ["merge", "-d", str(media_dir)], env={"EXTRACT_FORMAT": "mp2", "MODE": "bogus"}
        )

        assert result.exit_code == 0
        assert (media_dir / "a_final.mp4").exists()


class TestFormatsCommand:
    def test_lists_formats(self) -> None:
        result = runner.invoke(app, ["formats"])
        assert result.exit_code == 0
        assert "libmp3lame" in result.output
        assert "libopus" in result.output


class TestDoctorCommand:
    def test_missing_ffmpeg(self) -> None:
        result = runner.invoke(app, ["doctor", "--ffmpeg", "avswap-no-such-binary-xyz"])
        assert result.exit_code == 1
        assert "Missing" in result.output
