"""Tests for the click command group."""

from __future__ import annotations

from unittest.mock import AsyncMock

from click.testing import CliRunner

from reelvoice import __version__
from reelvoice.cli.main import cli
from reelvoice.models.config import Settings, load_settings
from reelvoice.utils.io import write_yaml


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


class TestInit:
    def test_writes_loadable_defaults(self, tmp_path):
        path = tmp_path / "reelvoice.yaml"
        result = CliRunner().invoke(cli, ["init", "--output", str(path)])
        assert result.exit_code == 0, result.output
        assert load_settings(path) == Settings()

    def test_refuses_to_overwrite(self, tmp_path):
        path = tmp_path / "reelvoice.yaml"
        path.write_text("narration: {}\n")
        result = CliRunner().invoke(cli, ["init", "--output", str(path)])
        assert result.exit_code == 1
        assert path.read_text() == "narration: {}\n"


class TestBudget:
    def test_default_voice(self):
        result = CliRunner().invoke(cli, ["budget", "--duration", "15"])
        assert result.exit_code == 0, result.output
        assert "openai_alloy" in result.output
        assert "13.95s" in result.output
        assert "39" in result.output

    def test_config_overrides_rate(self, tmp_path):
        config = tmp_path / "reelvoice.yaml"
        write_yaml(config, {"narration": {"speaking_rates": {"elevenlabs": 2.0}}})
        result = CliRunner().invoke(
            cli,
            ["budget", "-d", "20", "--provider", "elevenlabs", "--config", str(config)],
        )
        assert result.exit_code == 0, result.output
        # 18.6 s * 2.0 words/s * 0.98
        assert "36" in result.output

    def test_rejects_non_positive_duration(self):
        result = CliRunner().invoke(cli, ["budget", "--duration", "0"])
        assert result.exit_code == 2


class TestNarrate:
    def test_failure_exits_1(self, monkeypatch, tmp_path):
        transcript = tmp_path / "talk.txt"
        transcript.write_text("Hello there. General remarks follow.")
        monkeypatch.setattr(
            "reelvoice.pipeline.orchestrator.NarrationPipeline.run",
            AsyncMock(side_effect=RuntimeError("ffmpeg missing")),
        )
        result = CliRunner().invoke(
            cli, ["narrate", str(transcript), "--video-duration", "15", "-o", str(tmp_path / "out")]
        )
        assert result.exit_code == 1

    def test_missing_transcript(self, tmp_path):
        result = CliRunner().invoke(
            cli, ["narrate", str(tmp_path / "none.txt"), "--video-duration", "15"]
        )
        assert result.exit_code == 2


class TestAssemble:
    def test_assembles_with_explicit_duration(self, monkeypatch, tmp_path):
        run_ffmpeg = AsyncMock()
        monkeypatch.setattr("reelvoice.mixing.assemble.run_ffmpeg", run_ffmpeg)
        video = tmp_path / "clip.mp4"
        video.write_bytes(b"video")
        out = tmp_path / "short.mp4"

        result = CliRunner().invoke(
            cli,
            ["assemble", str(video), "--output", str(out), "--keep-original-audio", "-d", "12"],
        )

        assert result.exit_code == 0, result.output
        args = run_ffmpeg.call_args.args[0]
        assert args[args.index("-t") + 1] == "12.0"
        assert ["-map", "0"] == args[2:4]
        assert (tmp_path / "short_ffmpeg_command.txt").exists()

    def test_unmeasurable_video_without_duration(self, monkeypatch, tmp_path):
        monkeypatch.setattr(
            "reelvoice.cli.assemble_cmd.probe_duration", AsyncMock(return_value=None)
        )
        video = tmp_path / "clip.mp4"
        video.write_bytes(b"video")
        result = CliRunner().invoke(
            cli, ["assemble", str(video), "--output", str(tmp_path / "o.mp4")]
        )
        assert result.exit_code == 1
