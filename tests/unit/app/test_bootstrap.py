"""Tests for bootstrap — Toolkit wiring and settings validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from clipcmd.app.bootstrap import Toolkit, create_toolkit, load_settings
from clipcmd.app.settings import ClipCmdSettings
from clipcmd.domain.errors import ConfigurationError
from clipcmd.infrastructure.adapters.ffprobe_adapter import FfprobeAdapter
from clipcmd.infrastructure.adapters.process_runner import SubprocessRunner


class TestCreateToolkit:
    def test_wires_default_adapters(self) -> None:
        toolkit = create_toolkit(ClipCmdSettings(ffprobe_binary="/opt/ffprobe"))
        assert isinstance(toolkit.prober, FfprobeAdapter)
        assert toolkit.prober.binary == "/opt/ffprobe"
        assert isinstance(toolkit.runner, SubprocessRunner)

    def test_rejects_manifest_path_with_directory(self) -> None:
        with pytest.raises(ConfigurationError, match="bare file name"):
            create_toolkit(ClipCmdSettings(manifest_filename="tmp/concat.txt"))

    def test_rejects_blank_binary(self) -> None:
        with pytest.raises(ConfigurationError, match="must not be empty"):
            create_toolkit(ClipCmdSettings(ffmpeg_binary="  "))

    def test_rejects_unknown_log_level(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown log_level"):
            create_toolkit(ClipCmdSettings(log_level="LOUD"))


class TestLoadSettings:
    def test_loads_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLIPCMD_DEFAULT_FRAME_RATE", "24")
        assert load_settings().default_frame_rate == 24

    def test_invalid_environment_value_is_configuration_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLIPCMD_DEFAULT_FRAME_RATE", "fast")
        with pytest.raises(ConfigurationError, match="Invalid CLIPCMD_"):
            load_settings()

    def test_given_settings_are_validated(self) -> None:
        with pytest.raises(ConfigurationError, match="bare file name"):
            load_settings(ClipCmdSettings(manifest_filename="../concat.txt"))


class TestToolkit:
    def test_load_applies_settings(self, fake_prober: Any, fake_runner: Any) -> None:
        settings = ClipCmdSettings(ffmpeg_binary="ffmpeg6", default_frame_rate=25)
        toolkit = Toolkit(settings=settings, prober=fake_prober, runner=fake_runner)

        video = toolkit.load("input.mp4")

        assert video.frame_rate == 25
        assert video.command_line("out.mp4")[0] == "ffmpeg6"
        assert fake_prober.probed == [Path("input.mp4")]

    def test_new_clip_applies_settings(self, tmp_path: Path, fake_prober: Any, fake_runner: Any) -> None:
        clip = tmp_path / "a.mov"
        clip.write_bytes(b"fake")
        settings = ClipCmdSettings(ffmpeg_binary="ffmpeg6", manifest_filename="list.txt")
        toolkit = Toolkit(settings=settings, prober=fake_prober, runner=fake_runner, locator=lambda name: name)

        concatenator = toolkit.new_clip([clip])

        assert concatenator.manifest_path == tmp_path / "list.txt"
        assert concatenator.command_line("out.mov")[0] == "ffmpeg6"
