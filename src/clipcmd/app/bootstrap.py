"""Bootstrap — composition root wiring adapters to port protocols."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from clipcmd.app.settings import ClipCmdSettings
from clipcmd.application.clip_concatenator import ClipConcatenator
from clipcmd.application.source_descriptor import SourceDescriptor
from clipcmd.domain.errors import ConfigurationError
from clipcmd.domain.ports import MediaProberPort, ProcessRunnerPort, ToolLocatorPort
from clipcmd.infrastructure.adapters.ffprobe_adapter import FfprobeAdapter
from clipcmd.infrastructure.adapters.process_runner import SubprocessRunner

logger = logging.getLogger(__name__)


@dataclass
class Toolkit:
    """Wired prober and runner plus the settings they were built from."""

    settings: ClipCmdSettings
    prober: MediaProberPort
    runner: ProcessRunnerPort
    locator: ToolLocatorPort = shutil.which

    def load(self, path: Path | str) -> SourceDescriptor:
        """Probe ``path`` and return a descriptor ready for edits."""
        return SourceDescriptor.load(
            path,
            self.prober,
            self.runner,
            frame_rate=self.settings.default_frame_rate,
            ffmpeg_binary=self.settings.ffmpeg_binary,
        )

    def new_clip(self, paths: Sequence[Path | str]) -> ClipConcatenator:
        """Return a concatenator over already-rendered ``paths``."""
        return ClipConcatenator(
            paths,
            self.runner,
            locator=self.locator,
            probe_binary=self.settings.ffprobe_binary,
            ffmpeg_binary=self.settings.ffmpeg_binary,
            manifest_name=self.settings.manifest_filename,
        )


def _validate_settings(settings: ClipCmdSettings) -> None:
    if Path(settings.manifest_filename).name != settings.manifest_filename:
        raise ConfigurationError(
            f"manifest_filename must be a bare file name, got '{settings.manifest_filename}'"
        )
    if not settings.ffmpeg_binary.strip() or not settings.ffprobe_binary.strip():
        raise ConfigurationError("ffmpeg_binary and ffprobe_binary must not be empty")
    if settings.log_level.upper() not in logging.getLevelNamesMapping():
        raise ConfigurationError(f"Unknown log_level '{settings.log_level}'")


def load_settings(settings: ClipCmdSettings | None = None) -> ClipCmdSettings:
    """Return validated settings, loading from environment/.env when none are given.

    Raises ConfigurationError for values that fail validation.
    """
    if settings is None:
        try:
            settings = ClipCmdSettings()
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid CLIPCMD_* settings: {exc}") from exc

    _validate_settings(settings)
    return settings


def create_toolkit(settings: ClipCmdSettings | None = None) -> Toolkit:
    """Wire adapters and return a Toolkit.

    If no settings are provided, loads from environment/.env.
    """
    settings = load_settings(settings)

    toolkit = Toolkit(
        settings=settings,
        prober=FfprobeAdapter(binary=settings.ffprobe_binary),
        runner=SubprocessRunner(),
    )
    logger.debug("Toolkit created: ffmpeg=%s, ffprobe=%s", settings.ffmpeg_binary, settings.ffprobe_binary)
    return toolkit
