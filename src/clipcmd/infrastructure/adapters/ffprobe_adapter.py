"""FfprobeAdapter — MediaProberPort implementation using an ffprobe subprocess."""

from __future__ import annotations

import logging
import math
import os
import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from clipcmd.domain.errors import (
    MalformedProbeOutputError,
    ProbeExecutionError,
    SourceFileNotFoundError,
    ToolNotFoundError,
)
from clipcmd.domain.models import ProbeResult, seconds_to_timedelta

if TYPE_CHECKING:
    from clipcmd.domain.ports import MediaProberPort, ToolLocatorPort

logger = logging.getLogger(__name__)

_DEFAULT_BINARY = "ffprobe"


class _StreamTags(BaseModel):
    model_config = ConfigDict(extra="ignore")

    rotate: int | None = None


class _SideData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    rotation: int | None = None


class _Stream(BaseModel):
    model_config = ConfigDict(extra="ignore")

    width: int = 0
    height: int = 0
    tags: _StreamTags = Field(default_factory=_StreamTags)
    side_data_list: list[_SideData] = Field(default_factory=list)

    @property
    def rotation(self) -> int | None:
        """Rotation from the legacy ``rotate`` tag, else from display-matrix side data."""
        if self.tags.rotate is not None:
            return self.tags.rotate
        for side_data in self.side_data_list:
            if side_data.rotation is not None:
                return side_data.rotation
        return None


class _Format(BaseModel):
    model_config = ConfigDict(extra="ignore")

    duration: float
    bit_rate: int


class _ProbeReport(BaseModel):
    model_config = ConfigDict(extra="ignore")

    streams: list[_Stream] = Field(default_factory=list)
    format: _Format


def parse_probe_report(raw: str | bytes) -> ProbeResult:
    """Decode ffprobe's ``-print_format json -show_format -show_streams`` output.

    Picks the first stream with both a width and a height (skipping audio
    and data streams), falling back to stream 0 when none qualifies. Width
    and height are swapped when the stream is rotated an odd number of
    quarter turns.

    Raises:
        MalformedProbeOutputError: invalid JSON, schema mismatch, no streams,
            or non-numeric duration/bit_rate/rotation.
    """
    try:
        report = _ProbeReport.model_validate_json(raw)
    except PydanticValidationError as exc:
        raise MalformedProbeOutputError(f"Unable to parse JSON output from ffprobe: {exc}") from exc

    if not report.streams:
        raise MalformedProbeOutputError(
            "ffprobe output contains no stream data; make sure the file contains a valid video"
        )
    if not math.isfinite(report.format.duration):
        raise MalformedProbeOutputError(f"ffprobe returned invalid duration: {report.format.duration}")
    try:
        duration = seconds_to_timedelta(report.format.duration)
    except OverflowError as exc:
        raise MalformedProbeOutputError(f"ffprobe returned out-of-range duration: {report.format.duration}") from exc

    stream = next((s for s in report.streams if s.width != 0 and s.height != 0), report.streams[0])

    width, height = stream.width, stream.height
    rotation = stream.rotation
    if rotation is not None and math.trunc(rotation / 90) % 2 != 0:
        width, height = height, width

    return ProbeResult(
        duration=duration,
        width=width,
        height=height,
        bitrate=report.format.bit_rate,
    )


class FfprobeAdapter:
    """Probe a media file's duration, dimensions and bitrate via ffprobe.

    Satisfies the MediaProberPort protocol.
    """

    if TYPE_CHECKING:
        _protocol_check: MediaProberPort

    def __init__(self, binary: str = _DEFAULT_BINARY, locator: ToolLocatorPort = shutil.which) -> None:
        self._binary = binary
        self._locator = locator

    @property
    def binary(self) -> str:
        return self._binary

    def probe(self, path: Path) -> ProbeResult:
        """Run ffprobe against ``path`` and return the parsed result."""
        if self._locator(self._binary) is None:
            raise ToolNotFoundError(self._binary)

        path = Path(path)
        if not path.is_file() or not os.access(path, os.R_OK):
            raise SourceFileNotFoundError(path, "file does not exist or is not readable")

        argv = [
            self._binary,
            "-v",
            "quiet",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]
        try:
            completed = subprocess.run(argv, capture_output=True, check=False)
        except OSError as exc:
            raise ToolNotFoundError(self._binary, f"Unable to start {self._binary}: {exc}") from exc

        stderr = completed.stderr.decode(errors="replace")
        if completed.returncode != 0:
            raise ProbeExecutionError(
                f"{self._binary} failed on {path} with exit status {completed.returncode}",
                completed.returncode,
                stderr,
            )

        result = parse_probe_report(completed.stdout)
        logger.debug(
            "Probed %s: %dx%d, %s, %d b/s",
            path.name,
            result.width,
            result.height,
            result.duration,
            result.bitrate,
        )
        return result
