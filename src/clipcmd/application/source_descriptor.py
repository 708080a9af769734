"""SourceDescriptor — accumulate edits on one source video and compile them into an ffmpeg command."""

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path
from typing import IO, Any

from clipcmd.domain.errors import ExecutionFailedError
from clipcmd.domain.models import (
    ProbeResult,
    TrimWindow,
    as_seconds,
    crop_fragment,
    format_seconds,
    output_fragment,
    scale_fragment,
)
from clipcmd.domain.ports import MediaProberPort, ProcessRunnerPort
from clipcmd.domain.types import FilterFragment, TimeValue

logger = logging.getLogger(__name__)

DEFAULT_FRAME_RATE: int = 30
_MUTE_FLAG = "-an"


class SourceDescriptor:
    """One input video plus the edits to apply to it.

    Build with :meth:`load`, apply edit operations, then either read
    :meth:`command_line` or call :meth:`render`. Edits never fail: out-of-range
    times are clamped into the source duration and an inverted :meth:`trim`
    range is ignored.

    Trim offsets are always relative to the original source. Width and height
    track the shape the filter chain will produce; they are not cross-checked
    against the fragments.
    """

    def __init__(
        self,
        path: Path | str,
        probe: ProbeResult,
        runner: ProcessRunnerPort,
        *,
        frame_rate: int = DEFAULT_FRAME_RATE,
        ffmpeg_binary: str = "ffmpeg",
    ) -> None:
        self._path = Path(path)
        self._width = probe.width
        self._height = probe.height
        self._bitrate = probe.bitrate
        self._frame_rate = frame_rate
        self._window = TrimWindow.full(probe.duration)
        self._filters: list[FilterFragment] = []
        self._extra_args: list[str] = []
        self._runner = runner
        self._ffmpeg_binary = ffmpeg_binary

    @classmethod
    def load(
        cls,
        path: Path | str,
        prober: MediaProberPort,
        runner: ProcessRunnerPort,
        *,
        frame_rate: int = DEFAULT_FRAME_RATE,
        ffmpeg_binary: str = "ffmpeg",
    ) -> SourceDescriptor:
        """Probe ``path`` and return a descriptor covering the whole source.

        Raises whatever the prober raises: ToolNotFoundError,
        SourceFileNotFoundError, ProbeExecutionError, MalformedProbeOutputError.
        """
        probe = prober.probe(Path(path))
        return cls(path, probe, runner, frame_rate=frame_rate, ffmpeg_binary=ffmpeg_binary)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def frame_rate(self) -> int:
        return self._frame_rate

    @property
    def bitrate(self) -> int:
        return self._bitrate

    @property
    def start(self) -> timedelta:
        return self._window.start

    @property
    def end(self) -> timedelta:
        return self._window.end

    @property
    def duration(self) -> timedelta:
        """Duration of the original source, unaffected by trimming."""
        return self._window.ceiling

    @property
    def trimmed_duration(self) -> timedelta:
        return self._window.length

    @property
    def filters(self) -> tuple[FilterFragment, ...]:
        return tuple(self._filters)

    @property
    def extra_args(self) -> tuple[str, ...]:
        return tuple(self._extra_args)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def set_start(self, start: TimeValue) -> SourceDescriptor:
        """Set the output start; an end before it is pulled up to match."""
        self._window = self._window.moved(start=start)
        return self

    def set_end(self, end: TimeValue) -> SourceDescriptor:
        """Set the output end; a start after it is pulled down to match."""
        self._window = self._window.moved(end=end)
        return self

    def trim(self, start: TimeValue, end: TimeValue) -> SourceDescriptor:
        """Keep only ``[start, end]`` of the source. Does nothing if ``start > end``."""
        if as_seconds(start) <= as_seconds(end):
            self._window = self._window.moved(start=start, end=end)
        return self

    def set_frame_rate(self, frame_rate: int) -> SourceDescriptor:
        self._frame_rate = frame_rate
        return self

    def set_bitrate(self, bitrate: int) -> SourceDescriptor:
        """Set the output video bitrate in bits/second; 0 leaves it to ffmpeg."""
        self._bitrate = bitrate
        return self

    def set_size(self, width: int, height: int) -> SourceDescriptor:
        """Scale the output (as produced by earlier filters) to ``width x height``."""
        self._width = width
        self._height = height
        self._filters.append(scale_fragment(width, height))
        return self

    def crop(self, x: int, y: int, width: int, height: int) -> SourceDescriptor:
        """Keep the ``width x height`` rectangle whose top-left corner is ``(x, y)``."""
        self._width = width
        self._height = height
        self._filters.append(crop_fragment(x, y, width, height))
        return self

    def mute(self) -> SourceDescriptor:
        self._extra_args.append(_MUTE_FLAG)
        return self

    # ------------------------------------------------------------------
    # Compilation and execution
    # ------------------------------------------------------------------

    def filter_chain(self) -> str:
        """All filter fragments in order, with the square-pixel/fps fragment last."""
        return ",".join([*self._filters, output_fragment(self._frame_rate)])

    def command_line(self, output: Path | str) -> list[str]:
        """Return the ffmpeg argument vector :meth:`render` would run."""
        argv = [
            self._ffmpeg_binary,
            "-y",
            "-i",
            str(self._path),
            "-ss",
            format_seconds(self._window.start),
            "-t",
            format_seconds(self._window.length),
        ]
        if self._bitrate:
            argv.extend(["-vb", str(self._bitrate)])
        argv.extend(self._extra_args)
        argv.extend(["-vf", self.filter_chain(), "-strict", "-2", str(output)])
        return argv

    def render(
        self,
        output: Path | str,
        stdout: IO[Any] | None = None,
        stderr: IO[Any] | None = None,
    ) -> Path:
        """Run ffmpeg and block until it exits. Returns the output path.

        Raises:
            ExecutionFailedError: ffmpeg exited with a non-zero status.
            ToolNotFoundError: ffmpeg could not be started.
        """
        argv = self.command_line(output)
        result = self._runner.run(argv, stdout=stdout, stderr=stderr)
        if not result.ok:
            raise ExecutionFailedError(argv, result.returncode, result.stderr)

        logger.info("Rendered %s -> %s", self._path.name, Path(output).name)
        return Path(output)
