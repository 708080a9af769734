"""Domain models — frozen dataclasses for probe results, trim windows, and filter fragments."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from clipcmd.domain.types import FilterFragment, TimeValue

_MICROSECONDS_PER_SECOND = Decimal(1_000_000)


def as_seconds(value: TimeValue) -> float | int:
    """Accept a timedelta or a number of seconds and return seconds, with no range check."""
    if isinstance(value, timedelta):
        return value.total_seconds()
    return value


def format_seconds(value: timedelta) -> str:
    """Render a duration as decimal seconds with no trailing zeros.

    ``timedelta(seconds=10)`` -> ``"10"``, ``timedelta(milliseconds=1500)`` -> ``"1.5"``.
    Never uses exponent notation, which ffmpeg's time parser rejects.
    """
    micros = value // timedelta(microseconds=1)
    return format((Decimal(micros) / _MICROSECONDS_PER_SECOND).normalize(), "f")


def seconds_to_timedelta(seconds: float) -> timedelta:
    """Convert probe seconds to a timedelta, rounding half up to whole microseconds."""
    micros = int(seconds * 1_000_000 + 0.5)
    return timedelta(microseconds=max(micros, 0))


def scale_fragment(width: int, height: int) -> FilterFragment:
    return FilterFragment(f"scale={width}:{height}")


def crop_fragment(x: int, y: int, width: int, height: int) -> FilterFragment:
    return FilterFragment(f"crop={width}:{height}:{x}:{y}")


def output_fragment(frame_rate: int) -> FilterFragment:
    """Trailing fragment: square pixels and the configured output frame rate."""
    return FilterFragment(f"setsar=1,fps=fps={frame_rate}")


@dataclass(frozen=True)
class ProbeResult:
    """Intrinsic properties of a media file as reported by ffprobe."""

    duration: timedelta
    width: int
    height: int
    bitrate: int = 0

    def __post_init__(self) -> None:
        if self.duration < timedelta(0):
            raise ValueError(f"duration must be non-negative, got {self.duration}")
        if self.width < 0 or self.height < 0:
            raise ValueError(f"width and height must be non-negative, got ({self.width}, {self.height})")


@dataclass(frozen=True)
class TrimWindow:
    """Start/end offsets into the original source, clamped to ``[0, ceiling]``.

    The pair is only ever changed through :meth:`moved`, which keeps
    ``0 <= start <= end <= ceiling`` regardless of which bound moves.
    """

    start: timedelta
    end: timedelta
    ceiling: timedelta

    def __post_init__(self) -> None:
        if not timedelta(0) <= self.start <= self.end <= self.ceiling:
            raise ValueError(f"expected 0 <= start <= end <= ceiling, got {self.start}, {self.end}, {self.ceiling}")

    @classmethod
    def full(cls, ceiling: timedelta) -> TrimWindow:
        return cls(start=timedelta(0), end=ceiling, ceiling=ceiling)

    @property
    def length(self) -> timedelta:
        return self.end - self.start

    def clamp(self, value: TimeValue) -> timedelta:
        """Clamp a timedelta or a number of seconds into ``[0, ceiling]``.

        Seconds are bounded before conversion, so huge or infinite values land
        on the ceiling. NaN maps to 0.
        """
        if not isinstance(value, timedelta):
            if (isinstance(value, float) and math.isnan(value)) or value <= 0:
                return timedelta(0)
            if value >= self.ceiling.total_seconds():
                return self.ceiling
            value = timedelta(seconds=value)
        return min(max(value, timedelta(0)), self.ceiling)

    def moved(self, start: TimeValue | None = None, end: TimeValue | None = None) -> TrimWindow:
        """Return a new window with the given bound(s) moved.

        A start past the current end pulls the end up with it; an end before
        the current start pulls the start down. When both are given the start
        is applied first.
        """
        new_start, new_end = self.start, self.end
        if start is not None:
            new_start = self.clamp(start)
            new_end = max(new_end, new_start)
        if end is not None:
            new_end = self.clamp(end)
            new_start = min(new_start, new_end)
        return TrimWindow(start=new_start, end=new_end, ceiling=self.ceiling)


@dataclass(frozen=True)
class ProcessResult:
    """Exit status of a finished external process, plus captured stderr text."""

    returncode: int
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0
