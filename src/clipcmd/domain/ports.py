"""Domain ports — Protocol interfaces for hexagonal architecture boundaries."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import IO, Any, Protocol, runtime_checkable

from clipcmd.domain.models import ProbeResult, ProcessResult


@runtime_checkable
class ProcessRunnerPort(Protocol):
    """Run an argument vector to completion, optionally connecting output sinks.

    Raises ToolNotFoundError when the executable cannot be started.
    """

    def run(
        self,
        argv: Sequence[str],
        stdout: IO[Any] | None = None,
        stderr: IO[Any] | None = None,
    ) -> ProcessResult: ...


@runtime_checkable
class MediaProberPort(Protocol):
    """Report duration, dimensions and bitrate of a media file."""

    def probe(self, path: Path) -> ProbeResult: ...


@runtime_checkable
class ToolLocatorPort(Protocol):
    """Resolve an executable name on PATH (matches ``shutil.which``)."""

    def __call__(self, name: str) -> str | None: ...
