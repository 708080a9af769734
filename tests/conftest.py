"""Shared test fixtures for the clipcmd test suite."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta
from pathlib import Path
from typing import IO, Any

import pytest

from clipcmd.application.source_descriptor import SourceDescriptor
from clipcmd.domain.models import ProbeResult, ProcessResult


class FakeRunner:
    """ProcessRunnerPort double that records every argv it is asked to run."""

    def __init__(self, returncode: int = 0, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        self.calls: list[tuple[list[str], IO[Any] | None, IO[Any] | None]] = []
        self.on_run: Any = None

    def run(
        self,
        argv: Sequence[str],
        stdout: IO[Any] | None = None,
        stderr: IO[Any] | None = None,
    ) -> ProcessResult:
        self.calls.append((list(argv), stdout, stderr))
        if self.on_run is not None:
            self.on_run(argv)
        return ProcessResult(returncode=self.returncode, stderr=self.stderr)


class FakeProber:
    """MediaProberPort double returning a fixed ProbeResult."""

    def __init__(self, result: ProbeResult) -> None:
        self.result = result
        self.probed: list[Path] = []

    def probe(self, path: Path) -> ProbeResult:
        self.probed.append(path)
        return self.result


@pytest.fixture
def sample_probe() -> ProbeResult:
    """A 60-second 1920x1080 source at 1 Mb/s."""
    return ProbeResult(duration=timedelta(seconds=60), width=1920, height=1080, bitrate=1_000_000)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def fake_prober(sample_probe: ProbeResult) -> FakeProber:
    return FakeProber(sample_probe)


@pytest.fixture
def video(fake_prober: FakeProber, fake_runner: FakeRunner) -> SourceDescriptor:
    return SourceDescriptor.load("input.mp4", fake_prober, fake_runner)
