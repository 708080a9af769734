"""ClipConcatenator — join rendered clips with the ffmpeg concat demuxer."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

from clipcmd.domain.errors import (
    ExecutionFailedError,
    ManifestWriteError,
    SourceFileNotFoundError,
    ToolNotFoundError,
    ValidationError,
)
from clipcmd.domain.ports import ProcessRunnerPort, ToolLocatorPort

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_NAME = "concat.txt"


def _manifest_line(path: Path) -> str:
    """One concat-demuxer entry; single quotes in the name become ``'\\''``."""
    escaped = path.name.replace("'", "'\\''")
    return f"file '{escaped}'"


class ClipConcatenator:
    """Concatenate already-rendered clips, in list order, without re-encoding.

    The manifest and the output both live in the first clip's directory, so
    the manifest can name members by basename. Two concatenations sharing that
    directory at the same time would overwrite each other's manifest.
    """

    def __init__(
        self,
        paths: Sequence[Path | str],
        runner: ProcessRunnerPort,
        *,
        locator: ToolLocatorPort = shutil.which,
        probe_binary: str = "ffprobe",
        ffmpeg_binary: str = "ffmpeg",
        manifest_name: str = DEFAULT_MANIFEST_NAME,
    ) -> None:
        if not paths:
            raise ValidationError("Clip list must not be empty")
        if locator(probe_binary) is None:
            raise ToolNotFoundError(probe_binary)

        members = tuple(Path(p) for p in paths)
        for member in members:
            if not member.exists():
                raise SourceFileNotFoundError(member, "file does not exist")

        self._members = members
        self._runner = runner
        self._ffmpeg_binary = ffmpeg_binary
        self._manifest_path = members[0].parent / manifest_name

    @property
    def paths(self) -> tuple[Path, ...]:
        return self._members

    @property
    def manifest_path(self) -> Path:
        return self._manifest_path

    def manifest_text(self) -> str:
        return "".join(f"{_manifest_line(member)}\n" for member in self._members)

    def output_path(self, output: Path | str) -> Path:
        """Place ``output`` next to the first clip, dropping any directory it carries."""
        return self._members[0].parent / Path(output).name

    def command_line(self, output: Path | str) -> list[str]:
        return [
            self._ffmpeg_binary,
            "-y",
            "-f",
            "concat",
            "-i",
            str(self._manifest_path),
            "-c",
            "copy",
            "-fflags",
            "+genpts",
            str(self.output_path(output)),
        ]

    @contextmanager
    def manifest(self) -> Iterator[Path]:
        """Write the manifest for the duration of the block, then remove it."""
        try:
            try:
                self._manifest_path.write_text(self.manifest_text(), encoding="utf-8")
            except OSError as exc:
                raise ManifestWriteError(self._manifest_path, str(exc)) from exc
            logger.debug("Wrote concat manifest %s (%d clips)", self._manifest_path, len(self._members))
            yield self._manifest_path
        finally:
            self._manifest_path.unlink(missing_ok=True)

    def concatenate(
        self,
        output: Path | str,
        stdout: IO[Any] | None = None,
        stderr: IO[Any] | None = None,
    ) -> Path:
        """Run the concat command and block until it exits. Returns the output path.

        Raises:
            ManifestWriteError: the manifest could not be written.
            ExecutionFailedError: ffmpeg exited with a non-zero status.
        """
        argv = self.command_line(output)
        with self.manifest():
            result = self._runner.run(argv, stdout=stdout, stderr=stderr)
        if not result.ok:
            raise ExecutionFailedError(argv, result.returncode, result.stderr)

        target = self.output_path(output)
        logger.info("Concatenated %d clips into %s", len(self._members), target.name)
        return target

