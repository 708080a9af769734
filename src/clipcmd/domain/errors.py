"""Domain errors — clipcmd exception hierarchy."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class ClipCmdError(Exception):
    """Base error for all clipcmd operations.

    Use ``raise ClipCmdError("msg") from cause`` for exception chaining.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(ClipCmdError):
    """Invalid configuration or bad settings."""


class ValidationError(ClipCmdError):
    """Invalid caller input — empty clip list, malformed edit plan."""


class ToolNotFoundError(ClipCmdError):
    """Required external executable is not on the execution path."""

    def __init__(self, tool: str, message: str | None = None) -> None:
        super().__init__(
            message
            or f"{tool} was not found in PATH; install FFmpeg (https://ffmpeg.org/) "
            "and make sure ffmpeg and ffprobe are on PATH"
        )
        self.tool = tool


class SourceFileNotFoundError(ClipCmdError):
    """Input media file does not exist or cannot be read."""

    def __init__(self, path: Path | str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Unable to load file {path}{detail}")
        self.path = Path(path)


class MalformedProbeOutputError(ClipCmdError):
    """ffprobe report could not be decoded or holds no usable stream."""


class ManifestWriteError(ClipCmdError):
    """Concat manifest could not be created or written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to write concat manifest {path}: {reason}")
        self.path = path


class ProcessError(ClipCmdError):
    """External process exited with a non-zero status."""

    def __init__(self, message: str, returncode: int, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ProbeExecutionError(ProcessError):
    """ffprobe exited abnormally."""


class ExecutionFailedError(ProcessError):
    """ffmpeg exited abnormally while rendering or concatenating."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = "") -> None:
        tail = stderr.strip().splitlines()[-1] if stderr.strip() else ""
        detail = f": {tail}" if tail else ""
        super().__init__(f"{command[0]} exited with status {returncode}{detail}", returncode, stderr)
        self.command = tuple(command)
