"""SubprocessRunner — ProcessRunnerPort implementation using blocking subprocess calls."""

from __future__ import annotations

import contextlib
import io
import logging
import shlex
import subprocess
import tempfile
from collections.abc import Sequence
from typing import IO, TYPE_CHECKING, Any

from clipcmd.domain.errors import ToolNotFoundError
from clipcmd.domain.models import ProcessResult

if TYPE_CHECKING:
    from clipcmd.domain.ports import ProcessRunnerPort

logger = logging.getLogger(__name__)

STDERR_TAIL_BYTES = 64 * 1024


def _has_fileno(sink: IO[Any]) -> bool:
    try:
        sink.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return False
    return True


def _read_tail(spool: IO[bytes], limit: int) -> bytes:
    size = spool.seek(0, io.SEEK_END)
    spool.seek(max(size - limit, 0))
    return spool.read()


def _forward(data: bytes, sink: IO[Any]) -> None:
    """Write captured bytes to a sink that has no file descriptor."""
    if not data:
        return
    if isinstance(sink, io.TextIOBase):
        sink.write(data.decode(errors="replace"))
    else:
        sink.write(data)


class SubprocessRunner:
    """Run ffmpeg/ffprobe argument vectors and block until they exit.

    Output sinks:
      - ``None``: stdout is discarded. stderr is spooled to a temporary file
        and only its last ``STDERR_TAIL_BYTES`` are kept for error reports.
      - an object with a real file descriptor: handed straight to the child,
        so output streams live.
      - any other writable (``io.BytesIO``, ``io.StringIO``): output is captured
        and written to it once the process exits.
    """

    if TYPE_CHECKING:
        _protocol_check: ProcessRunnerPort

    def run(
        self,
        argv: Sequence[str],
        stdout: IO[Any] | None = None,
        stderr: IO[Any] | None = None,
    ) -> ProcessResult:
        if not argv:
            raise ValueError("argv must not be empty")

        stdout_target: Any = subprocess.DEVNULL
        if stdout is not None:
            stdout_target = stdout if _has_fileno(stdout) else subprocess.PIPE

        with contextlib.ExitStack() as stack:
            spool: IO[bytes] | None = None
            stderr_target: Any = subprocess.PIPE
            if stderr is None:
                spool = stack.enter_context(tempfile.TemporaryFile())
                stderr_target = spool
            elif _has_fileno(stderr):
                stderr_target = stderr

            logger.info("Running: %s", shlex.join(argv))
            try:
                completed = subprocess.run(list(argv), stdout=stdout_target, stderr=stderr_target, check=False)
            except (FileNotFoundError, PermissionError) as exc:
                raise ToolNotFoundError(argv[0], f"Unable to start {argv[0]}: {exc}") from exc

            if stdout is not None and stdout_target is subprocess.PIPE:
                _forward(completed.stdout, stdout)
            if spool is not None:
                captured_stderr = _read_tail(spool, STDERR_TAIL_BYTES)
            else:
                captured_stderr = completed.stderr or b""
                if stderr_target is subprocess.PIPE:
                    _forward(captured_stderr, stderr)

        logger.debug("%s exited with status %d", argv[0], completed.returncode)
        return ProcessResult(
            returncode=completed.returncode,
            stderr=captured_stderr.decode(errors="replace"),
        )
