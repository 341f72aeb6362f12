"""Child process handling for external version-control tools.

Every tool invocation goes through :class:`ProcessRunner`, which:

- passes the argument vector literally (no shell),
- keeps stderr in an anonymous temporary file so the child never blocks
  on an unread pipe,
- only collects the exit status after stdout has been drained,
- reaps the child on every exit path, killing it if it is still running.
"""

import io
import subprocess
import sys
import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import IO

import structlog

from vcs_history.core.exceptions import NonZeroExitError, SpawnError

logger = structlog.get_logger(__name__)


class ExitPolicy(str, Enum):
    """How a non-zero exit status is treated by an operation."""

    STRICT = "strict"
    BEST_EFFORT = "best_effort"
    REPORT = "report"  # the status is the answer, nothing is logged


class RunningProcess:
    """A spawned tool whose output is being consumed."""

    def __init__(self, process: subprocess.Popen, argv: list[str], stderr: IO[bytes]) -> None:
        self._process = process
        self._argv = argv
        self._stderr = stderr
        # Only "\n" ends a line; a bare "\r" is line content.
        self._stdout = (
            io.TextIOWrapper(process.stdout, encoding="utf-8", errors="replace", newline="\n")
            if process.stdout is not None
            else None
        )

    @property
    def argv(self) -> list[str]:
        return self._argv

    @property
    def returncode(self) -> int | None:
        return self._process.returncode

    def lines(self) -> Iterator[str]:
        """Yield stdout lines without their line terminator."""
        if self._stdout is None:
            return
        for line in self._stdout:
            yield line.rstrip("\r\n")

    def drain(self) -> None:
        """Consume and discard whatever output is left."""
        for _ in self.lines():
            pass

    def stderr_text(self) -> str:
        self._stderr.seek(0)
        return self._stderr.read().decode("utf-8", errors="replace")

    def wait(self, policy: ExitPolicy = ExitPolicy.STRICT) -> int:
        """Drain stdout, then block until the process exits.

        Under ``STRICT`` a non-zero status raises NonZeroExitError, under
        ``BEST_EFFORT`` it is logged.
        """
        self.drain()
        returncode = self._process.wait()
        if returncode != 0 and policy is not ExitPolicy.REPORT:
            if policy is ExitPolicy.STRICT:
                raise NonZeroExitError(self._argv, returncode, self.stderr_text())
            logger.warning(
                "Command exited with non-zero status",
                command=self._argv[0],
                args=self._argv[1:],
                returncode=returncode,
                stderr=self.stderr_text().strip(),
            )
        return returncode

    def reap(self) -> None:
        """Release the child: close pipes and make sure it is not left behind."""
        try:
            if self._stdout is not None:
                self._stdout.close()
            if self._process.poll() is None:
                logger.warning(
                    "Command still running after use, killing it",
                    command=self._argv[0],
                    pid=self._process.pid,
                )
                self._process.kill()
                self._process.wait()
        except OSError as exc:
            logger.warning("Could not reap command", command=self._argv[0], error=str(exc))
        finally:
            self._stderr.close()


class ProcessRunner:
    """Spawns tools in a fixed working directory."""

    def __init__(self, working_directory: str | Path) -> None:
        self._working_directory = Path(working_directory)

    @contextmanager
    def spawn(
        self,
        argv: Sequence[str],
        stdout: IO[bytes] | None = None,
    ) -> Iterator[RunningProcess]:
        """Start ``argv`` and yield the running process.

        When ``stdout`` is given, the tool writes straight into that file
        instead of a pipe. The process is reaped when the block exits.
        """
        argv = list(argv)
        stderr = tempfile.TemporaryFile()
        logger.debug("Spawning command", argv=argv, cwd=str(self._working_directory))
        try:
            process = subprocess.Popen(
                argv,
                cwd=self._working_directory,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE if stdout is None else stdout,
                stderr=stderr,
                close_fds=(sys.platform != "win32"),
            )
        except OSError as exc:
            stderr.close()
            raise SpawnError(argv, exc.strerror or str(exc)) from exc

        running = RunningProcess(process, argv, stderr)
        try:
            yield running
        finally:
            running.reap()

    def run(self, argv: Sequence[str], policy: ExitPolicy = ExitPolicy.STRICT) -> list[str]:
        """Run ``argv`` to completion and return its stdout lines."""
        with self.spawn(argv) as process:
            lines = list(process.lines())
            process.wait(policy)
        return lines
