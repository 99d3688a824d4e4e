"""Blocking subprocess runner used by the git client.

Every call takes the full argv and working directory explicitly; the runner
keeps no per-call state, so one instance can serve any number of callers.
A non-zero exit code is returned to the caller, never raised here: whether
it means "failure" or just "no" depends on the git operation.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterator, List, Optional, Sequence

from bumpcheck.exceptions import ProcessLaunchError, ProcessTimeoutError, ProcessWaitError

logger = logging.getLogger(__name__)


def build_command(executable: str, verb: str, *args: str) -> List[str]:
    """Return a fresh argv for ``executable verb args...``."""
    return [executable, verb, *args]


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and captured output of a finished process."""

    exit_code: int
    stdout_lines: List[str] = field(default_factory=list)
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner:
    """Runs external commands synchronously in a given working directory.

    Attributes:
        timeout: Seconds to wait for a process before killing it, or ``None``
            to wait indefinitely.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout if timeout and timeout > 0 else None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _launch(
        self,
        argv: Sequence[str],
        cwd: Path,
        stdout: int | IO[bytes],
        stderr: int,
    ) -> subprocess.Popen:
        logger.debug(f"Running {' '.join(argv)} in {cwd}")
        try:
            return subprocess.Popen(
                list(argv),
                cwd=str(cwd),
                stdin=subprocess.DEVNULL,
                stdout=stdout,
                stderr=stderr,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ProcessLaunchError(
                f"Failed to start {argv[0]}: {e}",
                context={"argv": list(argv), "cwd": str(cwd)},
            ) from e

    def _wait(self, process: subprocess.Popen, argv: Sequence[str]) -> tuple[str, str]:
        """Wait for ``process`` and return its (stdout, stderr) text."""
        try:
            stdout, stderr = process.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.communicate()
            raise ProcessTimeoutError(
                f"{' '.join(argv)} did not finish within {self.timeout}s",
                context={"argv": list(argv), "timeout": self.timeout},
            )
        except OSError as e:
            process.kill()
            process.wait()
            raise ProcessWaitError(
                f"Failed waiting for {' '.join(argv)}: {e}",
                context={"argv": list(argv)},
            ) from e
        return stdout or "", stderr or ""

    def _read_lines(
        self, process: subprocess.Popen, argv: Sequence[str], expired: threading.Event
    ) -> Iterator[str]:
        for line in process.stdout:
            yield line.rstrip("\r\n")
        if expired.is_set():
            raise ProcessTimeoutError(
                f"{' '.join(argv)} did not finish within {self.timeout}s",
                context={"argv": list(argv), "timeout": self.timeout},
            )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, argv: Sequence[str], cwd: Path) -> ProcessResult:
        """Run ``argv`` in ``cwd`` and capture its output as lines.

        Raises:
            ProcessLaunchError: If the executable cannot be started
            ProcessWaitError: If waiting for termination fails
            ProcessTimeoutError: If the process outlives ``timeout``
        """
        process = self._launch(argv, cwd, subprocess.PIPE, subprocess.PIPE)
        stdout, stderr = self._wait(process, argv)
        return ProcessResult(
            exit_code=process.returncode,
            stdout_lines=stdout.splitlines(),
            stderr=stderr,
        )

    @contextmanager
    def stream(self, argv: Sequence[str], cwd: Path) -> Iterator[Iterator[str]]:
        """Run ``argv`` and yield a lazy, single-pass iterator over stdout lines.

        The caller may stop reading at any point. On exit the pipe is closed,
        a still-running process is terminated, and the process is reaped.

        The timeout covers reading as well: a process still running when it
        expires is killed, and reading past that point raises
        :class:`ProcessTimeoutError`.
        """
        process = self._launch(argv, cwd, subprocess.PIPE, subprocess.DEVNULL)
        expired = threading.Event()
        timer = None
        if self.timeout is not None:

            def _expire() -> None:
                expired.set()
                process.kill()

            timer = threading.Timer(self.timeout, _expire)
            timer.daemon = True
            timer.start()
        try:
            yield self._read_lines(process, argv, expired)
        finally:
            if timer is not None:
                timer.cancel()
            process.stdout.close()
            if process.poll() is None:
                process.terminate()
            try:
                process.wait(timeout=self.timeout)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
            except OSError as e:
                raise ProcessWaitError(
                    f"Failed waiting for {' '.join(argv)}: {e}",
                    context={"argv": list(argv)},
                ) from e

    def run_to_file(self, argv: Sequence[str], cwd: Path, destination: Path) -> ProcessResult:
        """Run ``argv`` with raw stdout written to ``destination``.

        Raises:
            OSError: If ``destination`` cannot be created
            ProcessLaunchError: If the executable cannot be started
            ProcessWaitError: If waiting for termination fails
            ProcessTimeoutError: If the process outlives ``timeout``
        """
        with open(destination, "wb") as handle:
            process = self._launch(argv, cwd, handle, subprocess.PIPE)
            _, stderr = self._wait(process, argv)
        return ProcessResult(exit_code=process.returncode, stderr=stderr)
