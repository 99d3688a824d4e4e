"""Git VCS integration.

Provides:
- GitTool: a verified-once handle on the git executable
- GitRepo: status queries, file export by revision and clone for one
  working directory
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from bumpcheck.exceptions import (
    CloneError,
    ExportError,
    GitCommandError,
    ProcessLaunchError,
    ToolNotFoundError,
)
from bumpcheck.vcs.process import ProcessResult, ProcessRunner, build_command
from bumpcheck.vcs.status import StatusReport

logger = logging.getLogger(__name__)


class GitTool:
    """Capability object for invoking git.

    Availability is checked at most once per instance with ``git --version``;
    build one ``GitTool`` per process and pass it to every :class:`GitRepo`.

    Attributes:
        executable: Name or path of the git binary
        runner: Process runner used for every invocation
    """

    def __init__(self, executable: str = "git", runner: Optional[ProcessRunner] = None):
        self.executable = executable
        self.runner = runner or ProcessRunner()
        self._version: Optional[str] = None

    @property
    def version_string(self) -> Optional[str]:
        """First line of ``git --version``, once verified."""
        return self._version

    def command(self, verb: str, *args: str) -> list[str]:
        return build_command(self.executable, verb, *args)

    def ensure_available(self) -> str:
        """Verify git can be invoked, returning its version line.

        Raises:
            ToolNotFoundError: If git cannot be launched or reports nothing
        """
        if self._version is not None:
            return self._version

        try:
            result = self.runner.run(self.command("--version"), Path.cwd())
        except ProcessLaunchError as e:
            raise ToolNotFoundError(
                f"{self.executable} could not be invoked: {e.message}",
                context={"executable": self.executable},
            ) from e

        if not result.ok or not result.stdout_lines:
            raise ToolNotFoundError(
                f"{self.executable} --version returned no version (exit {result.exit_code})",
                context={"executable": self.executable, "stderr": result.stderr.strip()},
            )

        self._version = result.stdout_lines[0].strip()
        logger.debug(f"Using {self._version}")
        return self._version


class GitRepo:
    """Read-only view of a git working directory.

    Each operation builds its own argv and runs it with the working
    directory passed explicitly; the instance holds no per-call state.

    Attributes:
        path: Absolute path to the working directory
        tool: Verified git capability
    """

    def __init__(self, path: str | Path, tool: Optional[GitTool] = None):
        """Bind a working directory to a git tool.

        Raises:
            ToolNotFoundError: If git is not available on this machine
        """
        self.path = Path(path).resolve()
        self.tool = tool or GitTool()
        self.tool.ensure_available()

    def _run(self, verb: str, *args: str) -> ProcessResult:
        return self.tool.runner.run(self.tool.command(verb, *args), self.path)

    def is_repository(self) -> bool:
        """True if ``git status`` succeeds in the working directory."""
        if not self.path.is_dir():
            logger.debug(f"{self.path} is not a directory")
            return False
        return self._run("status").ok

    def has_uncommitted_changes(self) -> bool:
        """True if porcelain status reports at least one line.

        Only the first line is read; git is stopped once it has been seen.
        """
        argv = self.tool.command("status", "--porcelain")
        with self.tool.runner.stream(argv, self.path) as lines:
            return next(lines, None) is not None

    def status_report(self) -> StatusReport:
        """Per-file change status from ``git status --porcelain``.

        Raises:
            GitCommandError: If git status exits non-zero
            InvalidStatusTokenError: If any line is malformed or uses an
                unknown status code
        """
        result = self._run("status", "--porcelain")
        if not result.ok:
            raise GitCommandError(
                f"git status --porcelain failed in {self.path}: {result.stderr.strip()}",
                context={"exit_code": result.exit_code},
            )
        return StatusReport.from_lines(result.stdout_lines)

    def export_file_at_revision(
        self, relative_path: str, revision: str, destination: str | Path
    ) -> Path:
        """Write the content of ``relative_path`` at ``revision`` to ``destination``.

        Args:
            relative_path: File path relative to the repository root
            revision: ``HEAD~n``, a commit id or a tag; passed to git verbatim
            destination: Output file; relative paths resolve against the
                working directory

        Returns:
            The absolute destination path

        Raises:
            ExportError: If git show fails or the destination cannot be created
        """
        target = Path(destination)
        if not target.is_absolute():
            target = self.path / target

        argv = self.tool.command("show", f"{revision}:{relative_path}")
        try:
            result = self.tool.runner.run_to_file(argv, self.path, target)
        except OSError as e:
            raise ExportError(
                f"Cannot create export destination {target}: {e}",
                context={"destination": str(target)},
            ) from e

        if not result.ok:
            raise ExportError(
                f"Failed to export {relative_path} from {revision}: {result.stderr.strip()}",
                context={"path": relative_path, "revision": revision, "exit_code": result.exit_code},
            )

        logger.debug(f"Exported {revision}:{relative_path} to {target}")
        return target

    def clone(self, source_uri: str, destination: str | Path | None = None) -> Path:
        """Clone ``source_uri`` into ``destination`` (default: this working directory).

        Raises:
            CloneError: If git clone exits non-zero
        """
        target = Path(destination).resolve() if destination is not None else self.path
        argv = self.tool.command("clone", str(source_uri), str(target))
        # clone may target a directory that does not exist yet, so run from its parent
        result = self.tool.runner.run(argv, target.parent)
        if not result.ok:
            raise CloneError(
                f"Failed to clone {source_uri} into {target}: {result.stderr.strip()}",
                context={"uri": str(source_uri), "destination": str(target)},
            )
        logger.info(f"Cloned {source_uri} into {target}")
        return target
