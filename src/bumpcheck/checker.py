"""Version check orchestrator.

Decides, for one working directory, whether the descriptor's version field
was changed relative to the last committed revision:

- not a git repository            -> NOT_A_REPOSITORY
- clean working tree              -> NO_UNCOMMITTED_CHANGES
- descriptor untracked (new)      -> NEW_PROJECT
- descriptor not in the report    -> VERSION_UNCHANGED
- descriptor modified or deleted  -> export the committed descriptor and
  compare version strings (VERSION_UNCHANGED / VERSION_BUMPED)

Every failure is returned as an INTERNAL_ERROR result; :meth:`VersionChecker.check`
never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from types import TracebackType
from typing import Callable, Optional, Type

from bumpcheck.config import Config
from bumpcheck.descriptor import read_field
from bumpcheck.exceptions import BumpCheckError, CleanupError, ErrorKind
from bumpcheck.vcs.git import GitRepo, GitTool
from bumpcheck.vcs.status import FileChangeStatus

logger = logging.getLogger(__name__)

FieldReader = Callable[[Path, str], Optional[str]]


class CheckOutcome(str, Enum):
    """Terminal state of one check run."""

    NOT_A_REPOSITORY = "not_a_repository"
    NO_UNCOMMITTED_CHANGES = "no_uncommitted_changes"
    NEW_PROJECT = "new_project"
    VERSION_UNCHANGED = "version_unchanged"
    VERSION_BUMPED = "version_bumped"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one run plus whatever context was gathered on the way."""

    outcome: CheckOutcome
    directory: Path
    current_version: Optional[str] = None
    previous_version: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    detail: Optional[str] = None
    cleanup_error: Optional[str] = None

    @classmethod
    def internal_error(cls, directory: Path, kind: ErrorKind, detail: str) -> "CheckResult":
        return cls(CheckOutcome.INTERNAL_ERROR, directory, error_kind=kind, detail=detail)

    @property
    def message(self) -> str:
        """Single human-readable summary line."""
        where = str(self.directory)
        if self.outcome is CheckOutcome.NOT_A_REPOSITORY:
            return f"{where} is not a git repository."
        if self.outcome is CheckOutcome.NO_UNCOMMITTED_CHANGES:
            return f"{where} has no uncommitted changes."
        if self.outcome is CheckOutcome.NEW_PROJECT:
            return f"New project: {where}"
        if self.outcome is CheckOutcome.VERSION_UNCHANGED:
            if self.current_version is not None and self.current_version == self.previous_version:
                return f"Version not updated ({self.current_version}): {where}"
            return f"Version not updated: {where}"
        if self.outcome is CheckOutcome.VERSION_BUMPED:
            return f"Up to date ({self.previous_version} -> {self.current_version}): {where}"
        return f"Error checking {where} [{self.error_kind.value}]: {self.detail}"


class TempArtifact:
    """Scoped temporary file inside the working directory.

    The file is removed on ``__exit__`` whether or not the body raised,
    including after a partial write. A removal failure is logged and kept
    on :attr:`cleanup_error`; it never replaces the body's exception.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.cleanup_error: Optional[CleanupError] = None

    def __enter__(self) -> "TempArtifact":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.release()

    def release(self) -> None:
        if not self.path.exists():
            return
        try:
            self.path.unlink()
        except OSError as e:
            self.cleanup_error = CleanupError(
                f"Failed to delete {self.path}: {e}", context={"path": str(self.path)}
            )
            logger.error(str(self.cleanup_error))
        else:
            logger.debug(f"Removed {self.path}")


class VersionChecker:
    """Runs the version-bump decision procedure for one repository.

    Attributes:
        repo: Git client bound to the working directory
        config: Descriptor, field, revision and temp-file settings
        read_field: Descriptor field reader, ``(path, field_name) -> value``
    """

    def __init__(
        self,
        repo: GitRepo,
        config: Optional[Config] = None,
        field_reader: Optional[FieldReader] = None,
    ) -> None:
        self.repo = repo
        self.config = config or Config()
        self.read_field = field_reader or read_field

    @property
    def directory(self) -> Path:
        return self.repo.path

    @property
    def temp_path(self) -> Path:
        return self.directory / self.config.TEMP_FILE_NAME

    def check(self) -> CheckResult:
        """Run the check and return exactly one :class:`CheckResult`."""
        try:
            result = self._decide()
        except BumpCheckError as e:
            logger.error(f"Check failed for {self.directory}: {e}")
            result = CheckResult.internal_error(self.directory, e.kind, e.message)
        except Exception as e:
            logger.error(f"Unexpected error checking {self.directory}: {e}", exc_info=True)
            result = CheckResult.internal_error(self.directory, ErrorKind.UNEXPECTED, str(e))

        logger.info(f"{self.directory}: {result.outcome.value}")
        return result

    def _decide(self) -> CheckResult:
        if not self.repo.is_repository():
            return CheckResult(CheckOutcome.NOT_A_REPOSITORY, self.directory)

        if not self.repo.has_uncommitted_changes():
            return CheckResult(CheckOutcome.NO_UNCOMMITTED_CHANGES, self.directory)

        status = self.repo.status_report().status_of(self.config.DESCRIPTOR_FILE)
        logger.debug(f"{self.config.DESCRIPTOR_FILE} status: {status.name}")

        if status is FileChangeStatus.CREATED:
            return CheckResult(CheckOutcome.NEW_PROJECT, self.directory)
        if status is FileChangeStatus.UNCHANGED:
            return CheckResult(CheckOutcome.VERSION_UNCHANGED, self.directory)

        return self._compare_versions()

    def _compare_versions(self) -> CheckResult:
        """Export the committed descriptor and compare version fields."""
        artifact = TempArtifact(self.temp_path)
        try:
            with artifact:
                self.repo.export_file_at_revision(
                    self.config.DESCRIPTOR_FILE, self.config.REVISION, artifact.path
                )
                result = self._versions_result(artifact.path, self.config.VERSION_FIELD)
        except BumpCheckError as e:
            logger.error(f"Version comparison failed for {self.directory}: {e}")
            result = CheckResult.internal_error(self.directory, e.kind, e.message)
        except Exception as e:
            logger.error(f"Unexpected error comparing versions in {self.directory}: {e}", exc_info=True)
            result = CheckResult.internal_error(self.directory, ErrorKind.UNEXPECTED, str(e))

        if artifact.cleanup_error is not None:
            result = replace(result, cleanup_error=artifact.cleanup_error.message)
        return result

    def _versions_result(self, previous_descriptor: Path, field_name: str) -> CheckResult:
        current = self.read_field(self.directory / self.config.DESCRIPTOR_FILE, field_name)
        if current is None:
            # TODO: report a distinct "cannot determine" outcome instead of assuming no bump
            logger.warning(f"No <{field_name}> in working copy {self.config.DESCRIPTOR_FILE}; assuming not bumped")
            return CheckResult(CheckOutcome.VERSION_UNCHANGED, self.directory)

        previous = self.read_field(previous_descriptor, field_name)
        if previous is None:
            logger.warning(
                f"No <{field_name}> in {self.config.DESCRIPTOR_FILE} at {self.config.REVISION}; assuming not bumped"
            )
            return CheckResult(CheckOutcome.VERSION_UNCHANGED, self.directory, current_version=current)

        outcome = CheckOutcome.VERSION_UNCHANGED if current == previous else CheckOutcome.VERSION_BUMPED
        return CheckResult(
            outcome, self.directory, current_version=current, previous_version=previous
        )


def check_directory(
    directory: str | Path, config: Optional[Config] = None, tool: Optional[GitTool] = None
) -> CheckResult:
    """Build a :class:`GitRepo` for ``directory`` and run one check.

    A missing git executable is reported as an INTERNAL_ERROR result.
    """
    path = Path(directory).resolve()
    try:
        repo = GitRepo(path, tool=tool)
    except BumpCheckError as e:
        logger.error(f"Cannot check {path}: {e}")
        return CheckResult.internal_error(path, e.kind, e.message)
    return VersionChecker(repo, config).check()
