"""
bumpcheck

Pre-commit guard that reports whether a project's build descriptor version
was bumped relative to the last committed revision.
"""

from .checker import CheckOutcome, CheckResult, TempArtifact, VersionChecker, check_directory
from .config import Config
from .descriptor import read_field
from .vcs import FileChangeStatus, GitRepo, GitTool, StatusReport

__version__ = "0.1.0"

__all__ = [
    "CheckOutcome",
    "CheckResult",
    "Config",
    "FileChangeStatus",
    "GitRepo",
    "GitTool",
    "StatusReport",
    "TempArtifact",
    "VersionChecker",
    "check_directory",
    "read_field",
]
