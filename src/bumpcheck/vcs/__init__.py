"""
VCS module exposing the git client.

Re-exports :class:`GitRepo`, :class:`GitTool` and the status types so other
parts of the project can import them as ``from bumpcheck.vcs import GitRepo``.
"""

from .git import GitRepo, GitTool
from .process import ProcessResult, ProcessRunner, build_command
from .status import FileChangeStatus, StatusReport, decode

__all__ = [
    "FileChangeStatus",
    "GitRepo",
    "GitTool",
    "ProcessResult",
    "ProcessRunner",
    "StatusReport",
    "build_command",
    "decode",
]
