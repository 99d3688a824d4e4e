"""
Custom exception types for bumpcheck.
Maps error codes (6001-6099) to exception classes, one per error kind.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds reported by an INTERNAL_ERROR outcome."""

    TOOL_NOT_FOUND = "tool_not_found"
    PROCESS_LAUNCH = "process_launch"
    PROCESS_WAIT = "process_wait"
    PROCESS_TIMEOUT = "process_timeout"
    INVALID_STATUS_TOKEN = "invalid_status_token"
    GIT_COMMAND = "git_command"
    EXPORT = "export"
    CLONE = "clone"
    DESCRIPTOR_PARSE = "descriptor_parse"
    NO_ROOT_ELEMENT = "no_root_element"
    CLEANUP = "cleanup"
    UNEXPECTED = "unexpected"


class BumpCheckError(Exception):
    """Base exception for bumpcheck errors."""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, error_code: int, message: str, context: dict | None = None):
        """
        Initialize bumpcheck error.

        Args:
            error_code: Error code in range 6001-6099
            message: Human-readable error message
            context: Additional context dict with details
        """
        self.error_code = error_code
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return formatted error string for logging."""
        context_str = f" | Context: {self.context}" if self.context else ""
        return f"[{self.error_code}] {self.message}{context_str}"


class ToolNotFoundError(BumpCheckError):
    """6001: The git executable cannot be invoked at all."""

    kind = ErrorKind.TOOL_NOT_FOUND

    def __init__(self, message: str = "git executable not found", context: dict | None = None):
        super().__init__(6001, message, context)


class ProcessLaunchError(BumpCheckError):
    """6002: External process could not be started."""

    kind = ErrorKind.PROCESS_LAUNCH

    def __init__(self, message: str = "Process launch failed", context: dict | None = None):
        super().__init__(6002, message, context)


class ProcessWaitError(BumpCheckError):
    """6003: Waiting for process termination failed."""

    kind = ErrorKind.PROCESS_WAIT

    def __init__(self, message: str = "Process wait failed", context: dict | None = None):
        super().__init__(6003, message, context)


class ProcessTimeoutError(BumpCheckError):
    """6004: Process did not terminate within the configured timeout."""

    kind = ErrorKind.PROCESS_TIMEOUT

    def __init__(self, message: str = "Process timed out", context: dict | None = None):
        super().__init__(6004, message, context)


class InvalidStatusTokenError(BumpCheckError):
    """6005: Unrecognized porcelain status code."""

    kind = ErrorKind.INVALID_STATUS_TOKEN

    def __init__(self, message: str = "Invalid status token", context: dict | None = None):
        super().__init__(6005, message, context)


class MalformedStatusLineError(InvalidStatusTokenError):
    """6005: Porcelain line is not exactly ``<token> <path>``."""

    def __init__(self, message: str = "Malformed status line", context: dict | None = None):
        super().__init__(message, context)


class GitCommandError(BumpCheckError):
    """6006: A git query exited non-zero where success was required."""

    kind = ErrorKind.GIT_COMMAND

    def __init__(self, message: str = "git command failed", context: dict | None = None):
        super().__init__(6006, message, context)


class ExportError(BumpCheckError):
    """6007: File could not be exported from a revision."""

    kind = ErrorKind.EXPORT

    def __init__(self, message: str = "Export failed", context: dict | None = None):
        super().__init__(6007, message, context)


class CloneError(BumpCheckError):
    """6008: Repository clone failed."""

    kind = ErrorKind.CLONE

    def __init__(self, message: str = "Clone failed", context: dict | None = None):
        super().__init__(6008, message, context)


class DescriptorParseError(BumpCheckError):
    """6009: Descriptor file missing, unreadable or malformed."""

    kind = ErrorKind.DESCRIPTOR_PARSE

    def __init__(self, message: str = "Descriptor parse failed", context: dict | None = None):
        super().__init__(6009, message, context)


class NoRootElementError(BumpCheckError):
    """6010: Descriptor document has no root element."""

    kind = ErrorKind.NO_ROOT_ELEMENT

    def __init__(self, message: str = "No root element", context: dict | None = None):
        super().__init__(6010, message, context)


class CleanupError(BumpCheckError):
    """6011: Temporary artifact could not be deleted. Non-fatal."""

    kind = ErrorKind.CLEANUP

    def __init__(self, message: str = "Cleanup failed", context: dict | None = None):
        super().__init__(6011, message, context)
