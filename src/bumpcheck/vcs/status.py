"""Porcelain status tokens and the per-file status report."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Tuple

from bumpcheck.exceptions import InvalidStatusTokenError, MalformedStatusLineError


class FileChangeStatus(Enum):
    """Change state of a tracked file, keyed by its porcelain token.

    ``UNCHANGED`` is never emitted by git; it stands for "not listed in the
    status report" and cannot be obtained through :func:`decode`.
    """

    CREATED = "??"
    MODIFIED = "M"
    UNCHANGED = ""
    DELETED = "D"

    @property
    def token(self) -> str:
        return self.value


_EMITTED = {status.token: status for status in FileChangeStatus if status is not FileChangeStatus.UNCHANGED}


def decode(token: str) -> FileChangeStatus:
    """Map a porcelain status token to its :class:`FileChangeStatus`.

    Raises:
        InvalidStatusTokenError: If ``token`` is not ``??``, ``M`` or ``D``
    """
    try:
        return _EMITTED[token]
    except KeyError:
        raise InvalidStatusTokenError(
            f"Invalid status token: {token!r}", context={"token": token}
        ) from None


def parse_status_line(line: str) -> Tuple[str, FileChangeStatus]:
    """Split a porcelain line into ``(path, status)``.

    Raises:
        MalformedStatusLineError: If the line is not exactly two tokens
        InvalidStatusTokenError: If the status token is unknown
    """
    parts = line.split()
    if len(parts) != 2:
        raise MalformedStatusLineError(
            f"Expected '<status> <path>', got {line!r}", context={"line": line}
        )
    token, path = parts
    return path, decode(token)


class StatusReport(Mapping[str, FileChangeStatus]):
    """Read-only mapping of relative path to :class:`FileChangeStatus`."""

    def __init__(self, entries: Mapping[str, FileChangeStatus] | None = None) -> None:
        self._entries = MappingProxyType(dict(entries or {}))

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "StatusReport":
        """Build a report from porcelain output, skipping blank lines.

        Any malformed line fails the whole report.
        """
        entries = {}
        for line in lines:
            if not line.strip():
                continue
            path, status = parse_status_line(line)
            entries[path] = status
        return cls(entries)

    def status_of(self, path: str) -> FileChangeStatus:
        """Status of ``path``, or ``UNCHANGED`` when git did not report it."""
        return self._entries.get(path, FileChangeStatus.UNCHANGED)

    def __getitem__(self, path: str) -> FileChangeStatus:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"StatusReport({dict(self._entries)!r})"
