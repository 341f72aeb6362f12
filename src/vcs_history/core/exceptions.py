"""Exception hierarchy for VCS-History."""

from typing import Any


class HistoryError(Exception):
    """Base class for all errors raised by VCS-History."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(HistoryError):
    """Invalid or inconsistent configuration."""


class SpawnError(HistoryError):
    """The external tool could not be started."""

    def __init__(self, argv: list[str], reason: str) -> None:
        super().__init__(
            f"Failed to start {argv[0]!r}: {reason}",
            details={"argv": argv, "reason": reason},
        )
        self.argv = argv


class NonZeroExitError(HistoryError):
    """The external tool ran to completion but reported failure."""

    def __init__(self, argv: list[str], returncode: int, stderr: str = "") -> None:
        message = f"{' '.join(argv[:2])} exited with code {returncode}"
        if stderr:
            message += f": {stderr.strip()}"
        super().__init__(
            message,
            details={"argv": argv, "returncode": returncode, "stderr": stderr},
        )
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr


class ParseError(HistoryError):
    """Tool output did not match the expected grammar."""

    def __init__(self, message: str, line_number: int | None = None, line: str | None = None) -> None:
        if line_number is not None:
            message = f"{message} (line {line_number}: {line!r})"
        super().__init__(message, details={"line_number": line_number, "line": line})
        self.line_number = line_number
        self.line = line


class HistoryNotFoundError(HistoryError):
    """A revision used as a history filter is unknown."""

    def __init__(self, revision: str) -> None:
        super().__init__(
            f"Revision {revision} not found in the repository",
            details={"revision": revision},
        )
        self.revision = revision


class RepositoryNotFoundError(HistoryError):
    """No supported repository contains the given path."""


class PathOutsideRepositoryError(HistoryError):
    """A path does not live below the repository root."""
