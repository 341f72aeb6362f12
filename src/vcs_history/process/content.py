"""Temporary artifacts holding historical file content."""

import atexit
import io
import os
import tempfile
import threading

import structlog

logger = structlog.get_logger(__name__)

_pending_lock = threading.Lock()
_pending: set[str] = set()
_atexit_registered = False


def allocate_temporary_path(prefix: str = "vcs-history") -> str:
    """Reserve a unique temporary file name and remove the placeholder.

    Some tools refuse to write to a path that already exists, so only
    the name is kept.
    """
    fd, path = tempfile.mkstemp(prefix=prefix, suffix=".tmp")
    os.close(fd)
    os.remove(path)
    return path


def discard(path: str) -> None:
    """Remove ``path`` if it exists, deferring removal on failure."""
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove temporary file", path=path, error=str(exc))
        defer_removal(path)


def defer_removal(path: str) -> None:
    """Schedule ``path`` for removal when the interpreter exits."""
    global _atexit_registered
    with _pending_lock:
        _pending.add(path)
        if not _atexit_registered:
            atexit.register(remove_pending)
            _atexit_registered = True


def pending_removals() -> frozenset[str]:
    with _pending_lock:
        return frozenset(_pending)


def remove_pending() -> None:
    """Remove every file whose deletion was deferred."""
    with _pending_lock:
        paths = list(_pending)
        _pending.clear()
    for path in paths:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Temporary file left behind", path=path, error=str(exc))


class TemporaryContent(io.BufferedReader):
    """Binary stream over a temporary file that is deleted on close.

    The backing file is removed exactly once. If removal fails, it is
    deferred until interpreter exit.
    """

    def __init__(self, path: str) -> None:
        super().__init__(io.FileIO(path, "rb"))
        self._path = path
        self._released = False

    @property
    def path(self) -> str:
        return self._path

    def close(self) -> None:
        try:
            super().close()
        finally:
            self._release()

    def _release(self) -> None:
        if self._released:
            return
        self._released = True
        discard(self._path)
