"""Repository factory for creating backend instances."""

from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from vcs_history.backends.base import Repository
from vcs_history.core.models.repository import RepositoryConfig

if TYPE_CHECKING:
    from vcs_history.config.settings import Settings

logger = structlog.get_logger(__name__)


def _backend_class(backend: str) -> type[Repository]:
    if backend == "clearcase":
        from vcs_history.backends.clearcase import ClearCaseRepository

        return ClearCaseRepository
    elif backend == "mercurial":
        from vcs_history.backends.mercurial import MercurialRepository

        return MercurialRepository
    elif backend == "git":
        from vcs_history.backends.git import GitRepository

        return GitRepository
    else:
        raise ValueError(f"Unknown repository backend: {backend}")


# Probe order when detecting a working copy.
BACKENDS = ("git", "mercurial", "clearcase")


class RepositoryFactory:
    """Factory for creating repository backends.

    Backends are configured from the settings (tool commands, verbosity,
    cacheability) and selected either by name or by inspecting a
    directory.
    """

    def __init__(self, settings: "Settings") -> None:
        self._settings = settings

    def create(self, backend: str, root_directory: str | Path, **overrides: Any) -> Repository:
        """Create a backend of type ``backend`` rooted at ``root_directory``."""
        backend = backend.lower()
        repository_class = _backend_class(backend)
        values: dict[str, Any] = {
            "root_directory": str(root_directory),
            "command": self._settings.command_for(backend),
            "verbose": self._settings.verbose_history,
            "cacheable": self._settings.cacheable,
        }
        values.update(overrides)
        repository = repository_class(RepositoryConfig(**values))
        logger.debug("Repository created", backend=backend, root=repository.config.root_directory)
        return repository

    def detect(self, directory: str | Path) -> str | None:
        """Return the backend name owning ``directory`` itself, if any."""
        directory = Path(directory)
        for backend in BACKENDS:
            if _backend_class(backend).is_repository_for(directory):
                return backend
        return None

    def get_repository(self, path: str | Path) -> Repository | None:
        """Find the working copy containing ``path`` and return its backend."""
        start = Path(path).expanduser().resolve()
        if not start.is_dir():
            start = start.parent
        for directory in (start, *start.parents):
            backend = self.detect(directory)
            if backend is not None:
                logger.info("Repository detected", backend=backend, root=str(directory))
                return self.create(backend, directory)
        logger.debug("No repository found", path=str(path))
        return None
