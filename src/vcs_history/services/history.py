"""History service."""

from pathlib import Path

from vcs_history.backends.base import Repository
from vcs_history.backends.factory import RepositoryFactory
from vcs_history.core.exceptions import RepositoryNotFoundError
from vcs_history.core.models.annotation import Annotation
from vcs_history.core.models.history import History
from vcs_history.process.content import TemporaryContent


class HistoryService:
    """Service for history operations on arbitrary paths."""

    def __init__(self, factory: RepositoryFactory) -> None:
        self._factory = factory

    def repository_for(self, path: str | Path) -> Repository:
        """Get the backend owning ``path``."""
        repository = self._factory.get_repository(path)
        if repository is None:
            raise RepositoryNotFoundError(
                f"No supported repository contains {path}",
                details={"path": str(path)},
            )
        return repository

    def history(self, path: str | Path, since_revision: str | None = None) -> History:
        path = Path(path).resolve()
        return self.repository_for(path).get_history(path, since_revision)

    def annotate(self, path: str | Path, revision: str | None = None) -> Annotation:
        path = Path(path).resolve()
        return self.repository_for(path).annotate(path, revision)

    def content(self, path: str | Path, revision: str, required: bool = False) -> TemporaryContent | None:
        path = Path(path).resolve()
        return self.repository_for(path).get_history_get(path.parent, path.name, revision, required)

    def update(self, root: str | Path) -> bool:
        return self.repository_for(root).update()
