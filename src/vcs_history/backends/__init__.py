"""Version-control backends for VCS-History."""

from vcs_history.backends.base import AnnotationParser, HistoryParser, Repository
from vcs_history.backends.factory import RepositoryFactory

__all__ = [
    "AnnotationParser",
    "HistoryParser",
    "Repository",
    "RepositoryFactory",
]
