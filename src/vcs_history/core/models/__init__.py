"""Domain models for VCS-History."""

from vcs_history.core.models.annotation import AnnotatedLine, Annotation, AnnotationBuilder
from vcs_history.core.models.history import History, HistoryEntry
from vcs_history.core.models.repository import RepositoryConfig

__all__ = [
    "AnnotatedLine",
    "Annotation",
    "AnnotationBuilder",
    "History",
    "HistoryEntry",
    "RepositoryConfig",
]
