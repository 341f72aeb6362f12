"""Core domain models and exceptions for VCS-History."""

from vcs_history.core.exceptions import (
    ConfigurationError,
    HistoryError,
    HistoryNotFoundError,
    NonZeroExitError,
    ParseError,
    PathOutsideRepositoryError,
    RepositoryNotFoundError,
    SpawnError,
)
from vcs_history.core.models import (
    AnnotatedLine,
    Annotation,
    AnnotationBuilder,
    History,
    HistoryEntry,
    RepositoryConfig,
)

__all__ = [
    # Models
    "AnnotatedLine",
    "Annotation",
    "AnnotationBuilder",
    "History",
    "HistoryEntry",
    "RepositoryConfig",
    # Exceptions
    "HistoryError",
    "ConfigurationError",
    "SpawnError",
    "NonZeroExitError",
    "ParseError",
    "HistoryNotFoundError",
    "RepositoryNotFoundError",
    "PathOutsideRepositoryError",
]
