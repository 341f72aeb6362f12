"""Base interface shared by every version-control backend."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import ClassVar

import structlog

from vcs_history.core.exceptions import HistoryError, PathOutsideRepositoryError
from vcs_history.core.models.annotation import Annotation
from vcs_history.core.models.history import History, HistoryEntry
from vcs_history.core.models.repository import RepositoryConfig
from vcs_history.process.content import TemporaryContent, allocate_temporary_path, discard
from vcs_history.process.runner import ExitPolicy, ProcessRunner

logger = structlog.get_logger(__name__)


class HistoryParser(ABC):
    """Turns the stdout of a history command into entries, newest first."""

    @abstractmethod
    def parse(self, lines: Iterable[str]) -> list[HistoryEntry]:
        """Parse every line; raise ParseError on malformed records."""


class AnnotationParser(ABC):
    """Turns the stdout of an annotate command into an Annotation."""

    @abstractmethod
    def parse(self, filename: str, lines: Iterable[str]) -> Annotation:
        """Parse every line; raise ParseError on malformed lines."""


class Repository(ABC):
    """A working copy served by one external version-control tool.

    Subclasses provide the argument vectors and output grammars; the
    spawn, parse and cleanup sequence lives here.
    """

    type_name: ClassVar[str]
    default_command: ClassVar[str]

    def __init__(self, config: RepositoryConfig) -> None:
        self._config = config
        self._root = Path(config.root_directory)
        self._runner = ProcessRunner(self._root)

    @property
    def config(self) -> RepositoryConfig:
        return self._config

    @property
    def root(self) -> Path:
        return self._root

    @property
    def command(self) -> str:
        return self._config.command or self.default_command

    @classmethod
    @abstractmethod
    def is_repository_for(cls, directory: Path) -> bool:
        """Return True if ``directory`` is the root of a working copy."""

    # --- Capabilities ---

    def supports_annotation(self) -> bool:
        return True

    def is_cacheable(self) -> bool:
        return self._config.cacheable

    def file_has_history(self, path: str | Path) -> bool:
        """Conservatively True: the tool reports empty history itself."""
        return True

    # --- Paths ---

    def relative_path(self, path: str | Path) -> str:
        """Return ``path`` relative to the root, with ``/`` separators."""
        absolute = Path(path)
        if not absolute.is_absolute():
            absolute = self._root / absolute
        absolute = absolute.resolve()
        try:
            relative = absolute.relative_to(self._root)
        except ValueError:
            raise PathOutsideRepositoryError(
                f"{absolute} is not inside repository {self._root}",
                details={"path": str(absolute), "root": str(self._root)},
            ) from None
        return relative.as_posix() if relative.parts else ""

    # --- History ---

    def get_history(self, path: str | Path, since_revision: str | None = None) -> History:
        """Return the history of ``path``, most recent entry first.

        With ``since_revision``, only the entries strictly newer than that
        revision are returned; an unknown revision raises
        HistoryNotFoundError.
        """
        relative = self.relative_path(path)
        is_directory = (self._root / relative).is_dir()
        argv = self._history_argv(relative, is_directory)

        with self._runner.spawn(argv) as process:
            entries = self._history_parser(relative).parse(process.lines())
            process.wait(ExitPolicy.STRICT)

        history = History(entries=tuple(entries))
        if since_revision is not None:
            history = history.since(since_revision)
        logger.debug(
            "History retrieved",
            backend=self.type_name,
            path=relative or ".",
            entries=len(history),
            since=since_revision,
        )
        return history

    @abstractmethod
    def _history_argv(self, relative: str, is_directory: bool) -> list[str]:
        """Build the history listing command for ``relative``."""

    @abstractmethod
    def _history_parser(self, relative: str) -> HistoryParser:
        """Return the parser matching ``_history_argv`` output."""

    # --- Content ---

    def get_history_get(
        self,
        parent: str | Path,
        basename: str,
        revision: str,
        required: bool = False,
    ) -> TemporaryContent | None:
        """Return the content of ``parent/basename`` as of ``revision``.

        The returned stream deletes its temporary file when closed. On
        failure None is returned, unless ``required`` is set, in which
        case the error propagates.
        """
        target = allocate_temporary_path()
        try:
            relative = self.relative_path(Path(parent) / basename)
            self._materialize(relative, revision, target)
            return TemporaryContent(target)
        except (HistoryError, OSError) as exc:
            logger.warning(
                "Failed to get historical content",
                backend=self.type_name,
                path=str(Path(parent) / basename),
                revision=revision,
                error=str(exc),
            )
            discard(target)
            if required:
                raise
            return None

    def _materialize(self, relative: str, revision: str, target: str) -> None:
        """Have the tool write ``relative`` at ``revision`` to ``target``."""
        with self._runner.spawn(self._content_argv(relative, revision, target)) as process:
            process.wait(ExitPolicy.STRICT)

    @abstractmethod
    def _content_argv(self, relative: str, revision: str, target: str) -> list[str]:
        """Build the command that writes a historical revision to ``target``."""

    # --- Annotation ---

    def annotate(self, path: str | Path, revision: str | None = None) -> Annotation:
        """Attribute every line of ``path`` to the revision that last changed it.

        Without a revision the working copy is annotated. A non-zero exit
        is logged and the lines parsed so far are returned.
        """
        file_path = Path(path)
        if not file_path.is_absolute():
            file_path = self._root / file_path
        runner = ProcessRunner(file_path.parent)
        argv = self._annotate_argv(file_path.name, revision)

        with runner.spawn(argv) as process:
            annotation = self._annotation_parser().parse(file_path.name, process.lines())
            process.wait(ExitPolicy.BEST_EFFORT)
        return annotation

    @abstractmethod
    def _annotate_argv(self, name: str, revision: str | None) -> list[str]:
        """Build the annotate command for file ``name`` in its directory."""

    @abstractmethod
    def _annotation_parser(self) -> AnnotationParser:
        """Return the parser matching ``_annotate_argv`` output."""

    # --- Working copy ---

    def update(self) -> bool:
        """Refresh the working copy. No-op for tools without snapshot views."""
        logger.debug("Nothing to update", backend=self.type_name, root=str(self._root))
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._root)!r})"
