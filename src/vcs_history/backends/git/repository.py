"""Git backend driven by the ``git`` command line."""

from pathlib import Path

import structlog

from vcs_history.backends.base import AnnotationParser, HistoryParser, Repository
from vcs_history.backends.git.parser import (
    FOLLOW_FORMAT,
    LOG_FORMAT,
    GitBlameParser,
    GitHistoryParser,
    parse_follow_names,
)
from vcs_history.core.exceptions import NonZeroExitError, ParseError
from vcs_history.process.content import discard
from vcs_history.process.runner import ExitPolicy

logger = structlog.get_logger(__name__)


class GitRepository(Repository):
    """Access to a Git working tree.

    Uses subprocess + git CLI directly (no gitpython dependency).
    """

    type_name = "git"
    default_command = "git"

    @classmethod
    def is_repository_for(cls, directory: Path) -> bool:
        return (directory / ".git").exists()

    def file_has_history(self, path: str | Path) -> bool:
        """Only files git tracks have history."""
        relative = self.relative_path(path)
        argv = [self.command, "ls-files", "--error-unmatch", "--", relative or "."]
        with self._runner.spawn(argv) as process:
            return process.wait(ExitPolicy.REPORT) == 0

    def _history_argv(self, relative: str, is_directory: bool) -> list[str]:
        argv = [self.command, "log", f"--format={LOG_FORMAT}"]
        if relative and not is_directory:
            argv.append("--follow")
        if self.config.verbose:
            argv.append("--name-only")
        argv.extend(["--", relative or "."])
        return argv

    def _history_parser(self, relative: str) -> HistoryParser:
        return GitHistoryParser()

    def _content_argv(self, relative: str, revision: str, target: str) -> list[str]:
        return [self.command, "show", f"{revision}:./{relative}"]

    def _materialize(self, relative: str, revision: str, target: str) -> None:
        try:
            self._show(relative, revision, target)
        except NonZeroExitError:
            earlier_name = self._name_at_revision(relative, revision)
            if earlier_name is None or earlier_name == relative:
                raise
            logger.debug("Following rename", path=relative, earlier_name=earlier_name, revision=revision)
            discard(target)
            self._show(earlier_name, revision, target)

    def _show(self, relative: str, revision: str, target: str) -> None:
        # git prints blobs to stdout; send it straight into the target file
        with open(target, "xb") as output:
            with self._runner.spawn(self._content_argv(relative, revision, target), stdout=output) as process:
                process.wait(ExitPolicy.STRICT)

    def _name_at_revision(self, relative: str, revision: str) -> str | None:
        """Return the name ``relative`` had at ``revision``, following renames."""
        argv = [self.command, "log", "--follow", "--name-only", f"--format={FOLLOW_FORMAT}", "--", relative]
        try:
            names = parse_follow_names(self._runner.run(argv))
        except (NonZeroExitError, ParseError) as exc:
            logger.debug("Could not trace renames", path=relative, revision=revision, error=str(exc))
            return None

        # the newest commit touching the file that the revision contains
        for sha, name in names:
            if sha.startswith(revision) or self._is_ancestor(sha, revision):
                return name
        return None

    def _is_ancestor(self, commit: str, revision: str) -> bool:
        argv = [self.command, "merge-base", "--is-ancestor", commit, revision]
        with self._runner.spawn(argv) as process:
            return process.wait(ExitPolicy.REPORT) == 0

    def _annotate_argv(self, name: str, revision: str | None) -> list[str]:
        argv = [self.command, "blame", "--line-porcelain"]
        if revision is not None:
            argv.append(revision)
        argv.extend(["--", name])
        return argv

    def _annotation_parser(self) -> AnnotationParser:
        return GitBlameParser()
