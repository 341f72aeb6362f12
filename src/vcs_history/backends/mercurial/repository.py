"""Mercurial backend driven by ``hg``."""

from pathlib import Path

import structlog

from vcs_history.backends.base import AnnotationParser, HistoryParser, Repository
from vcs_history.backends.mercurial.parser import (
    MercurialAnnotationParser,
    MercurialHistoryParser,
    history_template,
    parse_copies,
)
from vcs_history.core.exceptions import NonZeroExitError, ParseError
from vcs_history.process.content import discard

logger = structlog.get_logger(__name__)

_COPIES_TEMPLATE = "{rev}{file_copies % '\\t{name}\\t{source}'}\\n"


def node_of(revision: str) -> str:
    """Return what hg accepts for a ``rev:node`` identifier."""
    _, sep, node = revision.partition(":")
    return node if sep else revision


class MercurialRepository(Repository):
    """Access to a Mercurial working copy."""

    type_name = "mercurial"
    default_command = "hg"

    @classmethod
    def is_repository_for(cls, directory: Path) -> bool:
        return (directory / ".hg").is_dir()

    def _history_argv(self, relative: str, is_directory: bool) -> list[str]:
        argv = [self.command, "log"]
        if relative and not is_directory:
            argv.append("--follow")
        argv.extend(["--template", history_template(self.config.verbose)])
        if relative:
            argv.append(relative)
        return argv

    def _history_parser(self, relative: str) -> HistoryParser:
        return MercurialHistoryParser()

    def _content_argv(self, relative: str, revision: str, target: str) -> list[str]:
        return [self.command, "cat", "-r", node_of(revision), "-o", target, relative]

    def _materialize(self, relative: str, revision: str, target: str) -> None:
        try:
            super()._materialize(relative, revision, target)
        except NonZeroExitError:
            earlier_name = self._name_at_revision(relative, revision)
            if earlier_name is None or earlier_name == relative:
                raise
            logger.debug("Following rename", path=relative, earlier_name=earlier_name, revision=revision)
            discard(target)
            super()._materialize(earlier_name, revision, target)

    def _name_at_revision(self, relative: str, revision: str) -> str | None:
        """Walk copy records back to the name ``relative`` had at ``revision``."""
        try:
            lines = self._runner.run([self.command, "log", "-r", node_of(revision), "--template", "{rev}"])
            target_rev = int("".join(lines).strip())
            copies = parse_copies(
                self._runner.run([self.command, "log", "--follow", "--template", _COPIES_TEMPLATE, relative])
            )
        except (NonZeroExitError, ParseError, ValueError) as exc:
            logger.debug("Could not trace renames", path=relative, revision=revision, error=str(exc))
            return None

        name = relative
        for rev, renamed in copies:
            if rev <= target_rev:
                break
            name = renamed.get(name, name)
        return name

    def _annotate_argv(self, name: str, revision: str | None) -> list[str]:
        argv = [self.command, "annotate", "-u", "-n", "-c"]
        if revision is not None:
            argv.extend(["-r", node_of(revision)])
        argv.append(name)
        return argv

    def _annotation_parser(self) -> AnnotationParser:
        return MercurialAnnotationParser()
