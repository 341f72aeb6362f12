"""ClearCase backend driven by ``cleartool``."""

from enum import Enum
from pathlib import Path

import structlog

from vcs_history.backends.base import AnnotationParser, HistoryParser, Repository
from vcs_history.backends.clearcase.parser import (
    ANNOTATE_FORMAT,
    HISTORY_FORMAT,
    ClearCaseAnnotationParser,
    ClearCaseHistoryParser,
    is_snapshot_config_spec,
)
from vcs_history.core.exceptions import NonZeroExitError
from vcs_history.process.runner import ExitPolicy

logger = structlog.get_logger(__name__)


class UpdateState(str, Enum):
    """States of a snapshot view refresh."""

    PROBING = "probing"
    SNAPSHOT_DETECTED = "snapshot_detected"
    NOT_SNAPSHOT = "not_snapshot"
    UPDATED = "updated"
    FAILED = "failed"


class ClearCaseRepository(Repository):
    """Access to a ClearCase view."""

    type_name = "clearcase"
    default_command = "cleartool"

    @classmethod
    def is_repository_for(cls, directory: Path) -> bool:
        return (directory / "view.dat").is_file()

    def _history_argv(self, relative: str, is_directory: bool) -> list[str]:
        argv = [self.command, "lshistory"]
        if is_directory:
            argv.append("-dir")
        argv.extend(["-fmt", HISTORY_FORMAT, relative or "."])
        return argv

    def _history_parser(self, relative: str) -> HistoryParser:
        return ClearCaseHistoryParser(relative)

    def _content_argv(self, relative: str, revision: str, target: str) -> list[str]:
        return [self.command, "get", "-to", target, f"{relative}@@{revision}"]

    def _annotate_argv(self, name: str, revision: str | None) -> list[str]:
        argv = [self.command, "annotate", "-nheader", "-out", "-", "-f", "-fmt", ANNOTATE_FORMAT]
        argv.append(f"{name}@@{revision}" if revision is not None else name)
        return argv

    def _annotation_parser(self) -> AnnotationParser:
        return ClearCaseAnnotationParser()

    def is_snapshot_view(self) -> bool:
        """Probe the config spec; snapshot views carry load rules."""
        with self._runner.spawn([self.command, "catcs"]) as process:
            snapshot = is_snapshot_config_spec(process.lines())
            process.wait(ExitPolicy.STRICT)
        return snapshot

    def update(self) -> bool:
        """Refresh a snapshot view; dynamic views need nothing."""
        log = logger.bind(root=str(self.root))
        state = UpdateState.PROBING
        try:
            state = UpdateState.SNAPSHOT_DETECTED if self.is_snapshot_view() else UpdateState.NOT_SNAPSHOT
            if state is UpdateState.SNAPSHOT_DETECTED:
                with self._runner.spawn([self.command, "update", "-overwrite", "-f"]) as process:
                    process.wait(ExitPolicy.STRICT)
                state = UpdateState.UPDATED
        except NonZeroExitError as exc:
            log.error("ClearCase update failed", state=state.value, error=str(exc))
            state = UpdateState.FAILED
        log.info("ClearCase update finished", state=state.value)
        return state is not UpdateState.FAILED
