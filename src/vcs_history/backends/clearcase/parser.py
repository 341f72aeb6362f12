"""Parsers for cleartool output."""

from collections.abc import Iterable, Iterator
from datetime import datetime

from vcs_history.backends.base import AnnotationParser, HistoryParser
from vcs_history.core.exceptions import ParseError
from vcs_history.core.models.annotation import Annotation, AnnotationBuilder
from vcs_history.core.models.history import HistoryEntry

# lshistory record layout, one field per line, "." ends a record.
HISTORY_FORMAT = "%e\n%Nd\n%Fu (%u)\n%Vn\n%Nc\n.\n"
ANNOTATE_FORMAT = "%u|%Vn|"

RECORD_TERMINATOR = "."
DATE_FORMAT = "%Y%m%d.%H%M%S"
VERSION_EVENTS = frozenset({"create version", "create directory version"})
SNAPSHOT_MARKER = "load"


def normalize_version(label: str) -> str:
    r"""Turn a version label such as ``\main\3`` into ``/main/3``."""
    return label.replace("\\", "/")


class ClearCaseHistoryParser(HistoryParser):
    """Parses ``lshistory -fmt`` records.

    Each record is the event kind, the date, ``Full Name (login)``, the
    version label and a free-text comment, terminated by a lone ``.``.
    Only version-creating events become history entries.
    """

    def __init__(self, relative_path: str = "") -> None:
        self._changed_files = frozenset({relative_path}) if relative_path else frozenset()

    def parse(self, lines: Iterable[str]) -> list[HistoryEntry]:
        entries: list[HistoryEntry] = []
        numbered = enumerate(lines, start=1)
        for line_number, event in numbered:
            if not event.strip():
                continue
            if event == RECORD_TERMINATOR:
                raise ParseError("Empty lshistory record", line_number, event)
            if event not in VERSION_EVENTS:
                self._skip_record(numbered)
                continue

            date_number, date_text = self._field(numbered, "date")
            try:
                date = datetime.strptime(date_text, DATE_FORMAT)
            except ValueError:
                raise ParseError("Could not parse date", date_number, date_text) from None
            _, author = self._field(numbered, "author")
            _, version = self._field(numbered, "version")

            comment: list[str] = []
            for _, text in numbered:
                if text == RECORD_TERMINATOR:
                    break
                if text.strip():
                    comment.append(text.strip())
            else:
                raise ParseError(f"Unterminated lshistory record for {version!r}")

            entries.append(
                HistoryEntry(
                    revision=normalize_version(version),
                    author=author,
                    date=date,
                    message="\n".join(comment),
                    changed_files=self._changed_files,
                )
            )
        return entries

    @staticmethod
    def _field(numbered: Iterator[tuple[int, str]], name: str) -> tuple[int, str]:
        try:
            line_number, text = next(numbered)
        except StopIteration:
            raise ParseError(f"lshistory record ended before its {name}") from None
        if text == RECORD_TERMINATOR:
            raise ParseError(f"lshistory record ended before its {name}", line_number, text)
        return line_number, text

    @staticmethod
    def _skip_record(numbered: Iterator[tuple[int, str]]) -> None:
        for _, text in numbered:
            if text == RECORD_TERMINATOR:
                return


class ClearCaseAnnotationParser(AnnotationParser):
    """Parses ``annotate -fmt "%u|%Vn|"`` output: ``author|version|text``."""

    def parse(self, filename: str, lines: Iterable[str]) -> Annotation:
        builder = AnnotationBuilder(filename)
        for line_number, line in enumerate(lines, start=1):
            parts = line.split("|", 2)
            if len(parts) < 3:
                raise ParseError("Malformed annotate line", line_number, line)
            author, version = parts[0].strip(), parts[1].strip()
            builder.add_line(
                normalize_version(version),
                author,
                resolved=bool(author and version),
            )
        return builder.build()


def is_snapshot_config_spec(lines: Iterable[str]) -> bool:
    """Return True if a ``catcs`` config spec has load rules.

    Every line is consumed even after the marker is seen.
    """
    snapshot = False
    for line in lines:
        if line.lstrip().startswith(SNAPSHOT_MARKER):
            snapshot = True
    return snapshot
