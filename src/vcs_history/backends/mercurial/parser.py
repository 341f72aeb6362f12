"""Parsers for hg output."""

import re
from collections.abc import Iterable
from datetime import datetime

from vcs_history.backends.base import AnnotationParser, HistoryParser
from vcs_history.core.exceptions import ParseError
from vcs_history.core.models.annotation import Annotation, AnnotationBuilder
from vcs_history.core.models.history import HistoryEntry

END_OF_CHANGESET = "END_OF_CHANGESET"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"

_HEADER_FIELDS = ("changeset", "user", "date")
_FILE_PREFIX = "file: "
_DESCRIPTION = "description:"


def history_template(verbose: bool) -> str:
    """Template for ``hg log``; verbose output lists changed files."""
    files = "{files % 'file: {file}\\n'}" if verbose else ""
    return (
        "changeset: {rev}:{node|short}\\n"
        "user: {author}\\n"
        "date: {date|isodatesec}\\n"
        f"{files}"
        "description:\\n"
        "{desc|strip}\\n"
        f"{END_OF_CHANGESET}\\n"
    )


class MercurialHistoryParser(HistoryParser):
    """Parses ``hg log`` output produced by :func:`history_template`."""

    def parse(self, lines: Iterable[str]) -> list[HistoryEntry]:
        entries: list[HistoryEntry] = []
        fields: dict[str, str] = {}
        files: list[str] = []
        description: list[str] | None = None

        for line_number, line in enumerate(lines, start=1):
            if description is not None:
                if line == END_OF_CHANGESET:
                    entries.append(self._entry(fields, files, description, line_number))
                    fields, files, description = {}, [], None
                else:
                    description.append(line)
                continue

            if line == _DESCRIPTION:
                missing = [name for name in _HEADER_FIELDS if name not in fields]
                if missing:
                    raise ParseError(f"Changeset is missing {', '.join(missing)}", line_number, line)
                description = []
            elif line.startswith(_FILE_PREFIX) and fields:
                files.append(line[len(_FILE_PREFIX):])
            else:
                key, sep, value = line.partition(":")
                if not sep or key not in _HEADER_FIELDS or key in fields:
                    raise ParseError("Unexpected hg log line", line_number, line)
                if key != "changeset" and "changeset" not in fields:
                    raise ParseError("Changeset field expected first", line_number, line)
                fields[key] = value.strip()

        if fields or description is not None:
            raise ParseError("Unterminated changeset in hg log output")
        return entries

    @staticmethod
    def _entry(
        fields: dict[str, str], files: list[str], description: list[str], line_number: int
    ) -> HistoryEntry:
        try:
            date = datetime.strptime(fields["date"], DATE_FORMAT)
        except ValueError:
            raise ParseError("Could not parse date", line_number, fields["date"]) from None
        return HistoryEntry(
            revision=fields["changeset"],
            author=fields["user"],
            date=date,
            message="\n".join(description).strip(),
            changed_files=frozenset(files),
        )


# "<user> <rev> <node>: <text>" as printed by "hg annotate -u -n -c"
_ANNOTATE_LINE = re.compile(r"^\s*(?P<user>\S+)\s+(?P<rev>\d+)\s+(?P<node>[0-9a-f]{12,40}):(?: |$)")


class MercurialAnnotationParser(AnnotationParser):
    """Parses ``hg annotate -u -n -c`` output."""

    def parse(self, filename: str, lines: Iterable[str]) -> Annotation:
        builder = AnnotationBuilder(filename)
        for line_number, line in enumerate(lines, start=1):
            match = _ANNOTATE_LINE.match(line)
            if match is None:
                raise ParseError("Malformed annotate line", line_number, line)
            builder.add_line(f"{match['rev']}:{match['node']}", match["user"])
        return builder.build()


def parse_copies(lines: Iterable[str]) -> list[tuple[int, dict[str, str]]]:
    """Parse ``{rev}{file_copies % '\\t{name}\\t{source}'}`` lines.

    Returns ``(rev, {new name: source name})`` pairs in output order.
    """
    result: list[tuple[int, dict[str, str]]] = []
    for line_number, line in enumerate(lines, start=1):
        if not line:
            continue
        rev, *pairs = line.split("\t")
        if not rev.isdigit() or len(pairs) % 2:
            raise ParseError("Malformed copy record", line_number, line)
        result.append((int(rev), dict(zip(pairs[0::2], pairs[1::2]))))
    return result
