"""Parsers for git output."""

import re
from collections.abc import Iterable
from datetime import datetime

from vcs_history.backends.base import AnnotationParser, HistoryParser
from vcs_history.core.exceptions import ParseError
from vcs_history.core.models.annotation import Annotation, AnnotationBuilder
from vcs_history.core.models.history import HistoryEntry

# Same shape as the default "git log" output, with an ISO date.
LOG_FORMAT = "commit %H%nauthor %an <%ae>%ndate %aI%n%n%w(0,4,4)%B"
MESSAGE_INDENT = "    "

_COMMIT_LINE = re.compile(r"^commit (?P<sha>[0-9a-f]{40}|[0-9a-f]{64})$")
_BLAME_HEADER = re.compile(
    r"^(?P<sha>[0-9a-f]{40}|[0-9a-f]{64}) (?P<orig>\d+) (?P<final>\d+)(?: (?P<count>\d+))?$"
)


def is_uncommitted(sha: str) -> bool:
    return not sha.strip("0")


class GitHistoryParser(HistoryParser):
    """Parses ``git log --format=LOG_FORMAT [--name-only]`` output.

    Message lines are indented; with ``--name-only`` the changed files
    follow the message unindented.
    """

    def parse(self, lines: Iterable[str]) -> list[HistoryEntry]:
        entries: list[HistoryEntry] = []
        current: dict | None = None

        for line_number, line in enumerate(lines, start=1):
            match = _COMMIT_LINE.match(line)
            if match:
                if current is not None:
                    entries.append(self._entry(current))
                current = {"revision": match["sha"], "message": [], "files": set()}
            elif current is None:
                if line:
                    raise ParseError("Output before first commit", line_number, line)
            elif "author" not in current:
                if not line.startswith("author "):
                    raise ParseError("Expected author line", line_number, line)
                current["author"] = line[len("author "):]
            elif "date" not in current:
                if not line.startswith("date "):
                    raise ParseError("Expected date line", line_number, line)
                try:
                    current["date"] = datetime.fromisoformat(line[len("date "):])
                except ValueError:
                    raise ParseError("Could not parse date", line_number, line) from None
            elif line.startswith(MESSAGE_INDENT):
                current["message"].append(line[len(MESSAGE_INDENT):])
            elif not line:
                current["message"].append("")
            else:
                current["files"].add(line)

        if current is not None:
            entries.append(self._entry(current))
        return entries

    @staticmethod
    def _entry(current: dict) -> HistoryEntry:
        if "date" not in current:
            raise ParseError(f"Incomplete commit record {current['revision']}")
        return HistoryEntry(
            revision=current["revision"],
            author=current["author"],
            date=current["date"],
            message="\n".join(current["message"]).strip(),
            changed_files=frozenset(current["files"]),
        )


class GitBlameParser(AnnotationParser):
    """Parses ``git blame --line-porcelain`` output.

    Every source line comes as a header, key/value lines and the
    tab-prefixed content. Uncommitted lines are marked unresolved.
    """

    def parse(self, filename: str, lines: Iterable[str]) -> Annotation:
        builder = AnnotationBuilder(filename)
        sha: str | None = None
        author = ""
        expected = 1

        for line_number, line in enumerate(lines, start=1):
            if sha is None:
                match = _BLAME_HEADER.match(line)
                if match is None:
                    raise ParseError("Expected blame header", line_number, line)
                if int(match["final"]) != expected:
                    raise ParseError("Blame lines out of order", line_number, line)
                sha, author = match["sha"], ""
            elif line.startswith("\t"):
                builder.add_line(sha, author, resolved=not is_uncommitted(sha))
                sha = None
                expected += 1
            elif line.startswith("author "):
                author = line[len("author "):]

        if sha is not None:
            raise ParseError(f"Unterminated blame record for {sha}")
        return builder.build()


FOLLOW_FORMAT = "commit %H"


def parse_follow_names(lines: Iterable[str]) -> list[tuple[str, str]]:
    """Parse ``git log --follow --name-only --format=FOLLOW_FORMAT`` output.

    Returns ``(commit, path)`` pairs, newest first, where ``path`` is the
    name the followed file had in that commit.
    """
    result: list[tuple[str, str]] = []
    sha: str | None = None
    for line_number, line in enumerate(lines, start=1):
        match = _COMMIT_LINE.match(line)
        if match:
            sha = match["sha"]
        elif not line:
            continue
        elif sha is None:
            raise ParseError("Path before first commit", line_number, line)
        elif not result or result[-1][0] != sha:
            result.append((sha, line))
    return result
