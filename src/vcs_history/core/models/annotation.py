"""Line annotation models."""

from pydantic import BaseModel, ConfigDict


class AnnotatedLine(BaseModel):
    """Attribution of a single source line."""

    model_config = ConfigDict(frozen=True)

    line_number: int
    revision: str
    author: str
    resolved: bool = True


class Annotation(BaseModel):
    """Per-line attribution of a file.

    Lines are numbered from 1 and stored in order.
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    lines: tuple[AnnotatedLine, ...] = ()

    def __len__(self) -> int:
        return len(self.lines)

    def _line(self, line_number: int) -> AnnotatedLine | None:
        if 1 <= line_number <= len(self.lines):
            return self.lines[line_number - 1]
        return None

    def get_revision(self, line_number: int) -> str | None:
        line = self._line(line_number)
        return line.revision if line else None

    def get_author(self, line_number: int) -> str | None:
        line = self._line(line_number)
        return line.author if line else None

    def is_resolved(self, line_number: int) -> bool:
        line = self._line(line_number)
        return bool(line and line.resolved)

    @property
    def revisions(self) -> set[str]:
        return {line.revision for line in self.lines if line.resolved}


class AnnotationBuilder:
    """Accumulates annotated lines while tool output is being parsed."""

    def __init__(self, filename: str) -> None:
        self._filename = filename
        self._lines: list[AnnotatedLine] = []

    def add_line(self, revision: str, author: str, resolved: bool = True) -> None:
        self._lines.append(
            AnnotatedLine(
                line_number=len(self._lines) + 1,
                revision=revision,
                author=author,
                resolved=resolved,
            )
        )

    def build(self) -> Annotation:
        return Annotation(filename=self._filename, lines=tuple(self._lines))
