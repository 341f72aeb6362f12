"""History models shared by every backend."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from vcs_history.core.exceptions import HistoryNotFoundError


class HistoryEntry(BaseModel):
    """One changeset/version in the history of a file or directory.

    The revision is an opaque token: it is only ever compared as an
    exact string outside the backend that produced it.
    """

    model_config = ConfigDict(frozen=True)

    revision: str
    author: str
    date: datetime
    message: str = ""
    changed_files: frozenset[str] = Field(default_factory=frozenset)


class History(BaseModel):
    """Ordered history, most recent entry first."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[HistoryEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def revisions(self) -> tuple[str, ...]:
        return tuple(entry.revision for entry in self.entries)

    def since(self, revision: str) -> "History":
        """Return the entries strictly newer than ``revision``.

        Raises HistoryNotFoundError when no entry carries that revision.
        """
        for index, entry in enumerate(self.entries):
            if entry.revision == revision:
                return History(entries=self.entries[:index])
        raise HistoryNotFoundError(revision)
