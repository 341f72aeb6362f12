"""Repository configuration models."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator


class RepositoryConfig(BaseModel):
    """Configuration for one working copy served by a backend.

    Immutable once built; every backend instance owns exactly one.
    """

    model_config = ConfigDict(frozen=True)

    root_directory: str
    command: str | None = None  # None selects the backend default
    verbose: bool = False
    cacheable: bool = True
    name: str | None = None

    @field_validator("root_directory")
    @classmethod
    def _absolute_root(cls, value: str) -> str:
        return str(Path(value).expanduser().resolve())

    @property
    def display_name(self) -> str:
        return self.name or Path(self.root_directory).name
