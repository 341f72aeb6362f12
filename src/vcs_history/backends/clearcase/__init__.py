"""ClearCase backend."""

from vcs_history.backends.clearcase.repository import ClearCaseRepository, UpdateState

__all__ = ["ClearCaseRepository", "UpdateState"]
