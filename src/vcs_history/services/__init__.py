"""Business logic services for VCS-History."""

from vcs_history.services.history import HistoryService

__all__ = ["HistoryService"]
