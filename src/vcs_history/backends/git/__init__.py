"""Git backend."""

from vcs_history.backends.git.repository import GitRepository

__all__ = ["GitRepository"]
