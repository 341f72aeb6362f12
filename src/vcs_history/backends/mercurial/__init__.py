"""Mercurial backend."""

from vcs_history.backends.mercurial.repository import MercurialRepository

__all__ = ["MercurialRepository"]
