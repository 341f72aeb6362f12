"""Configuration for VCS-History."""

from vcs_history.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
