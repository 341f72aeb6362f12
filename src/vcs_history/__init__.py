"""VCS-History: uniform history retrieval over version-control command-line tools."""

__version__ = "0.1.0"
