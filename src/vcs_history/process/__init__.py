"""Process and temporary file handling."""

from vcs_history.process.content import TemporaryContent, allocate_temporary_path
from vcs_history.process.runner import ExitPolicy, ProcessRunner, RunningProcess

__all__ = [
    "ExitPolicy",
    "ProcessRunner",
    "RunningProcess",
    "TemporaryContent",
    "allocate_temporary_path",
]
