"""Pytest configuration and fixtures."""

import shutil
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from vcs_history.config.settings import Settings

ARG_SEPARATOR = "\x1e"
CALL_SEPARATOR = "\x1d"

requires_posix = pytest.mark.skipif(sys.platform == "win32", reason="fake tools are POSIX shell scripts")
requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
requires_hg = pytest.mark.skipif(shutil.which("hg") is None, reason="hg is not installed")


def read_calls(tool: Path) -> list[list[str]]:
    """Return the argument vectors a fake tool was invoked with."""
    log = tool.with_name(tool.name + ".calls")
    if not log.exists():
        return []
    calls = log.read_text().split(CALL_SEPARATOR)
    return [call.split(ARG_SEPARATOR)[:-1] for call in calls[:-1]]


@pytest.fixture
def fake_tool(tmp_path: Path) -> Callable[[str, str], Path]:
    """Create an executable shell script that logs its arguments.

    The body receives the tool arguments as ``$1``, ``$2``...
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def _make(name: str, body: str) -> Path:
        script = bin_dir / name
        calls = bin_dir / f"{name}.calls"
        script.write_text(
            "#!/bin/sh\n"
            f'for arg in "$0" "$@"; do printf "%s\\036" "$arg" >> "{calls}"; done\n'
            f'printf "\\035" >> "{calls}"\n'
            f"{body}\n"
        )
        script.chmod(0o755)
        return script

    return _make


@pytest.fixture
def settings() -> Settings:
    """Settings that ignore the environment's tool overrides."""
    return Settings(
        clearcase_command="cleartool",
        mercurial_command="hg",
        git_command="git",
        verbose_history=False,
        cacheable=True,
    )


def run_git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a Git repository with two commits touching docs/entity.md."""
    repo_path = tmp_path / "test-repo"
    repo_path.mkdir()

    run_git(repo_path, "init")
    run_git(repo_path, "config", "user.email", "test@test.com")
    run_git(repo_path, "config", "user.name", "Test")
    run_git(repo_path, "config", "commit.gpgsign", "false")

    (repo_path / "docs").mkdir()
    (repo_path / "docs" / "entity.md").write_text("# Entity\n\nContent here.\n")
    (repo_path / "README.md").write_text("# Test Repo\n\nA test repository.\n")
    run_git(repo_path, "add", ".")
    run_git(repo_path, "commit", "-m", "Initial commit")

    (repo_path / "docs" / "entity.md").write_text("# Entity\n\nUpdated content.\n")
    run_git(repo_path, "add", ".")
    run_git(repo_path, "commit", "-m", "Update entity\n\nLonger explanation.")

    return repo_path


@pytest.fixture
def git_revisions(git_repo: Path) -> list[str]:
    """Commit hashes of ``git_repo``, newest first."""
    return run_git(git_repo, "rev-list", "HEAD").splitlines()
