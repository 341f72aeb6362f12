"""Tests for the command line interface."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from conftest import requires_git
from vcs_history import cli as cli_module
from vcs_history.backends.factory import RepositoryFactory
from vcs_history.cli import cli
from vcs_history.config.settings import Settings
from vcs_history.services.history import HistoryService


@pytest.fixture
def runner(settings: Settings, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.setattr(cli_module, "_create_service", lambda: HistoryService(RepositoryFactory(settings)))
    return CliRunner()


@pytest.mark.unit
@requires_git
class TestCli:
    """Tests for the CLI commands."""

    def test_history(self, runner: CliRunner, git_repo: Path, git_revisions: list[str]) -> None:
        result = runner.invoke(cli, ["history", str(git_repo / "docs" / "entity.md")])

        assert result.exit_code == 0
        assert f"{git_revisions[0]}  " in result.output
        assert "Update entity" in result.output
        assert "Longer explanation" not in result.output
        assert "Initial commit" in result.output

    def test_history_since(self, runner: CliRunner, git_repo: Path, git_revisions: list[str]) -> None:
        result = runner.invoke(cli, ["history", str(git_repo), "--since", git_revisions[1]])

        assert result.exit_code == 0
        assert "Update entity" in result.output
        assert "Initial commit" not in result.output

    def test_history_unknown_since(self, runner: CliRunner, git_repo: Path) -> None:
        result = runner.invoke(cli, ["history", str(git_repo), "-s", "nope"])

        assert result.exit_code == 1
        assert "not found in the repository" in result.output

    def test_annotate(self, runner: CliRunner, git_repo: Path, git_revisions: list[str]) -> None:
        result = runner.invoke(cli, ["annotate", str(git_repo / "docs" / "entity.md")])

        assert result.exit_code == 0
        assert f"     3  {git_revisions[0]}  Test" in result.output

    def test_cat(self, runner: CliRunner, git_repo: Path, git_revisions: list[str]) -> None:
        result = runner.invoke(cli, ["cat", str(git_repo / "docs" / "entity.md"), git_revisions[1]])

        assert result.exit_code == 0
        assert b"Content here." in result.stdout_bytes

    def test_cat_unknown_revision(self, runner: CliRunner, git_repo: Path) -> None:
        result = runner.invoke(cli, ["cat", str(git_repo / "README.md"), "0" * 40])

        assert result.exit_code == 1
        assert "not available at revision" in result.output

    def test_update(self, runner: CliRunner, git_repo: Path) -> None:
        result = runner.invoke(cli, ["update", str(git_repo)])

        assert result.exit_code == 0
        assert f"Updated: {git_repo}" in result.output


@pytest.mark.unit
def test_no_repository(settings: Settings, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(cli_module, "_create_service", lambda: HistoryService(RepositoryFactory(settings)))

    result = CliRunner().invoke(cli, ["history", str(tmp_path)])

    assert result.exit_code == 1
    assert "No supported repository contains" in result.output
