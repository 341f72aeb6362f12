"""Tests for the Git backend against a real repository."""

from pathlib import Path

import pytest

from conftest import requires_git, run_git
from vcs_history.backends.git import GitRepository
from vcs_history.core.exceptions import HistoryNotFoundError, NonZeroExitError
from vcs_history.core.models.repository import RepositoryConfig

pytestmark = [pytest.mark.unit, requires_git]


def make_repository(root: Path, verbose: bool = False) -> GitRepository:
    return GitRepository(RepositoryConfig(root_directory=str(root), verbose=verbose))


class TestGitHistory:
    """History retrieval."""

    def test_file_history(self, git_repo: Path, git_revisions: list[str]) -> None:
        history = make_repository(git_repo).get_history(git_repo / "docs" / "entity.md")

        assert list(history.revisions) == git_revisions
        assert history.entries[0].author == "Test <test@test.com>"
        assert history.entries[0].message == "Update entity\n\nLonger explanation."
        assert history.entries[1].message == "Initial commit"
        assert history.entries[0].changed_files == frozenset()

    def test_file_touched_once(self, git_repo: Path, git_revisions: list[str]) -> None:
        history = make_repository(git_repo).get_history(git_repo / "README.md")
        assert list(history.revisions) == git_revisions[1:]

    def test_verbose_lists_changed_files(self, git_repo: Path) -> None:
        history = make_repository(git_repo, verbose=True).get_history(git_repo)

        assert history.entries[0].changed_files == {"docs/entity.md"}
        assert history.entries[1].changed_files == {"docs/entity.md", "README.md"}
        assert history.entries[0].message == "Update entity\n\nLonger explanation."

    def test_since_revision(self, git_repo: Path, git_revisions: list[str]) -> None:
        history = make_repository(git_repo).get_history(git_repo, git_revisions[1])
        assert list(history.revisions) == git_revisions[:1]

    def test_since_unknown_revision(self, git_repo: Path) -> None:
        with pytest.raises(HistoryNotFoundError, match="not found in the repository"):
            make_repository(git_repo).get_history(git_repo, "f" * 40)

    def test_not_a_repository(self, tmp_path: Path) -> None:
        (tmp_path / "plain").mkdir()
        with pytest.raises(NonZeroExitError):
            make_repository(tmp_path / "plain").get_history(tmp_path / "plain")

    def test_carriage_return_in_message(self, git_repo: Path) -> None:
        (git_repo / "README.md").write_text("# Test Repo\n\nChanged.\n")
        run_git(git_repo, "commit", "-am", "subject\rtrailing")

        history = make_repository(git_repo, verbose=True).get_history(git_repo)

        assert history.entries[0].changed_files == {"README.md"}
        assert "trailing" in history.entries[0].message

    def test_file_history_follows_renames(self, git_repo: Path, git_revisions: list[str]) -> None:
        run_git(git_repo, "mv", "docs/entity.md", "docs/domain.md")
        run_git(git_repo, "commit", "-m", "Rename entity")

        history = make_repository(git_repo).get_history(git_repo / "docs" / "domain.md")

        assert len(history) == 3
        assert list(history.revisions[1:]) == git_revisions


class TestGitContent:
    """Historical content retrieval."""

    def test_get_history_get(self, git_repo: Path, git_revisions: list[str]) -> None:
        stream = make_repository(git_repo).get_history_get(git_repo / "docs", "entity.md", git_revisions[1])

        assert stream is not None
        with stream:
            assert stream.read() == b"# Entity\n\nContent here.\n"
        assert not Path(stream.path).exists()

    def test_unknown_revision(self, git_repo: Path) -> None:
        repository = make_repository(git_repo)
        assert repository.get_history_get(git_repo / "docs", "entity.md", "0" * 40) is None
        with pytest.raises(NonZeroExitError):
            repository.get_history_get(git_repo / "docs", "entity.md", "0" * 40, required=True)

    def test_content_under_earlier_name(self, git_repo: Path, git_revisions: list[str]) -> None:
        run_git(git_repo, "mv", "docs/entity.md", "docs/domain.md")
        run_git(git_repo, "commit", "-m", "Rename entity")
        repository = make_repository(git_repo)

        stream = repository.get_history_get(git_repo / "docs", "domain.md", git_revisions[1])

        assert stream is not None
        with stream:
            assert stream.read() == b"# Entity\n\nContent here.\n"
        assert not Path(stream.path).exists()

    def test_content_under_earlier_name_by_ancestry(self, git_repo: Path) -> None:
        (git_repo / "README.md").write_text("# Test Repo\n\nChanged.\n")
        run_git(git_repo, "commit", "-am", "Touch readme")
        readme_commit = run_git(git_repo, "rev-parse", "HEAD")
        run_git(git_repo, "mv", "docs/entity.md", "docs/domain.md")
        run_git(git_repo, "commit", "-m", "Rename entity")

        stream = make_repository(git_repo).get_history_get(git_repo / "docs", "domain.md", readme_commit)

        assert stream is not None
        with stream:
            assert stream.read() == b"# Entity\n\nUpdated content.\n"


class TestGitAnnotate:
    """Line annotation."""

    def test_annotate(self, git_repo: Path, git_revisions: list[str]) -> None:
        annotation = make_repository(git_repo).annotate(git_repo / "docs" / "entity.md")

        assert annotation.filename == "entity.md"
        assert len(annotation) == 3
        assert annotation.get_revision(1) == git_revisions[1]
        assert annotation.get_revision(3) == git_revisions[0]
        assert annotation.get_author(3) == "Test"

    def test_annotate_revision(self, git_repo: Path, git_revisions: list[str]) -> None:
        annotation = make_repository(git_repo).annotate(git_repo / "docs" / "entity.md", git_revisions[1])
        assert annotation.revisions == {git_revisions[1]}

    def test_uncommitted_lines_are_unresolved(self, git_repo: Path) -> None:
        with (git_repo / "docs" / "entity.md").open("a") as handle:
            handle.write("Draft line.\n")

        annotation = make_repository(git_repo).annotate(git_repo / "docs" / "entity.md")

        assert len(annotation) == 4
        assert annotation.is_resolved(3) is True
        assert annotation.is_resolved(4) is False

    def test_carriage_return_inside_line(self, git_repo: Path) -> None:
        (git_repo / "cr.txt").write_bytes(b"one\rstill line one\ntwo\n")
        run_git(git_repo, "add", "cr.txt")
        run_git(git_repo, "commit", "-m", "Add file with carriage return")

        annotation = make_repository(git_repo).annotate(git_repo / "cr.txt")

        assert len(annotation) == 2
        assert annotation.revisions == {run_git(git_repo, "rev-parse", "HEAD")}


class TestGitCapabilities:
    """Capability queries."""

    def test_file_has_history(self, git_repo: Path) -> None:
        (git_repo / "untracked.md").write_text("new\n")
        repository = make_repository(git_repo)

        assert repository.file_has_history(git_repo / "README.md") is True
        assert repository.file_has_history(git_repo / "untracked.md") is False

    def test_update_is_a_no_op(self, git_repo: Path) -> None:
        assert make_repository(git_repo).update() is True

    def test_detection(self, git_repo: Path) -> None:
        assert GitRepository.is_repository_for(git_repo) is True
        assert GitRepository.is_repository_for(git_repo / "docs") is False
