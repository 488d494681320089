"""Tests for the commit diff engine."""

from pathlib import Path

import pytest

from groot.core.commit_chain import CommitChain, CorruptHistoryError
from groot.core.staging import StagingIndex
from groot.diff.base import DiffKind, DiffRun
from groot.diff.diff_engine import DiffEngine, FileStatus
from groot.storage import HeadRef, ObjectNotFoundError, ObjectStore
from groot.storage.hasher import compute_hash


@pytest.fixture
def chain(repo, store: ObjectStore, head: HeadRef) -> CommitChain:
    return CommitChain(store, StagingIndex(repo.workspace_root, store), head)


@pytest.fixture
def engine(chain: CommitChain) -> DiffEngine:
    return DiffEngine(chain)


def _commit(repo, chain: CommitChain, message: str, **files: str) -> str:
    for name, content in files.items():
        (repo.workspace_root / name).write_text(content)
        chain.staging.stage_file(Path(name))
    return chain.commit(message)


class TestShowCommitDiff:
    """Test diffing a commit against its parent."""

    def test_unknown_commit(self, engine: DiffEngine) -> None:
        with pytest.raises(ObjectNotFoundError):
            engine.show_commit_diff(compute_hash(b"nope"))

    def test_initial_commit(self, repo, chain: CommitChain, engine: DiffEngine) -> None:
        first = _commit(repo, chain, "first", a="alpha\n")

        report = engine.show_commit_diff(first)

        assert report.is_initial
        assert report.files == []
        assert report.commit.hash == first

    def test_modified_file(self, repo, chain: CommitChain, engine: DiffEngine) -> None:
        _commit(repo, chain, "first", a="one\ntwo\n")
        second = _commit(repo, chain, "second", a="one\n2\n")

        report = engine.show_commit_diff(second)

        assert not report.is_initial
        assert len(report.files) == 1
        file_diff = report.files[0]
        assert file_diff.path == "a"
        assert file_diff.status is FileStatus.MODIFIED
        assert file_diff.runs == [
            DiffRun(DiffKind.UNCHANGED, "one\n"),
            DiffRun(DiffKind.REMOVED, "two\n"),
            DiffRun(DiffKind.ADDED, "2\n"),
        ]
        assert file_diff.added_lines == 1
        assert file_diff.removed_lines == 1

    def test_new_file_is_flagged(self, repo, chain: CommitChain, engine: DiffEngine) -> None:
        """Test that a path absent from the parent isn't diffed against empty text."""
        _commit(repo, chain, "first", a="alpha\n")
        second = _commit(repo, chain, "second", b="beta\n")

        report = engine.show_commit_diff(second)

        assert [(f.path, f.status) for f in report.files] == [("b", FileStatus.ADDED)]
        assert report.files[0].runs == []

    def test_unchanged_content(self, repo, chain: CommitChain, engine: DiffEngine) -> None:
        _commit(repo, chain, "first", a="same\n")
        second = _commit(repo, chain, "second", a="same\n")

        file_diff = engine.show_commit_diff(second).files[0]

        assert file_diff.status is FileStatus.UNCHANGED
        assert file_diff.runs == [DiffRun(DiffKind.UNCHANGED, "same\n")]

    def test_files_follow_commit_order(self, repo, chain: CommitChain, engine: DiffEngine) -> None:
        _commit(repo, chain, "first", a="1\n")
        second = _commit(repo, chain, "second", z="new\n", a="2\n")

        report = engine.show_commit_diff(second)

        assert [f.path for f in report.files] == ["z", "a"]
        assert [f.status for f in report.files] == [FileStatus.ADDED, FileStatus.MODIFIED]

    def test_missing_parent_blob_treated_as_absent(
        self, repo, chain: CommitChain, engine: DiffEngine, store: ObjectStore
    ) -> None:
        _commit(repo, chain, "first", a="old\n")
        second = _commit(repo, chain, "second", a="new\n")
        (store.objects_dir / compute_hash(b"old\n")).unlink()

        file_diff = engine.show_commit_diff(second).files[0]

        assert file_diff.status is FileStatus.ADDED

    def test_missing_own_blob(
        self, repo, chain: CommitChain, engine: DiffEngine, store: ObjectStore
    ) -> None:
        _commit(repo, chain, "first", a="old\n")
        second = _commit(repo, chain, "second", a="new\n")
        (store.objects_dir / compute_hash(b"new\n")).unlink()

        file_diff = engine.show_commit_diff(second).files[0]

        assert file_diff.status is FileStatus.MISSING

    def test_missing_parent_commit(
        self, repo, chain: CommitChain, engine: DiffEngine, store: ObjectStore
    ) -> None:
        first = _commit(repo, chain, "first", a="old\n")
        second = _commit(repo, chain, "second", a="new\n")
        (store.objects_dir / first).unlink()

        with pytest.raises(CorruptHistoryError):
            engine.show_commit_diff(second)

    def test_binary_content_decodes_with_replacement(
        self, repo, chain: CommitChain, engine: DiffEngine
    ) -> None:
        (repo.workspace_root / "bin").write_bytes(b"\xff\n")
        chain.staging.stage_file(Path("bin"))
        chain.commit("first")
        (repo.workspace_root / "bin").write_bytes(b"\xfe\n")
        chain.staging.stage_file(Path("bin"))
        second = chain.commit("second")

        file_diff = engine.show_commit_diff(second).files[0]

        assert file_diff.status is FileStatus.MODIFIED

    def test_report_to_dict(self, repo, chain: CommitChain, engine: DiffEngine) -> None:
        first = _commit(repo, chain, "first", a="x\n")
        second = _commit(repo, chain, "second", a="y\n")

        data = engine.show_commit_diff(second).to_dict()

        assert data["commit"] == second
        assert data["parent"] == first
        assert data["is_initial"] is False
        assert data["files"][0]["status"] == "modified"
