"""Unit tests for StagingIndex."""

import json
from pathlib import Path

import pytest

from groot.core.staging import (
    CorruptIndexError,
    StagingEntry,
    StagingError,
    StagingIndex,
)
from groot.storage import ObjectStore
from groot.storage.hasher import compute_hash


@pytest.fixture
def staging(repo, store: ObjectStore) -> StagingIndex:
    """StagingIndex of the initialized repository."""
    return StagingIndex(repo.workspace_root, store)


HASH_A = compute_hash(b"a")
HASH_B = compute_hash(b"b")
HASH_C = compute_hash(b"c")


class TestLoad:
    """Test reading the persisted index."""

    def test_initialized_index_is_empty(self, staging: StagingIndex) -> None:
        """Test that init persists an empty array."""
        assert staging.index_path.exists()
        assert json.loads(staging.index_path.read_text()) == []
        assert staging.load() == []
        assert staging.is_empty()

    def test_missing_index_loads_empty(self, staging: StagingIndex) -> None:
        staging.index_path.unlink()
        assert staging.load() == []

    def test_invalid_json(self, staging: StagingIndex) -> None:
        staging.index_path.write_text("{not json")

        with pytest.raises(CorruptIndexError, match="Corrupted index"):
            staging.load()

    def test_not_an_array(self, staging: StagingIndex) -> None:
        staging.index_path.write_text(json.dumps({"path": "x", "hash": HASH_A}))

        with pytest.raises(CorruptIndexError):
            staging.load()

    def test_entry_missing_hash(self, staging: StagingIndex) -> None:
        staging.index_path.write_text(json.dumps([{"path": "x"}]))

        with pytest.raises(CorruptIndexError, match="invalid hash"):
            staging.load()

    def test_entry_with_bad_path(self, staging: StagingIndex) -> None:
        staging.index_path.write_text(json.dumps([{"path": 3, "hash": HASH_A}]))

        with pytest.raises(CorruptIndexError, match="invalid path"):
            staging.load()

    def test_duplicate_paths(self, staging: StagingIndex) -> None:
        data = [{"path": "x", "hash": HASH_A}, {"path": "x", "hash": HASH_B}]
        staging.index_path.write_text(json.dumps(data))

        with pytest.raises(CorruptIndexError, match="duplicate"):
            staging.load()


class TestUpsert:
    """Test staging path -> hash entries."""

    def test_append_new_paths_in_order(self, staging: StagingIndex) -> None:
        staging.upsert("b.txt", HASH_B)
        staging.upsert("a.txt", HASH_A)

        assert staging.load() == [
            StagingEntry("b.txt", HASH_B),
            StagingEntry("a.txt", HASH_A),
        ]

    def test_restage_replaces_in_place(self, staging: StagingIndex) -> None:
        """Test that re-adding a path keeps its position."""
        staging.upsert("first.txt", HASH_A)
        staging.upsert("second.txt", HASH_B)
        staging.upsert("first.txt", HASH_C)

        assert staging.load() == [
            StagingEntry("first.txt", HASH_C),
            StagingEntry("second.txt", HASH_B),
        ]

    def test_persisted_format(self, staging: StagingIndex) -> None:
        """Test the on-disk array of {path, hash} objects."""
        staging.upsert("a.txt", HASH_A)

        assert json.loads(staging.index_path.read_text()) == [
            {"path": "a.txt", "hash": HASH_A}
        ]

    def test_returned_entry_is_detached(self, staging: StagingIndex) -> None:
        entry = staging.upsert("a.txt", HASH_A)
        entry.hash = HASH_B

        assert staging.load() == [StagingEntry("a.txt", HASH_A)]


class TestClear:
    """Test clearing the index."""

    def test_clear(self, staging: StagingIndex) -> None:
        staging.upsert("a.txt", HASH_A)
        staging.clear()

        assert staging.load() == []
        assert json.loads(staging.index_path.read_text()) == []


class TestStageFile:
    """Test staging files from the workspace."""

    def test_stage_file_stores_blob(self, staging: StagingIndex, store: ObjectStore) -> None:
        entry = staging.stage_file(Path("notes.txt"))

        assert entry.path == "notes.txt"
        assert store.get(entry.hash) == b"first line\nsecond line\n"
        assert staging.load() == [entry]

    def test_stage_nested_file_uses_posix_path(self, repo, staging: StagingIndex) -> None:
        nested = repo.workspace_root / "docs" / "guide.md"
        nested.parent.mkdir()
        nested.write_text("# Guide\n")

        entry = staging.stage_file(nested)

        assert entry.path == "docs/guide.md"

    def test_stage_same_path_twice(self, repo, staging: StagingIndex) -> None:
        """Test that staging a modified file keeps one entry with the latest hash."""
        staging.stage_file(Path("notes.txt"))
        (repo.workspace_root / "notes.txt").write_text("changed\n")
        entry = staging.stage_file(Path("notes.txt"))

        entries = staging.load()
        assert len(entries) == 1
        assert entries[0].hash == entry.hash == compute_hash(b"changed\n")

    def test_stage_missing_file(self, staging: StagingIndex) -> None:
        with pytest.raises(FileNotFoundError):
            staging.stage_file(Path("absent.txt"))

    def test_stage_directory_rejected(self, repo, staging: StagingIndex) -> None:
        (repo.workspace_root / "subdir").mkdir()

        with pytest.raises(StagingError, match="directory"):
            staging.stage_file(Path("subdir"))

    def test_stage_outside_workspace_rejected(self, repo, staging: StagingIndex) -> None:
        outside = repo.workspace_root.parent / "outside.txt"
        outside.write_text("nope")

        with pytest.raises(StagingError, match="outside workspace"):
            staging.stage_file(outside)

    def test_stage_repository_internals_rejected(self, staging: StagingIndex) -> None:
        with pytest.raises(StagingError, match="internals"):
            staging.stage_file(Path(".groot/HEAD"))
