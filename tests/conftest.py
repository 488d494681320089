"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from groot.repository import Repository
from groot.storage import HeadRef, ObjectStore


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create an empty workspace directory."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def repo(workspace: Path) -> Repository:
    """Create an initialized repository with a sample text file."""
    repository = Repository(workspace)
    repository.init()

    (workspace / "notes.txt").write_text("first line\nsecond line\n")

    return repository


@pytest.fixture
def groot_dir(repo: Repository) -> Path:
    """Path to the initialized .groot directory."""
    return repo.groot_dir


@pytest.fixture
def store(groot_dir: Path) -> ObjectStore:
    """ObjectStore of the initialized repository."""
    return ObjectStore(groot_dir)


@pytest.fixture
def head(groot_dir: Path) -> HeadRef:
    """HeadRef of the initialized repository."""
    return HeadRef(groot_dir)
