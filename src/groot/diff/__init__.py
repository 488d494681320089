"""Line diffs between texts and between a commit and its parent."""

from groot.diff.base import DiffKind, DiffRun, diff_text
from groot.diff.diff_engine import CommitDiffReport, DiffEngine, FileDiff, FileStatus

__all__ = [
    "DiffKind",
    "DiffRun",
    "diff_text",
    "DiffEngine",
    "CommitDiffReport",
    "FileDiff",
    "FileStatus",
]
