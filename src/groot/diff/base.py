"""Line-based text diff.

``diff_text`` compares two strings line by line using a longest common
subsequence table and returns labeled runs of unchanged, added and removed
lines. When several alignments keep the same number of lines, the one with
the fewest, longest unchanged runs is used. Within every block of changes
between two unchanged runs, removed lines are reported before added lines,
as in a unified diff.
"""

from enum import Enum
from typing import Any, Dict, List, Tuple


class DiffKind(str, Enum):
    """Label of a diff run."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


class DiffRun:
    """A contiguous group of lines sharing one label.

    Attributes:
        kind: Whether the lines are unchanged, added or removed
        text: The lines, joined, with their line endings
    """

    def __init__(self, kind: DiffKind, text: str):
        self.kind = DiffKind(kind)
        self.text = text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiffRun):
            return NotImplemented
        return self.kind == other.kind and self.text == other.text

    def __repr__(self) -> str:
        return f"DiffRun({self.kind.value}, {self.text!r})"

    @property
    def line_count(self) -> int:
        """Number of lines in this run."""
        return len(split_lines(self.text))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"kind": self.kind.value, "text": self.text}


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` keeping line endings; a final partial line is kept."""
    if not text:
        return []
    parts = text.split("\n")
    lines = [p + "\n" for p in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _lcs_table(a: List[str], b: List[str]) -> List[List[int]]:
    """table[i][j] = length of the LCS of a[i:] and b[j:]."""
    n, m = len(a), len(b)
    table = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        row, below = table[i], table[i + 1]
        for j in range(m - 1, -1, -1):
            if a[i] == b[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = max(below[j], row[j + 1])
    return table


def _run_tables(
    a: List[str], b: List[str], lcs: List[List[int]]
) -> Tuple[List[List[int]], List[List[int]]]:
    """Fewest unchanged runs needed to align a[i:] with b[j:] along an LCS.

    ``fresh[i][j]`` applies when the previous operation was not a match, so
    matching a[i] with b[j] opens a new run. ``cont[i][j]`` applies right
    after a match, where matching again extends the current run.
    """
    n, m = len(a), len(b)
    fresh = [[0] * (m + 1) for _ in range(n + 1)]
    cont = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        for j in range(m - 1, -1, -1):
            best_skip = None
            if lcs[i + 1][j] == lcs[i][j]:
                best_skip = fresh[i + 1][j]
            if lcs[i][j + 1] == lcs[i][j]:
                skip_b = fresh[i][j + 1]
                best_skip = skip_b if best_skip is None else min(best_skip, skip_b)

            if a[i] == b[j]:
                extend = cont[i + 1][j + 1]
                fresh[i][j] = extend + 1 if best_skip is None else min(extend + 1, best_skip)
                cont[i][j] = extend if best_skip is None else min(extend, best_skip)
            else:
                fresh[i][j] = cont[i][j] = best_skip
    return fresh, cont


def _edit_script(a: List[str], b: List[str]) -> List[Tuple[DiffKind, str]]:
    """Per-line operations turning ``a`` into ``b``.

    Among all scripts keeping a longest common subsequence, the one with
    the fewest unchanged runs wins. Remaining ties go to matching, then
    removing, then adding.
    """
    lcs = _lcs_table(a, b)
    fresh, cont = _run_tables(a, b, lcs)

    ops = []
    i = j = 0
    matched = False
    while i < len(a) and j < len(b):
        target = cont[i][j] if matched else fresh[i][j]
        match_cost = cont[i + 1][j + 1] + (0 if matched else 1)
        if a[i] == b[j] and match_cost == target:
            ops.append((DiffKind.UNCHANGED, a[i]))
            i += 1
            j += 1
            matched = True
        elif lcs[i + 1][j] == lcs[i][j] and fresh[i + 1][j] == target:
            ops.append((DiffKind.REMOVED, a[i]))
            i += 1
            matched = False
        else:
            ops.append((DiffKind.ADDED, b[j]))
            j += 1
            matched = False
    ops.extend((DiffKind.REMOVED, line) for line in a[i:])
    ops.extend((DiffKind.ADDED, line) for line in b[j:])
    return ops


def diff_text(old_text: str, new_text: str) -> List[DiffRun]:
    """Compute the line diff between two texts.

    Args:
        old_text: Previous version
        new_text: New version

    Returns:
        Runs in document order. Joining unchanged and removed runs gives
        ``old_text``; joining unchanged and added runs gives ``new_text``.

    Example:
        >>> diff_text("a\\n", "a\\nb\\n")
        [DiffRun(unchanged, 'a\\n'), DiffRun(added, 'b\\n')]
    """
    runs: List[DiffRun] = []
    removed: List[str] = []
    added: List[str] = []

    def append(kind: DiffKind, lines: List[str]) -> None:
        if not lines:
            return
        text = "".join(lines)
        if runs and runs[-1].kind == kind:
            runs[-1] = DiffRun(kind, runs[-1].text + text)
        else:
            runs.append(DiffRun(kind, text))

    def flush_changes() -> None:
        append(DiffKind.REMOVED, removed)
        append(DiffKind.ADDED, added)
        removed.clear()
        added.clear()

    for kind, line in _edit_script(split_lines(old_text), split_lines(new_text)):
        if kind is DiffKind.REMOVED:
            removed.append(line)
        elif kind is DiffKind.ADDED:
            added.append(line)
        else:
            flush_changes()
            append(DiffKind.UNCHANGED, [line])
    flush_changes()

    return runs
