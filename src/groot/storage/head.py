"""HEAD pointer storage.

The repository has exactly one head: ``.groot/HEAD`` holds the hash of the
newest commit as plain text, or nothing before the first commit.
"""

import logging
from pathlib import Path
from typing import Optional

from groot.constants import ENCODING, HEAD_FILE
from groot.storage.atomic import write_atomic

logger = logging.getLogger(__name__)


class HeadRef:
    """Read and move the single HEAD pointer.

    Attributes:
        head_path: Path to the HEAD file
    """

    def __init__(self, groot_dir: Path) -> None:
        self.groot_dir = Path(groot_dir)
        self.head_path = self.groot_dir / HEAD_FILE

    def read(self) -> Optional[str]:
        """Return the current head hash, or None if there are no commits.

        A missing HEAD file counts as "no commits yet". Any other I/O error
        propagates.
        """
        try:
            content = self.head_path.read_text(encoding=ENCODING)
        except FileNotFoundError:
            return None

        content = content.strip()
        return content or None

    def write(self, commit_hash: Optional[str]) -> None:
        """Point HEAD at ``commit_hash`` (None empties it)."""
        write_atomic(
            self.head_path,
            (commit_hash or "").encode(ENCODING),
            prefix=".tmp_head_",
        )
        logger.debug("HEAD -> %s", commit_hash or "(empty)")

    def initialize(self) -> None:
        """Create an empty HEAD file."""
        self.write(None)
