"""Atomic file replacement used by every writer in the repository."""

import os
import tempfile
from pathlib import Path


def write_atomic(path: Path, data: bytes, prefix: str = ".tmp_") -> None:
    """Write ``data`` to ``path`` via a temp file in the same directory.

    The temp file is fsynced and then renamed over the target, so readers
    see either the old content or the new content, never a partial write.

    Args:
        path: Destination file
        data: Bytes to write
        prefix: Prefix for the temporary file name

    Raises:
        OSError: If the write or rename fails
    """
    path = Path(path)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=prefix)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_path, path)

    except Exception:
        # Clean up temp file on error
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
