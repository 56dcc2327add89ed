"""
File helpers for writing planning documents.

Writes go through a temporary file in the destination directory followed by
an atomic rename, so a reader never observes a half-written document and a
failed write never clobbers the previous version.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def atomic_write_text(path: Path, content: str) -> None:
    """
    Write text to a file atomically.

    Args:
        path: Destination file. Parent directories are created if needed.
        content: Text to write (UTF-8).

    Raises:
        OSError: If the temporary file cannot be written or renamed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            if content and not content.endswith("\n"):
                f.write("\n")

        # Atomic rename (replaces existing file)
        os.replace(temp_path, path)

    except Exception:
        # Clean up temp file on error
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
