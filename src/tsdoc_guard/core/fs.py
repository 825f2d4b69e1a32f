from __future__ import annotations

from pathlib import Path


def read_source_lines(path: Path) -> list[str]:
    """Return the file's lines without trailing newlines.

    Raises ``OSError`` or ``UnicodeDecodeError``; callers decide whether a
    missing file is fatal.
    """
    text = path.read_text(encoding="utf-8")
    return text.split("\n")
