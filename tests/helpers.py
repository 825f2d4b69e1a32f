from __future__ import annotations

import textwrap


def source(text: str) -> list[str]:
    """Dedented source split into lines, without the leading newline."""
    return textwrap.dedent(text).lstrip("\n").split("\n")


def line_of(lines: list[str], needle: str) -> int:
    """0-based index of the first line containing ``needle``."""
    for index, line in enumerate(lines):
        if needle in line:
            return index
    raise AssertionError(f"{needle!r} not found")
