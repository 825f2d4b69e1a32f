from __future__ import annotations

import re
from collections import defaultdict

from ..locate.classifier import classify_line
from ..model import ChangedLineSet

FILE_HEADER_RE = re.compile(r"^diff --git a/(.+?) b/(.+)$")
HUNK_HEADER_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,(\d+))? @@")


def hunk_range(start: int, count: int, margin: int = 0) -> range:
    """New-file line numbers covered by a hunk, widened by ``margin`` on both sides."""
    if margin <= 0:
        return range(start, start + count)
    return range(max(1, start - margin), start + count + margin)


def parse_unified_diff(text: str, context_margin: int = 0) -> ChangedLineSet:
    lines: dict[str, set[int]] = defaultdict(set)
    declarations: dict[str, set[int]] = defaultdict(set)
    current: str | None = None
    cursor: int | None = None

    for row in text.split("\n"):
        if row.startswith("diff --git "):
            # quoted or otherwise unparseable headers drop the file
            file_match = FILE_HEADER_RE.match(row)
            current = file_match.group(2) if file_match else None
            cursor = None
            continue
        hunk_match = HUNK_HEADER_RE.match(row)
        if hunk_match:
            if current is None:
                cursor = None
                continue
            start = int(hunk_match.group(1))
            count = int(hunk_match.group(2)) if hunk_match.group(2) is not None else 1
            lines[current].update(hunk_range(start, count, context_margin))
            cursor = start
            continue
        if current is None or cursor is None:
            continue
        if row.startswith("+"):
            if classify_line(row[1:]) is not None:
                declarations[current].add(cursor)
            cursor += 1
        elif row.startswith(" "):
            cursor += 1
        elif row.startswith("\\") or row.startswith("-"):
            continue
        else:
            cursor = None

    return ChangedLineSet(
        lines={path: frozenset(nums) for path, nums in lines.items()},
        declarations={path: frozenset(nums) for path, nums in declarations.items() if nums},
    )


def merge_changed_lines(*sets: ChangedLineSet) -> ChangedLineSet:
    lines: dict[str, set[int]] = defaultdict(set)
    declarations: dict[str, set[int]] = defaultdict(set)
    for item in sets:
        for path, nums in item.lines.items():
            lines[path].update(nums)
        for path, nums in item.declarations.items():
            declarations[path].update(nums)
    return ChangedLineSet(
        lines={path: frozenset(nums) for path, nums in lines.items()},
        declarations={path: frozenset(nums) for path, nums in declarations.items()},
    )
