"""Changed-line extraction from git diffs."""

from .git import DiffSource, collect_changed_lines, diff_sources, resolve_comparison_range
from .parser import hunk_range, merge_changed_lines, parse_unified_diff

__all__ = [
    "DiffSource",
    "collect_changed_lines",
    "diff_sources",
    "hunk_range",
    "merge_changed_lines",
    "parse_unified_diff",
    "resolve_comparison_range",
]
