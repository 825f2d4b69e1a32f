from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from tsdoc_guard.config import default_config
from tsdoc_guard.diff import parse_unified_diff
from tsdoc_guard.locate import find_declaration
from tsdoc_guard.locate.scope import ScopeTracker, find_block_start

CONFIG = default_config()

Tree = st.recursive(st.just("stmt"), lambda children: st.lists(children, max_size=4), max_leaves=20)


def _render(tree: object, lines: list[str], pairs: list[tuple[int, int]]) -> None:
    if tree == "stmt":
        lines.append("x();")
        return
    assert isinstance(tree, list)
    opener = len(lines)
    lines.append("block() {")
    for child in tree:
        _render(child, lines, pairs)
    pairs.append((opener, len(lines)))
    lines.append("}")


@settings(max_examples=200)
@given(start=st.integers(min_value=1, max_value=100_000), count=st.integers(min_value=0, max_value=500))
def test_hunk_marks_exactly_its_new_range(start: int, count: int) -> None:
    changed = parse_unified_diff(f"diff --git a/f.ts b/f.ts\n@@ -1,1 +{start},{count} @@\n")
    assert changed.for_path("f.ts") == frozenset(range(start, start + count))


@given(start=st.integers(min_value=1, max_value=100_000))
def test_hunk_without_count_marks_one_line(start: int) -> None:
    changed = parse_unified_diff(f"diff --git a/f.ts b/f.ts\n@@ -1 +{start} @@\n")
    assert changed.for_path("f.ts") == frozenset({start})


@settings(max_examples=100)
@given(tree=Tree)
def test_every_closer_finds_its_opener(tree: object) -> None:
    lines: list[str] = []
    pairs: list[tuple[int, int]] = []
    _render([tree], lines, pairs)
    for opener, closer in pairs:
        assert find_block_start(lines, closer) == opener
    tracker = ScopeTracker()
    for index in range(len(lines) - 1, -1, -1):
        assert tracker.feed(lines[index], index) is None
    assert tracker.balanced


@settings(max_examples=100)
@given(
    methods=st.lists(
        st.tuples(
            st.from_regex(r"[a-z][a-zA-Z0-9]{0,8}", fullmatch=True),
            st.integers(min_value=0, max_value=5),
            st.booleans(),
        ),
        min_size=1,
        max_size=5,
    )
)
def test_body_lines_resolve_to_their_method(methods: list[tuple[str, int, bool]]) -> None:
    lines = ["export class Subject {"]
    expected: dict[int, int] = {}
    for name, body_size, wrapped in methods:
        head = len(lines)
        if wrapped:
            lines.append(f"  m{name}(")
            expected[len(lines)] = head
            lines.append("    value: number,")
            expected[len(lines)] = head
            lines.append("  ): number {")
        else:
            lines.append(f"  m{name}(value: number): number {{")
        for _ in range(body_size):
            expected[len(lines)] = head
            lines.append("    value = value + 1;")
        expected[len(lines)] = head
        lines.append("    return value;")
        lines.append("  }")
    lines.append("}")
    for index, head in expected.items():
        match = find_declaration(lines, index, CONFIG)
        assert match is not None
        assert match.index == head
        assert find_declaration(lines, match.index, CONFIG) == match
