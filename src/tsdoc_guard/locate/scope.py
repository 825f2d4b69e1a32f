"""Backward scope tracking over source lines.

Braces are matched character by character, walking from the end of a line to
its start. Braces inside string literals and comments are counted like any
other brace; a file that puts ``{`` or ``}`` in a string can mislead the walk.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ScopeTracker:
    """Stack machine matching closers to openers while reading backwards.

    A closer pushes the line it was seen on; an opener pops it. An opener seen
    with an empty stack belongs to an enclosing scope and is reported by
    :meth:`feed`.
    """

    opener: str = "{"
    closer: str = "}"
    opened: int = 0
    closed: int = 0
    _stack: list[int] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def balanced(self) -> bool:
        return not self._stack and self.opened == self.closed

    def feed(self, text: str, index: int) -> int | None:
        """Consume ``text`` right to left; return ``index`` on an unmatched opener."""
        for ch in reversed(text):
            if ch == self.closer:
                self._stack.append(index)
                self.closed += 1
            elif ch == self.opener:
                if not self._stack:
                    return index
                self._stack.pop()
                self.opened += 1
        return None


def find_block_start(lines: list[str], close_index: int, opener: str = "{", closer: str = "}") -> int | None:
    """Index of the line holding the opener matching the closers on ``close_index``.

    Whole lines are consumed, so ``} else {`` keeps the walk going until the
    chain's first opener. Returns ``None`` when the file runs out first.
    """
    if not 0 <= close_index < len(lines):
        return None
    tracker = ScopeTracker(opener=opener, closer=closer)
    if tracker.feed(lines[close_index], close_index) is not None or tracker.depth == 0:
        return None
    for index in range(close_index - 1, -1, -1):
        if tracker.feed(lines[index], index) is not None:
            return index
        if tracker.depth == 0:
            return index
    return None


def enclosing_block_start(lines: list[str], index: int) -> int | None:
    """Index of the line whose ``{`` opens the block containing ``index``; ``None`` at top level."""
    tracker = ScopeTracker()
    for pos in range(min(index, len(lines)) - 1, -1, -1):
        found = tracker.feed(lines[pos], pos)
        if found is not None:
            return found
    return None


def block_header(lines: list[str], opener_index: int) -> int:
    """Line that introduces the block opened on ``opener_index``.

    Handles a brace on its own line, ``extends``/``implements`` continuation
    lines and the ``): Type {`` tail of a multi-line signature.
    """
    index = opener_index
    while index > 0:
        text = lines[index].strip()
        if text.startswith(")"):
            start = find_block_start(lines, index, opener="(", closer=")")
            if start is None or start == index:
                return index
            index = start
            continue
        if text.startswith(("{", "extends ", "implements ")) or not text:
            index -= 1
            continue
        return index
    return index
