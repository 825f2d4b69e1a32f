from __future__ import annotations

import re

from ..config import GuardConfig
from ..model import DeclarationKind, DeclarationMatch
from .classifier import classify_line, is_declaration_candidate
from .scope import ScopeTracker, block_header, enclosing_block_start, find_block_start

_BARE_CLOSER = re.compile(r"^\}[\s;,)\]]*$")


def _is_skippable(lines: list[str], index: int) -> bool:
    text = lines[index].strip()
    if not text or text.startswith(("*", "/*", "//", "@")):
        return True
    return is_inside_doc_block(lines, index)


def _inside_parentheses(lines: list[str], index: int) -> bool:
    """True when an unclosed ``(`` above ``index`` makes it part of a parameter list."""
    tracker = ScopeTracker(opener="(", closer=")")
    stop = enclosing_block_start(lines, index)
    for pos in range(index - 1, -1 if stop is None else stop, -1):
        if tracker.feed(lines[pos], pos) is not None:
            return True
    return False


def _kind_for(line: str, config: GuardConfig) -> DeclarationKind | None:
    kind = classify_line(line)
    if kind is None and config.fallback_kind is not None and is_declaration_candidate(line):
        return config.fallback_kind
    return kind


def in_declaration_scope(lines: list[str], index: int) -> bool:
    """True when ``index`` sits at top level or directly in a class-like body.

    Lines nested in a function body, an object literal or a control block are
    local statements rather than declarations.
    """
    opener = enclosing_block_start(lines, index)
    if opener is None:
        return True
    header = block_header(lines, opener)
    return classify_line(lines[header]) is DeclarationKind.CLASS


def _accept(lines: list[str], index: int, config: GuardConfig) -> bool:
    if _inside_parentheses(lines, index):
        return False
    if not config.nesting_refinement:
        return True
    return in_declaration_scope(lines, index)


def find_declaration(lines: list[str], start: int, config: GuardConfig) -> DeclarationMatch | None:
    """Nearest declaration owning the change on ``start``, scanning upward.

    Blank lines, doc-comment lines, ``//`` comments and decorators are
    skipped. A bare closing brace makes the scan jump over the whole sibling
    block it closes; a line opening with ``)`` jumps to the head of its
    parameter list.
    """
    if 0 <= start < len(lines):
        kind = _kind_for(lines[start], config)
        if kind is not None and _accept(lines, start, config):
            return DeclarationMatch(index=start, kind=kind)

    index = min(start, len(lines)) - 1
    while index >= 0:
        text = lines[index].strip()
        if _is_skippable(lines, index):
            index -= 1
            continue
        if _BARE_CLOSER.match(text):
            opener = find_block_start(lines, index)
            if opener is None:
                return None
            index = block_header(lines, opener) - 1
            continue
        if text.startswith(")"):
            head = find_block_start(lines, index, opener="(", closer=")")
            index = head if head is not None and head < index else index - 1
            continue
        kind = _kind_for(text, config)
        if kind is not None and _accept(lines, index, config):
            return DeclarationMatch(index=index, kind=kind)
        index -= 1
    return None


def is_inside_doc_block(lines: list[str], index: int) -> bool:
    """Whether ``index`` is part of a ``/** ... */`` block (opener, interior or closer)."""
    if not 0 <= index < len(lines):
        return False
    pos = index
    while pos >= 0:
        text = lines[pos].strip()
        if text.startswith("/**"):
            break
        if pos != index and text.endswith("*/"):
            return False
        pos -= 1
    if pos < 0:
        return False
    for below in range(index, len(lines)):
        text = lines[below].strip()
        if below != pos and text.startswith("/**"):
            return False
        if text.endswith("*/"):
            return True
    return False


def doc_block_end(lines: list[str], index: int) -> int | None:
    for pos in range(index, len(lines)):
        text = lines[pos].strip()
        if text.endswith("*/"):
            return pos
    return None


def find_declaration_below(lines: list[str], index: int, config: GuardConfig) -> DeclarationMatch | None:
    """Declaration documented by the doc block that contains ``index``."""
    end = doc_block_end(lines, index)
    if end is None:
        return None
    pos = end + 1
    while pos < len(lines):
        text = lines[pos].strip()
        if not text or text.startswith(("@", "//")):
            pos += 1
            continue
        kind = _kind_for(text, config)
        if kind is not None and _accept(lines, pos, config):
            return DeclarationMatch(index=pos, kind=kind)
        return None
    return None
