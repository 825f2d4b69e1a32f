from __future__ import annotations

import re

from ..locate.classifier import IDENT, normalize_line

_OPEN = "<([{"
_CLOSE = ">)]}"
_PARAM_MODIFIERS = re.compile(r"^(?:(?:public|private|protected|readonly|override)\s+)+")
_PARAM_DECORATOR = re.compile(r"^@[\w$.]+(?:\([^)]*\))?\s*")
_PARAM_NAME = re.compile(rf"^(?:\.\.\.)?\s*({IDENT})")
_RETURN_TAIL = re.compile(r"^:\s*(?P<type>.+?)\s*(?:\{.*|=>.*|;)?$")
_DOC_PARAM = re.compile(rf"@param\s+(?:\{{[^}}]*\}}\s*)?\[?\s*(?:\.\.\.)?({IDENT})")
_VOID_TYPES = frozenset({"void", "never", "undefined", "Promise<void>", "Promise<undefined>"})

MAX_SIGNATURE_LINES = 20


def extract_signature(lines: list[str], index: int) -> str:
    """Declaration text from ``index`` joined until its parameter list closes."""
    parts: list[str] = []
    depth = 0
    seen_paren = False
    for pos in range(index, min(len(lines), index + MAX_SIGNATURE_LINES)):
        text = lines[pos].strip()
        parts.append(text)
        for ch in text:
            if ch == "(":
                depth += 1
                seen_paren = True
            elif ch == ")":
                depth -= 1
        if not seen_paren or depth <= 0:
            break
    return normalize_line(" ".join(parts))


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split on ``sep`` outside angle, round, square and curly brackets."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    prev = ""
    for ch in text:
        if ch in _OPEN:
            depth += 1
        elif ch in _CLOSE and not (ch == ">" and prev == "="):
            depth = max(0, depth - 1)
        if ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
        prev = ch
    parts.append("".join(current))
    return parts


def _param_span(signature: str) -> tuple[int, int] | None:
    start = signature.find("(")
    if start < 0:
        return None
    depth = 0
    for pos in range(start, len(signature)):
        ch = signature[pos]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return start, pos
    return None


def parameter_names(signature: str) -> list[str]:
    span = _param_span(signature)
    if span is None:
        return []
    inner = signature[span[0] + 1 : span[1]]
    names: list[str] = []
    for raw in split_top_level(inner):
        text = raw.strip()
        if not text:
            continue
        while _PARAM_DECORATOR.match(text):
            text = _PARAM_DECORATOR.sub("", text, count=1)
        text = _PARAM_MODIFIERS.sub("", text)
        if text.startswith(("{", "[")):
            continue
        match = _PARAM_NAME.match(text)
        if match is None or match.group(1) == "this":
            continue
        names.append(match.group(1))
    return names


def return_type(signature: str) -> str | None:
    span = _param_span(signature)
    if span is None:
        return None
    match = _RETURN_TAIL.match(signature[span[1] + 1 :].strip())
    if match is None:
        return None
    return match.group("type").strip() or None


def is_void_type(type_text: str) -> bool:
    return re.sub(r"\s+", "", type_text) in _VOID_TYPES


def documented_params(block: str) -> set[str]:
    return set(_DOC_PARAM.findall(block))
