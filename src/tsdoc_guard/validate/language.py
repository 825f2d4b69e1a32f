"""Stop-word heuristic that flags documentation written in Spanish."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable

_FENCED = re.compile(r"```.*?```", re.S)
_INLINE_CODE = re.compile(r"`[^`\n]*`")
_LEADING_STAR = re.compile(r"^\*+\s?")


def normalize_block(block: str) -> str:
    """Lowercased prose of a doc block without comment markers, code or ``@example`` sections."""
    rows: list[str] = []
    for raw in block.split("\n"):
        text = raw.strip()
        if text.startswith("/**"):
            text = text[3:]
        if text.endswith("*/"):
            text = text[:-2]
        text = _LEADING_STAR.sub("", text.strip())
        rows.append(text)
    text = _FENCED.sub(" ", "\n".join(rows))
    kept: list[str] = []
    in_example = False
    for row in text.split("\n"):
        stripped = row.strip()
        if stripped.startswith("@example"):
            in_example = True
            continue
        if in_example and stripped.startswith("@"):
            in_example = False
        if not in_example:
            kept.append(row)
    text = _INLINE_CODE.sub(" ", "\n".join(kept))
    return unicodedata.normalize("NFC", text).lower()


def matched_stop_words(text: str, stop_words: Iterable[str]) -> list[str]:
    found: list[str] = []
    for word in stop_words:
        if word in found:
            continue
        if re.search(rf"(?<!\w){re.escape(word)}(?!\w)", text):
            found.append(word)
    return found


def detect_non_english(block: str, stop_words: Iterable[str], threshold: int) -> list[str]:
    """Distinct stop-words found in ``block`` when there are at least ``threshold`` of them."""
    found = matched_stop_words(normalize_block(block), stop_words)
    return found if len(found) >= threshold else []
