"""Line classifier for TypeScript/JavaScript declarations.

A single ordered rule list decides the kind of a trimmed source line: class-like
rules first, then function/method rules, then property rules. The first rule
that matches wins; a line no rule recognises is not a declaration.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from ..model import DeclarationKind

IDENT = r"[A-Za-z_$#][\w$]*"
_MODIFIERS = r"(?:(?:public|private|protected|static|readonly|abstract|override|async|declare|accessor)\s+)*"
_FIELD_MODIFIERS = r"(?:(?:public|private|protected|static|readonly|declare|override|abstract|accessor)\s+)"

CONTROL_KEYWORDS = frozenset(
    {
        "if",
        "else",
        "for",
        "while",
        "do",
        "switch",
        "case",
        "default",
        "catch",
        "try",
        "finally",
        "return",
        "throw",
        "new",
        "await",
        "yield",
        "typeof",
        "delete",
        "void",
        "super",
        "this",
        "import",
        "break",
        "continue",
        "with",
        "function",
        "class",
        "require",
    }
)

_EXPORT_PREFIX = re.compile(r"^(?:export\s+default\s+|export\s+|declare\s+)")
_TRAILING_BLOCK_COMMENT = re.compile(r"\s*/\*(?:(?!\*/).)*\*/$")

_CLASS_RE = re.compile(r"^(?:abstract\s+)?class\b")
_INTERFACE_RE = re.compile(rf"^interface\s+{IDENT}")
_ENUM_RE = re.compile(rf"^(?:const\s+)?enum\s+{IDENT}")
_NAMESPACE_RE = re.compile(r"^(?:namespace|module)\s+[\w$.]+\s*\{?\s*$")

_FUNCTION_RE = re.compile(r"^(?:async\s+)?function\b")
_VAR_CALLABLE_RE = re.compile(
    rf"^(?:const|let|var)\s+{IDENT}\s*(?::[^=]+)?=\s*(?:async\s+)?(?P<head>function\b|\(|<|{IDENT}\s*=>)"
)
_MEMBER_CALLABLE_RE = re.compile(
    rf"^{_MODIFIERS}(?P<name>{IDENT})[?!]?\s*(?::[^=]+)?=\s*(?:async\s+)?(?P<head>function\b|\(|<|{IDENT}\s*=>)"
)
_METHOD_HEAD_RE = re.compile(
    rf"^(?P<mods>{_MODIFIERS})(?:(?:get|set)\s+)?\*?\s*"
    rf"(?P<name>{IDENT}|\[[^\]]+\]|'[^']*'|\"[^\"]*\")\s*\??\s*(?:<.*?>)?\s*\("
)
_METHOD_TAIL_RE = re.compile(r"^(?::\s*[^;{}]+?)?\s*(?:\{.*)?$")
_TYPED_SIGNATURE_TAIL_RE = re.compile(r"^:\s*[^;{}]+;$")

_VAR_RE = re.compile(rf"^(?:const|let|var)\s+(?:{IDENT}|\{{|\[)")
_FIELD_RE = re.compile(rf"^{_FIELD_MODIFIERS}*(?P<name>{IDENT})[?!]?\s*(?::|=(?![=>]))")
_BARE_FIELD_RE = re.compile(rf"^{_FIELD_MODIFIERS}+(?P<name>{IDENT})[?!]?\s*;?$")

_CANDIDATE_RE = re.compile(r"^(?:public|private|protected|readonly|static)\b")


def normalize_line(line: str) -> str:
    """Trimmed view of ``line`` without ``export``/``export default``/``declare`` prefixes.

    A trailing ``/* ... */`` comment after code is dropped.
    """
    text = line.strip()
    if not text.startswith("/*"):
        text = _TRAILING_BLOCK_COMMENT.sub("", text)
    while True:
        stripped = _EXPORT_PREFIX.sub("", text, count=1)
        if stripped == text:
            return text
        text = stripped.lstrip()


def _closing_paren(text: str, open_index: int) -> int | None:
    depth = 0
    for pos in range(open_index, len(text)):
        ch = text[pos]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return pos
    return None


def _callable_value(match: re.Match[str] | None, text: str) -> bool:
    if match is None:
        return False
    head = match.group("head")
    if head.startswith("function") or head.endswith("=>"):
        return True
    # `= (` or `= <T>(` is an arrow function only if an arrow follows or the
    # parameter list continues on the next line.
    return "=>" in text or text.endswith(("(", ","))


def _is_method_signature(text: str) -> bool:
    match = _METHOD_HEAD_RE.match(text)
    if match is None or match.group("name") in CONTROL_KEYWORDS:
        return False
    open_index = match.end() - 1
    close_index = _closing_paren(text, open_index)
    if close_index is None:
        return text.endswith(("(", ","))
    tail = text[close_index + 1 :].strip()
    if tail == ";":
        return bool(match.group("mods").strip())
    if _TYPED_SIGNATURE_TAIL_RE.match(tail):
        return True
    if tail.startswith(("=>", ".", "?", "&", "|", "+", "-", "*", "/", ",", ")")):
        return False
    return bool(_METHOD_TAIL_RE.match(tail))


def _is_field(text: str) -> bool:
    match = _FIELD_RE.match(text) or _BARE_FIELD_RE.match(text)
    return match is not None and match.group("name") not in CONTROL_KEYWORDS


@dataclass(frozen=True)
class DeclarationRule:
    name: str
    kind: DeclarationKind
    test: Callable[[str], bool]


RULES: tuple[DeclarationRule, ...] = (
    DeclarationRule("class", DeclarationKind.CLASS, lambda s: bool(_CLASS_RE.match(s))),
    DeclarationRule("interface", DeclarationKind.CLASS, lambda s: bool(_INTERFACE_RE.match(s))),
    DeclarationRule("enum", DeclarationKind.CLASS, lambda s: bool(_ENUM_RE.match(s))),
    DeclarationRule("namespace", DeclarationKind.CLASS, lambda s: bool(_NAMESPACE_RE.match(s))),
    DeclarationRule("function", DeclarationKind.FUNCTION, lambda s: bool(_FUNCTION_RE.match(s))),
    DeclarationRule(
        "variable-callable",
        DeclarationKind.FUNCTION,
        lambda s: _callable_value(_VAR_CALLABLE_RE.match(s), s),
    ),
    DeclarationRule(
        "member-callable",
        DeclarationKind.FUNCTION,
        lambda s: _callable_value(_MEMBER_CALLABLE_RE.match(s), s),
    ),
    DeclarationRule("method", DeclarationKind.FUNCTION, _is_method_signature),
    DeclarationRule("variable", DeclarationKind.PROPERTY, lambda s: bool(_VAR_RE.match(s))),
    DeclarationRule("field", DeclarationKind.PROPERTY, _is_field),
)


def matching_rule(line: str) -> DeclarationRule | None:
    text = normalize_line(line)
    if not text or text[0] in "})]<*/@'\"`.":
        return None
    for rule in RULES:
        if rule.test(text):
            return rule
    return None


def classify_line(line: str) -> DeclarationKind | None:
    rule = matching_rule(line)
    return rule.kind if rule else None


def is_declaration_candidate(line: str) -> bool:
    """Modifier-led line that may be a declaration no rule recognised."""
    return bool(_CANDIDATE_RE.match(normalize_line(line)))


def is_constructor(line: str) -> bool:
    return bool(re.match(r"^(?:(?:public|private|protected)\s+)?constructor\s*\(", normalize_line(line)))
