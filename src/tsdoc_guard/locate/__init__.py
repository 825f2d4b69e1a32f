"""Association of changed lines with the declarations that own them."""

from .classifier import RULES, classify_line, is_constructor, is_declaration_candidate, normalize_line
from .locator import (
    find_declaration,
    find_declaration_below,
    in_declaration_scope,
    is_inside_doc_block,
)
from .scope import ScopeTracker, block_header, enclosing_block_start, find_block_start

__all__ = [
    "RULES",
    "ScopeTracker",
    "block_header",
    "classify_line",
    "enclosing_block_start",
    "find_block_start",
    "find_declaration",
    "find_declaration_below",
    "in_declaration_scope",
    "is_constructor",
    "is_declaration_candidate",
    "is_inside_doc_block",
    "normalize_line",
]
