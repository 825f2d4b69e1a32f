"""Documentation block checks for a located declaration."""

from .language import detect_non_english, normalize_block
from .signature import documented_params, extract_signature, parameter_names, return_type
from .validator import find_comment_block, validate_declaration

__all__ = [
    "detect_non_english",
    "documented_params",
    "extract_signature",
    "find_comment_block",
    "normalize_block",
    "parameter_names",
    "return_type",
    "validate_declaration",
]
