from __future__ import annotations

from ..config import GuardConfig
from ..locate.classifier import is_constructor
from ..model import DeclarationKind, DeclarationMatch, ErrorCode, ValidationError
from .language import detect_non_english
from .signature import documented_params, extract_signature, is_void_type, parameter_names, return_type

_RETURN_TAGS = ("@returns", "@return")


def find_comment_block(lines: list[str], decl_index: int) -> tuple[int, int] | ErrorCode:
    """Bounds ``(start, end)`` of the doc block directly above ``decl_index``.

    Blank lines, decorators and ``//`` comments may sit between the block and
    the declaration. Returns the structural error code when no block closes
    right above it or the closer has no ``/**`` opener.
    """
    end = decl_index - 1
    while end >= 0:
        text = lines[end].strip()
        if not text or text.startswith(("@", "//")):
            end -= 1
            continue
        break
    if end < 0 or not lines[end].strip().endswith("*/"):
        return ErrorCode.MISSING_BLOCK
    start = end
    while start >= 0:
        text = lines[start].strip()
        if text.startswith("/**"):
            return start, end
        # a plain /* comment or an earlier block's closer ends the search
        if text.startswith("/*") or (start != end and text.endswith("*/")):
            return ErrorCode.MALFORMED_BLOCK
        start -= 1
    return ErrorCode.MALFORMED_BLOCK


def _structural_error(kind: DeclarationKind, code: ErrorCode, line_number: int) -> ValidationError:
    if code is ErrorCode.MISSING_BLOCK:
        return ValidationError(f"missing documentation block above {kind.value} declaration", line_number, code)
    return ValidationError(
        f"documentation block above {kind.value} declaration has '*/' without a matching '/**'",
        line_number,
        code,
    )


def _signature_errors(
    signature: str,
    block: str,
    config: GuardConfig,
    line_number: int,
    reported_tags: set[str],
) -> list[ValidationError]:
    errors: list[ValidationError] = []
    if config.check_params and "@param" not in reported_tags:
        documented = documented_params(block)
        for name in parameter_names(signature):
            if name not in documented:
                errors.append(
                    ValidationError(
                        f"parameter '{name}' is not documented with @param",
                        line_number,
                        ErrorCode.UNDOCUMENTED_PARAM,
                    )
                )
    if config.check_returns and not reported_tags.intersection(_RETURN_TAGS) and not is_constructor(signature):
        rtype = return_type(signature)
        if rtype and not is_void_type(rtype) and not any(tag in block for tag in _RETURN_TAGS):
            errors.append(
                ValidationError(
                    f"declaration returns '{rtype}' but has no @returns tag",
                    line_number,
                    ErrorCode.MISSING_RETURNS,
                )
            )
    return errors


def validate_declaration(lines: list[str], match: DeclarationMatch, config: GuardConfig) -> list[ValidationError]:
    """All documentation errors for one declaration, in check order.

    Only a missing or malformed block stops the checks early; tag, signature
    and language checks accumulate.
    """
    kind = match.kind
    line_number = match.line_number
    bounds = find_comment_block(lines, match.index)
    if isinstance(bounds, ErrorCode):
        return [_structural_error(kind, bounds, line_number)]
    start, end = bounds
    block = "\n".join(lines[start : end + 1])

    signature = extract_signature(lines, match.index)
    required = config.rule_for(kind).required_tags
    if kind is DeclarationKind.FUNCTION and is_constructor(signature):
        required = tuple(tag for tag in required if tag not in _RETURN_TAGS)

    missing = [tag for tag in required if tag not in block]
    errors = [ValidationError(f"missing tag {tag}", line_number, ErrorCode.MISSING_TAG) for tag in missing]
    if kind is DeclarationKind.FUNCTION:
        errors.extend(_signature_errors(signature, block, config, line_number, set(missing)))

    if config.enforce_english:
        words = detect_non_english(block, config.stop_words, config.language_threshold)
        if words:
            errors.append(
                ValidationError(
                    f"documentation appears non-English (matched: {', '.join(words)})",
                    line_number,
                    ErrorCode.NON_ENGLISH,
                )
            )
    return errors
