from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class DeclarationKind(str, Enum):
    CLASS = "class"
    FUNCTION = "function"
    PROPERTY = "property"


class ErrorCode(str, Enum):
    MISSING_BLOCK = "missing-block"
    MALFORMED_BLOCK = "malformed-block"
    MISSING_TAG = "missing-tag"
    UNDOCUMENTED_PARAM = "undocumented-param"
    MISSING_RETURNS = "missing-returns"
    NON_ENGLISH = "non-english"


@dataclass(frozen=True)
class ChangedLineSet:
    """Changed 1-based line numbers per repo-relative path.

    ``declarations`` holds the lines the diff added that already look like a
    declaration; it is informational and never drives validation.
    """

    lines: Mapping[str, frozenset[int]] = field(default_factory=dict)
    declarations: Mapping[str, frozenset[int]] = field(default_factory=dict)

    @property
    def paths(self) -> list[str]:
        return sorted(self.lines)

    @property
    def is_empty(self) -> bool:
        return not any(self.lines.values())

    def for_path(self, path: str) -> frozenset[int]:
        return self.lines.get(path, frozenset())

    @property
    def added_declaration_count(self) -> int:
        return sum(len(v) for v in self.declarations.values())


@dataclass(frozen=True)
class DeclarationMatch:
    index: int
    kind: DeclarationKind

    @property
    def line_number(self) -> int:
        return self.index + 1


@dataclass(frozen=True)
class Rule:
    required_tags: tuple[str, ...]
    optional_tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ValidationError:
    message: str
    line_number: int
    code: ErrorCode

    def to_dict(self) -> dict[str, object]:
        return {"message": self.message, "line": self.line_number, "code": self.code.value}


@dataclass(frozen=True)
class DeclarationFinding:
    line_number: int
    kind: DeclarationKind
    source: str
    errors: tuple[ValidationError, ...]

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, object]:
        return {
            "line": self.line_number,
            "kind": self.kind.value,
            "source": self.source,
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass(frozen=True)
class FileReport:
    path: str
    status: str
    findings: tuple[DeclarationFinding, ...] = ()
    reason: str | None = None

    @property
    def errors(self) -> list[ValidationError]:
        return [err for finding in self.findings for err in finding.errors]

    @property
    def failed_findings(self) -> list[DeclarationFinding]:
        return [f for f in self.findings if not f.ok]


@dataclass(frozen=True)
class GuardReport:
    run_id: str
    files: tuple[FileReport, ...]
    added_declarations: int = 0

    @property
    def checked_files(self) -> list[FileReport]:
        return [f for f in self.files if f.status != "skipped"]

    @property
    def failed_files(self) -> list[FileReport]:
        return [f for f in self.files if f.status == "fail"]

    @property
    def error_count(self) -> int:
        return sum(len(f.errors) for f in self.files)

    @property
    def declarations_checked(self) -> int:
        return sum(len(f.findings) for f in self.files)

    @property
    def ok(self) -> bool:
        return not self.failed_files
