from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable

from .config import GuardConfig
from .core.context import RunContext
from .core.fs import read_source_lines
from .core.logging import log_event
from .locate import find_declaration, find_declaration_below, is_inside_doc_block
from .model import ChangedLineSet, DeclarationFinding, DeclarationMatch, FileReport, GuardReport
from .validate import validate_declaration


@dataclass
class ValidationSession:
    """Declarations already validated in this run, keyed by ``(path, index)``."""

    validated: set[tuple[str, int]] = field(default_factory=set)

    def claim(self, path: str, index: int) -> bool:
        key = (path, index)
        if key in self.validated:
            return False
        self.validated.add(key)
        return True


def should_check(path: str, config: GuardConfig) -> bool:
    if not path.endswith(config.extensions):
        return False
    return not any(fnmatch(path, pattern) for pattern in config.exclude)


def split_changes(lines: list[str], changed: Iterable[int]) -> tuple[list[int], list[int]]:
    """0-based indexes of changed lines inside doc blocks and in code; out-of-range numbers drop."""
    comment: list[int] = []
    code: list[int] = []
    for number in sorted(changed):
        index = number - 1
        if not 0 <= index < len(lines):
            continue
        (comment if is_inside_doc_block(lines, index) else code).append(index)
    return comment, code


def associate(lines: list[str], changed: Iterable[int], config: GuardConfig) -> list[DeclarationMatch]:
    """Distinct declarations owning the changed lines, ordered by position."""
    comment, code = split_changes(lines, changed)
    found: dict[int, DeclarationMatch] = {}
    for index in comment:
        match = find_declaration_below(lines, index, config) or find_declaration(lines, index, config)
        if match is not None:
            found.setdefault(match.index, match)
    for index in code:
        match = find_declaration(lines, index, config)
        if match is not None:
            found.setdefault(match.index, match)
    return [found[i] for i in sorted(found)]


def validate_file(
    path: str,
    lines: list[str],
    changed: Iterable[int],
    config: GuardConfig,
    session: ValidationSession,
) -> list[DeclarationFinding]:
    findings: list[DeclarationFinding] = []
    for match in associate(lines, changed, config):
        if not session.claim(path, match.index):
            continue
        errors = validate_declaration(lines, match, config)
        findings.append(
            DeclarationFinding(
                line_number=match.line_number,
                kind=match.kind,
                source=lines[match.index].strip(),
                errors=tuple(errors),
            )
        )
    return findings


def check_file(
    ctx: RunContext,
    path: str,
    changed: Iterable[int],
    config: GuardConfig,
    session: ValidationSession,
) -> FileReport:
    full_path = ctx.repo_root / Path(path)
    try:
        lines = read_source_lines(full_path)
    except (OSError, UnicodeDecodeError) as exc:
        log_event(ctx, "debug", "runner", "read-failed", path=path, error=str(exc))
        return FileReport(path=path, status="skipped", reason=f"unreadable: {exc.__class__.__name__}")
    findings = validate_file(path, lines, changed, config, session)
    status = "fail" if any(not f.ok for f in findings) else "pass"
    log_event(ctx, "debug", "runner", "file-checked", path=path, declarations=len(findings), status=status)
    return FileReport(path=path, status=status, findings=tuple(findings))


def run_guard(
    ctx: RunContext,
    config: GuardConfig,
    changed: ChangedLineSet,
    session: ValidationSession | None = None,
) -> GuardReport:
    session = session or ValidationSession()
    reports: list[FileReport] = []
    for path in changed.paths:
        numbers = changed.for_path(path)
        if not numbers:
            continue
        if not should_check(path, config):
            log_event(ctx, "debug", "runner", "file-filtered", path=path)
            continue
        reports.append(check_file(ctx, path, numbers, config, session))
    report = GuardReport(
        run_id=ctx.run_id,
        files=tuple(reports),
        added_declarations=changed.added_declaration_count,
    )
    log_event(
        ctx,
        "info",
        "runner",
        "finished",
        files=len(report.checked_files),
        failed=len(report.failed_files),
        errors=report.error_count,
    )
    return report
