from __future__ import annotations

from ..contracts import validate_report_payload
from ..model import FileReport, GuardReport


def _file_payload(report: FileReport) -> dict[str, object]:
    row: dict[str, object] = {
        "path": report.path,
        "status": report.status,
        "declarations": [f.to_dict() for f in report.findings],
    }
    if report.reason:
        row["reason"] = report.reason
    return row


def build_payload(report: GuardReport) -> dict[str, object]:
    payload: dict[str, object] = {
        "schema_version": 1,
        "tool": "tsdoc-guard",
        "kind": "docs-report",
        "run_id": report.run_id,
        "status": "pass" if report.ok else "fail",
        "summary": {
            "files_checked": len(report.checked_files),
            "files_failed": len(report.failed_files),
            "files_skipped": len(report.files) - len(report.checked_files),
            "declarations_checked": report.declarations_checked,
            "error_count": report.error_count,
            "added_declarations": report.added_declarations,
        },
        "files": [_file_payload(f) for f in report.files],
    }
    validate_report_payload(payload)
    return payload
