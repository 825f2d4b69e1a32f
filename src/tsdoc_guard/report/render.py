from __future__ import annotations

from ..model import GuardReport

_RULE = "-" * 80


def render_text(report: GuardReport) -> str:
    if report.ok:
        checked = len(report.checked_files)
        return f"tsdoc-guard: pass ({report.declarations_checked} declarations in {checked} files)"
    out: list[str] = ["tsdoc-guard: documentation errors found", ""]
    for file_report in report.failed_files:
        out.append(f"{file_report.path}")
        out.append(_RULE)
        for finding in file_report.failed_findings:
            out.append(f"  line {finding.line_number}: {finding.source}")
            for err in finding.errors:
                out.append(f"    - [{err.code.value}] {err.message}")
        out.append("")
    skipped = [f for f in report.files if f.status == "skipped"]
    for file_report in skipped:
        out.append(f"skipped {file_report.path}: {file_report.reason}")
    out.append(f"total errors: {report.error_count} in {len(report.failed_files)} files")
    out.append("document every new or changed declaration in English with the required tags")
    return "\n".join(out)
