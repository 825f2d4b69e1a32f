from __future__ import annotations

import argparse
import json
import os
import sys

from . import __version__
from .config import GuardConfig, load_config
from .core.context import RunContext
from .core.fs import read_source_lines
from .core.logging import log_event
from .diff import collect_changed_lines
from .errors import ScriptError
from .exit_codes import ERR_DOCS, ERR_INTERNAL, ERR_USAGE, OK
from .model import ChangedLineSet, GuardReport
from .report import build_payload, render_text
from .runner import run_guard


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tsdoc-guard", description="check TSDoc blocks on changed declarations")
    p.add_argument("--version", action="version", version=f"tsdoc-guard {__version__}")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    p.add_argument("--config", help="policy file (default: .tsdoc-guard.yaml at the repository root)")
    p.add_argument("--repo-root", help="repository root (default: current directory)")
    p.add_argument("--run-id", help="run identifier for log events")
    p.add_argument("--log-json", action="store_true", help="emit log events as JSON lines on stderr")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable debug diagnostics")
    vg.add_argument("--quiet", action="store_true", help="only emit errors")
    sub = p.add_subparsers(dest="cmd")

    check_p = sub.add_parser("check", help="validate declarations touched by the current git changes (default)")
    _add_policy_overrides(check_p)
    check_p.add_argument("--context-margin", type=int, help="extra lines marked around each hunk")

    files_p = sub.add_parser("files", help="validate every declaration in the given files")
    _add_policy_overrides(files_p)
    files_p.add_argument("paths", nargs="+")

    sub.add_parser("rules", help="print the effective policy as JSON")
    return p


def _add_policy_overrides(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--threshold", type=int, help="stop-words needed to flag a block as non-English")


def _apply_overrides(config: GuardConfig, ns: argparse.Namespace) -> GuardConfig:
    threshold = getattr(ns, "threshold", None)
    margin = getattr(ns, "context_margin", None)
    if threshold is not None and threshold < 1:
        raise ScriptError("--threshold must be at least 1", ERR_USAGE, "usage_error")
    if margin is not None and margin < 0:
        raise ScriptError("--context-margin must not be negative", ERR_USAGE, "usage_error")
    return config.with_overrides(language_threshold=threshold, context_margin=margin)


def _changed_from_files(ctx: RunContext, paths: list[str]) -> ChangedLineSet:
    lines: dict[str, frozenset[int]] = {}
    for path in paths:
        try:
            count = len(read_source_lines(ctx.repo_root / path))
        except (OSError, UnicodeDecodeError) as exc:
            raise ScriptError(f"cannot read {path}: {exc}", ERR_USAGE, "usage_error") from exc
        lines[path] = frozenset(range(1, count + 1))
    return ChangedLineSet(lines=lines)


def _emit_report(ctx: RunContext, report: GuardReport) -> int:
    if ctx.output_format == "json":
        print(json.dumps(build_payload(report), sort_keys=True))
    else:
        print(render_text(report))
    return OK if report.ok else ERR_DOCS


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    ns = p.parse_args(argv)
    cmd = ns.cmd or "check"
    fmt = ns.format or ("json" if "CI" in os.environ else "text")
    ctx = RunContext.from_args(
        run_id=ns.run_id,
        repo_root=ns.repo_root,
        output_format=fmt,
        verbose=ns.verbose,
        quiet=ns.quiet,
        log_json=ns.log_json,
    )
    try:
        config, source = load_config(ctx.repo_root, ns.config)
        config = _apply_overrides(config, ns)
        log_event(ctx, "info", "cli", "start", cmd=cmd, fmt=fmt, config=str(source) if source else "defaults")
        if cmd == "rules":
            print(json.dumps(config.to_dict(), indent=2, sort_keys=True, ensure_ascii=False))
            return OK
        if cmd == "files":
            changed = _changed_from_files(ctx, ns.paths)
        else:
            changed = collect_changed_lines(ctx, config)
            if changed.is_empty:
                log_event(ctx, "info", "cli", "no-changes")
        return _emit_report(ctx, run_guard(ctx, config, changed))
    except ScriptError as exc:
        if ctx.output_format == "json":
            print(
                json.dumps(
                    {
                        "schema_version": 1,
                        "tool": "tsdoc-guard",
                        "status": "error",
                        "error": {"message": str(exc), "code": exc.code, "kind": exc.kind},
                    },
                    sort_keys=True,
                ),
                file=sys.stderr,
            )
        else:
            print(str(exc), file=sys.stderr)
        return exc.code
    except Exception as exc:
        print(f"internal error: {exc}", file=sys.stderr)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
