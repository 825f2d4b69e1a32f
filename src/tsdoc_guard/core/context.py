from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from .process import run_command

OutputFormat = Literal["text", "json"]


def _short_sha(repo_root: Path) -> str:
    result = run_command(["git", "rev-parse", "--short", "HEAD"], repo_root)
    return result.stdout.strip() if result.ok and result.stdout.strip() else "unknown"


@dataclass(frozen=True)
class RunContext:
    run_id: str
    repo_root: Path
    output_format: OutputFormat
    verbose: bool
    quiet: bool
    log_json: bool

    @classmethod
    def from_args(
        cls,
        run_id: str | None = None,
        repo_root: str | None = None,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
    ) -> "RunContext":
        root = Path(repo_root).resolve() if repo_root else Path.cwd().resolve()
        resolved_run_id = run_id or os.environ.get("RUN_ID")
        if not resolved_run_id:
            ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
            resolved_run_id = f"guard-{ts}-{_short_sha(root)}"
        return cls(
            run_id=resolved_run_id,
            repo_root=root,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
        )
