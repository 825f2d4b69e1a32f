from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from tsdoc_guard.core.context import RunContext
from tsdoc_guard.core.process import run_command


def test_successful_command_captures_stdout(tmp_path: Path) -> None:
    result = run_command([sys.executable, "-c", "print('ok')"], tmp_path)
    assert result.ok
    assert result.stdout.strip() == "ok"


def test_timeout_maps_to_124(tmp_path: Path) -> None:
    result = run_command([sys.executable, "-c", "import time; time.sleep(5)"], tmp_path, timeout_seconds=1)
    assert result.code == 124
    assert "timed out after 1s" in result.stderr


def test_missing_binary_maps_to_127(tmp_path: Path) -> None:
    result = run_command(["tsdoc-guard-no-such-binary"], tmp_path)
    assert result.code == 127
    assert not result.ok


def test_command_runs_are_logged_with_context(ctx: RunContext, capsys: pytest.CaptureFixture[str]) -> None:
    verbose = RunContext(
        run_id=ctx.run_id,
        repo_root=ctx.repo_root,
        output_format="text",
        verbose=True,
        quiet=False,
        log_json=True,
    )
    run_command([sys.executable, "-c", "pass"], ctx.repo_root, ctx=verbose)
    payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert (payload["component"], payload["action"], payload["code"]) == ("process", "run-command", 0)


def test_generated_run_id_falls_back_without_a_commit(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RUN_ID", raising=False)
    monkeypatch.setenv("GIT_DIR", str(tmp_path / "missing"))
    ctx = RunContext.from_args(repo_root=str(tmp_path))
    assert ctx.run_id.startswith("guard-")
    assert ctx.run_id.endswith("-unknown")
    assert ctx.repo_root == tmp_path.resolve()
