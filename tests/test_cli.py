from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

from tsdoc_guard import __version__
from tsdoc_guard.cli import build_parser, main
from tsdoc_guard.exit_codes import ERR_CONFIG, ERR_DOCS, ERR_INTERNAL, ERR_USAGE, OK

ROOT = Path(__file__).resolve().parents[1]

UNDOCUMENTED = "export class Bad {\n  private nombre: string;\n}\n"
DOCUMENTED = "/**\n * @description Holds a name.\n */\nexport class Good {}\n"


def _run_cli(cwd: Path, *args: str) -> subprocess.CompletedProcess[str]:
    env = {"PYTHONPATH": str(ROOT / "src")}
    return subprocess.run(
        [sys.executable, "-m", "tsdoc_guard.cli", "--run-id", "t-run", *args],
        cwd=cwd,
        env=env,
        text=True,
        capture_output=True,
        check=False,
    )


@pytest.fixture(autouse=True)
def _no_ci(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CI", raising=False)


def _main(root: Path, *args: str) -> int:
    return main(["--repo-root", str(root), "--run-id", "t-run", "--quiet", *args])


def test_parser_defaults_to_check() -> None:
    ns = build_parser().parse_args([])
    assert ns.cmd is None
    ns = build_parser().parse_args(["files", "a.ts", "--threshold", "3"])
    assert (ns.cmd, ns.paths, ns.threshold) == ("files", ["a.ts"], 3)


def test_verbose_and_quiet_are_exclusive() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--verbose", "--quiet"])


def test_version_subprocess(tmp_path: Path) -> None:
    proc = _run_cli(tmp_path, "--version")
    assert proc.returncode == 0
    assert proc.stdout.strip() == f"tsdoc-guard {__version__}"


def test_files_command_json_subprocess(tmp_path: Path) -> None:
    (tmp_path / "bad.ts").write_text(UNDOCUMENTED, encoding="utf-8")
    proc = _run_cli(tmp_path, "--format", "json", "--quiet", "files", "bad.ts")
    assert proc.returncode == ERR_DOCS, proc.stderr
    payload = json.loads(proc.stdout)
    assert payload["status"] == "fail"
    assert payload["run_id"] == "t-run"
    codes = [e["code"] for d in payload["files"][0]["declarations"] for e in d["errors"]]
    assert codes == ["missing-block", "missing-block"]


def test_files_command_text(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "good.ts").write_text(DOCUMENTED, encoding="utf-8")
    assert _main(tmp_path, "files", "good.ts") == OK
    assert capsys.readouterr().out.strip() == "tsdoc-guard: pass (1 declarations in 1 files)"


def test_files_command_failure_text(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "bad.ts").write_text(UNDOCUMENTED, encoding="utf-8")
    assert _main(tmp_path, "--format", "text", "files", "bad.ts") == ERR_DOCS
    out = capsys.readouterr().out
    assert "bad.ts" in out
    assert "[missing-block]" in out


def test_unreadable_path_is_usage_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _main(tmp_path, "files", "missing.ts") == ERR_USAGE
    assert "cannot read missing.ts" in capsys.readouterr().err


def test_threshold_must_be_positive(tmp_path: Path) -> None:
    assert _main(tmp_path, "files", "x.ts", "--threshold", "0") == ERR_USAGE


def test_bad_config_is_reported_as_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / ".tsdoc-guard.yaml").write_text("language_threshold: -1\n", encoding="utf-8")
    assert _main(tmp_path, "--format", "json", "rules") == ERR_CONFIG
    error = json.loads(capsys.readouterr().err)
    assert error["status"] == "error"
    assert error["error"]["kind"] == "config_error"


def test_rules_prints_effective_policy(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / ".tsdoc-guard.yaml").write_text("language_threshold: 4\n", encoding="utf-8")
    assert _main(tmp_path, "rules") == OK
    data = json.loads(capsys.readouterr().out)
    assert data["language_threshold"] == 4
    assert data["rules"]["class"]["required_tags"] == ["@description"]


def test_threshold_override_reaches_rules(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "es.ts").write_text(
        "/**\n * @description Calcula el total.\n */\nexport class Es {}\n",
        encoding="utf-8",
    )
    assert _main(tmp_path, "files", "es.ts") == ERR_DOCS
    capsys.readouterr()
    assert _main(tmp_path, "files", "es.ts", "--threshold", "3") == OK


def test_json_logs_go_to_stderr(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "good.ts").write_text(DOCUMENTED, encoding="utf-8")
    code = main(
        ["--repo-root", str(tmp_path), "--run-id", "t-run", "--log-json", "--format", "json", "files", "good.ts"]
    )
    assert code == OK
    captured = capsys.readouterr()
    assert json.loads(captured.out)["status"] == "pass"
    events = [json.loads(line) for line in captured.err.splitlines() if line.strip()]
    assert events
    assert all(event["run_id"] == "t-run" for event in events)
    assert {"cli", "runner"} <= {event["component"] for event in events}


def test_unexpected_failure_is_internal_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def _explode(*_args: object, **_kwargs: object) -> object:
        raise RuntimeError("boom")

    monkeypatch.setattr("tsdoc_guard.cli.run_guard", _explode)
    (tmp_path / "good.ts").write_text(DOCUMENTED, encoding="utf-8")
    assert _main(tmp_path, "files", "good.ts") == ERR_INTERNAL
    assert "internal error: boom" in capsys.readouterr().err
