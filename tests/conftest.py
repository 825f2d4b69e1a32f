from __future__ import annotations

import socket
from pathlib import Path

import pytest
from hypothesis import settings

from tsdoc_guard.config import GuardConfig, default_config
from tsdoc_guard.core.context import RunContext

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

settings.register_profile("guard", deadline=None, print_blob=True)
settings.load_profile("guard")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def no_network_for_unit(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("slow"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)


@pytest.fixture
def config() -> GuardConfig:
    return default_config()


@pytest.fixture
def ctx(tmp_path: Path) -> RunContext:
    return RunContext(
        run_id="t-run",
        repo_root=tmp_path,
        output_format="text",
        verbose=False,
        quiet=True,
        log_json=False,
    )
