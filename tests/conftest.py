from __future__ import annotations

import sys
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest
import yaml

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from workbench.config.cluster import BUNDLED_DEFAULTS_PATH


def _bundled_payload() -> Dict[str, Any]:
    return yaml.safe_load(BUNDLED_DEFAULTS_PATH.read_text(encoding="utf-8"))


def make_runner(
    dump_overrides: Optional[Dict[str, Any]] = None,
    cluster_id: str = "zzzzz",
    defaults_available: bool = True,
    dump_available: bool = True,
) -> Callable[[str], Optional[Dict[str, Any]]]:
    """Stand-in for the cluster config tool.

    ``config-dump`` returns the bundled defaults under ``cluster_id`` merged
    with ``dump_overrides``, like the real tool does.
    """

    from workbench.config.loader import deep_merge

    defaults = next(iter(_bundled_payload()["Clusters"].values()))
    calls = []

    def _run(subcommand: str) -> Optional[Dict[str, Any]]:
        calls.append(subcommand)
        if subcommand == "config-defaults":
            if not defaults_available:
                return None
            return {"Clusters": {"xxxxx": deepcopy(defaults)}}
        if subcommand == "config-dump":
            if not dump_available:
                return None
            return {"Clusters": {cluster_id: deep_merge(defaults, dump_overrides or {})}}
        raise AssertionError(f"unexpected subcommand {subcommand}")

    _run.calls = calls  # type: ignore[attr-defined]
    return _run


@pytest.fixture
def runner_factory() -> Callable[..., Callable[[str], Optional[Dict[str, Any]]]]:
    return make_runner


@pytest.fixture
def write_legacy(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str = "application.yml", **sections: Any) -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(sections), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def complete_dump() -> Dict[str, Any]:
    return {
        "ManagementToken": "mgmt-token",
        "Services": {"Workbench2": {"ExternalURL": "https://wb2.zzzzz.example.com/"}},
        "Workbench": {"SecretKeyBase": "s3cr3t"},
    }
