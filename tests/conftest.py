"""Pytest fixtures for clustercheck tests."""

import stat
import sys
from pathlib import Path

import pytest
import yaml

# Ensure project root is in path for package imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


@pytest.fixture
def project_root() -> Path:
    return _project_root()


@pytest.fixture
def config_path(project_root: Path) -> Path:
    """Path to config file. Prefers config.yaml, falls back to example."""
    cfg = project_root / "config" / "config.yaml"
    if cfg.exists():
        return cfg
    return project_root / "config" / "config.yaml.example"


@pytest.fixture
def config(config_path: Path) -> dict:
    """Load config dict from YAML."""
    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@pytest.fixture
def make_script(tmp_path: Path):
    """Write an executable /bin/sh script standing in for the mysql client; returns its path."""
    counter = {"n": 0}

    def _make(body: str) -> str:
        counter["n"] += 1
        path = tmp_path / f"mysql_stub_{counter['n']}.sh"
        path.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return _make


@pytest.fixture
def marker_paths(tmp_path: Path):
    """(force_up, force_fail) marker paths in tmp_path; files are not created."""
    return tmp_path / "proxyon", tmp_path / "proxyoff"
