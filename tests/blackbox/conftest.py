"""Blackbox test fixtures and helpers."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Callable, Dict, List

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]


def _run(
    cmd: List[str], cwd: Path, env: Dict[str, str] | None = None, check: bool = True
) -> subprocess.CompletedProcess:
    merged_env = os.environ.copy()
    merged_env["PYTHONPATH"] = str(REPO_ROOT)
    if env:
        merged_env.update(env)
    return subprocess.run(cmd, cwd=str(cwd), env=merged_env, text=True, capture_output=True, check=check)


def init_git_repo(root: Path) -> None:
    _run(["git", "init"], cwd=root)
    _run(["git", "config", "user.email", "test@example.com"], cwd=root)
    _run(["git", "config", "user.name", "Test User"], cwd=root)
    (root / "baseline.txt").write_text("baseline", encoding="utf-8")
    _run(["git", "add", "baseline.txt"], cwd=root)
    _run(["git", "commit", "-m", "init"], cwd=root)


@pytest.fixture()
def run_cli() -> Callable[..., subprocess.CompletedProcess]:
    """Return a helper running ``python -m hookbridge`` with the checkout importable."""

    def _run_cli(args: List[str], cwd: Path, env: Dict[str, str] | None = None) -> subprocess.CompletedProcess:
        command = [os.environ.get("PYTHON", sys.executable), "-m", "hookbridge", *args]
        return _run(command, cwd=cwd, env=env, check=False)

    return _run_cli


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    """A committed repository with an empty ``.hooks`` directory."""
    init_git_repo(tmp_path)
    (tmp_path / ".hooks").mkdir()
    return tmp_path


@pytest.fixture()
def empty_workspace(tmp_path: Path) -> Path:
    return tmp_path
