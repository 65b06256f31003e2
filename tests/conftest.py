"""
Pytest configuration.

Ensure the repository root is importable so `import hookbridge` works reliably
across platforms and import modes, and keep log files out of the checkout.
"""

from __future__ import annotations

import os
import stat
import sys
import tempfile
from pathlib import Path

import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

os.environ.setdefault("HOOKBRIDGE_LOG_DIR", os.path.join(tempfile.mkdtemp(prefix="hookbridge-"), "logs"))


def _write_hook(path: Path, content: str, executable: bool = True) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    mode = path.stat().st_mode
    if executable:
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    else:
        path.chmod(mode & ~(stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))
    return path


@pytest.fixture
def make_hook():
    """Return a helper writing a hook file and setting or clearing its executable bits."""
    return _write_hook


@pytest.fixture
def git_repo(tmp_path):
    """An initialised repository with one commit."""
    import git  # pylint: disable=import-outside-toplevel

    repo = git.Repo.init(tmp_path / "repo")
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
    baseline = Path(repo.working_tree_dir) / "baseline.txt"
    baseline.write_text("baseline\n", encoding="utf-8")
    repo.index.add(["baseline.txt"])
    repo.index.commit("init")
    yield repo
    repo.close()
