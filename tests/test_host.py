"""Tests for the repository handle bound into scripts."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import git
import pytest

from hookbridge.exceptions import AbortRequested
from hookbridge.host import HostAPI


@dataclass
class Operation:
    repository: Any = None


def test_for_operation_accepts_repo_or_path(git_repo) -> None:
    assert HostAPI.for_operation(Operation(git_repo)).repo is git_repo
    from_path = HostAPI.for_operation(Operation(git_repo.working_tree_dir))
    assert from_path.working_dir == Path(git_repo.working_tree_dir)


def test_for_operation_without_repository() -> None:
    with pytest.raises(ValueError):
        HostAPI.for_operation(Operation())


def test_for_operation_outside_repository(tmp_path) -> None:
    with pytest.raises(git.InvalidGitRepositoryError):
        HostAPI.for_operation(Operation(tmp_path))


def test_repository_state(git_repo) -> None:
    host = HostAPI(git_repo)
    workdir = Path(git_repo.working_tree_dir)

    assert host.head_commit() == git_repo.head.commit.hexsha
    assert host.active_branch() == git_repo.active_branch.name
    assert host.staged_files() == []
    assert not host.is_dirty()
    assert host.read_file("baseline.txt") == "baseline"

    (workdir / "new.txt").write_text("new\n", encoding="utf-8")
    assert host.is_dirty()
    git_repo.index.add(["new.txt"])
    assert host.staged_files() == ["new.txt"]


def test_unborn_branch(tmp_path) -> None:
    repo = git.Repo.init(tmp_path / "empty")
    (tmp_path / "empty" / "a.txt").write_text("a\n", encoding="utf-8")
    repo.index.add(["a.txt"])
    host = HostAPI(repo)

    assert host.head_commit() is None
    assert host.staged_files() == ["a.txt"]
    repo.close()


def test_abort_raises_typed_signal(git_repo) -> None:
    with pytest.raises(AbortRequested) as excinfo:
        HostAPI(git_repo).abort("tree is empty")
    assert excinfo.value.message == "tree is empty"
