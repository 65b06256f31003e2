"""Tests for running operations between their pre and post hooks."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

import pytest

from hookbridge.exceptions import AbortRequested, HookExecutionFailure
from hookbridge.executor import discover_hooks, run_with_hooks
from hookbridge.interpreters import InterpreterRegistry, PythonInterpreter
from hookbridge.operation import Operation, hook_name_of, parameter_operation

posix_only = pytest.mark.skipif(os.name == "nt", reason="relies on POSIX executables")


@dataclass
class Commit(Operation):
    hook_name = "commit"

    message: str = "wip"
    performed: List[str] = field(default_factory=list, metadata={"hook": False})
    repository: Any = field(default=None, metadata={"hook": False})

    def _call(self) -> str:
        self.performed.append(self.message)
        return self.message


@dataclass
class Failing(Operation):
    repository: Any = field(default=None, metadata={"hook": False})

    def _call(self) -> None:
        raise RuntimeError("operation failed")


@pytest.fixture
def hooks_dir(git_repo) -> Path:
    directory = Path(git_repo.working_tree_dir) / ".hooks"
    directory.mkdir()
    return directory


@pytest.fixture(autouse=True)
def _python_only_registry(monkeypatch) -> None:
    # pylint: disable=import-outside-toplevel
    from hookbridge import interpreters

    monkeypatch.setattr(interpreters, "_registry", InterpreterRegistry([PythonInterpreter()]).freeze())


def test_operation_without_hooks_runs(git_repo) -> None:
    op = Commit(repository=git_repo)
    assert op.call() == "wip"
    assert op.performed == ["wip"]


def test_operation_without_repository_runs() -> None:
    assert Commit().call() == "wip"


def test_pre_hook_rewrites_before_call(git_repo, hooks_dir) -> None:
    (hooks_dir / "pre_commit.py").write_text("params['message'] = 'from hook'\n", encoding="utf-8")
    op = Commit(repository=git_repo)

    assert op.call() == "from hook"


def test_pre_hook_abort_prevents_call(git_repo, hooks_dir) -> None:
    (hooks_dir / "pre_commit.py").write_text("host.abort('tree is empty')\n", encoding="utf-8")
    op = Commit(repository=git_repo)

    with pytest.raises(AbortRequested) as excinfo:
        op.call()

    assert excinfo.value.message == "tree is empty (command aborted by .hooks/pre_commit.py)"
    assert op.performed == []


def test_hooks_of_other_operations_do_not_run(git_repo, hooks_dir) -> None:
    (hooks_dir / "pre_push.py").write_text("host.abort('push only')\n", encoding="utf-8")
    assert Commit(repository=git_repo).call() == "wip"


def test_broken_hook_behaves_like_no_hook(git_repo, hooks_dir) -> None:
    (hooks_dir / "pre_commit.py").write_text("params['message'] = (\n", encoding="utf-8")
    assert Commit(repository=git_repo).call() == "wip"


def test_post_hook_sees_result_of_operation(git_repo, hooks_dir) -> None:
    (hooks_dir / "pre_commit.py").write_text("params['message'] = 'first'\n", encoding="utf-8")
    (hooks_dir / "post_commit.py").write_text(
        "if params['message'] != 'first':\n    host.abort('pre hook did not run')\nparams['message'] = 'after'\n",
        encoding="utf-8",
    )
    op = Commit(repository=git_repo)

    assert op.call() == "first"
    assert op.message == "after"


@posix_only
def test_process_pre_hook_failure_aborts(git_repo, hooks_dir, make_hook) -> None:
    make_hook(hooks_dir / "pre_commit.sh", "#!/bin/sh\nexit 1\n")
    op = Commit(repository=git_repo)

    with pytest.raises(HookExecutionFailure):
        op.call()
    assert op.performed == []


@posix_only
def test_disabled_hook_file_is_skipped(git_repo, hooks_dir, make_hook) -> None:
    make_hook(hooks_dir / "pre_commit.sh", "#!/bin/sh\nexit 1\n", executable=False)
    assert Commit(repository=git_repo).call() == "wip"


def test_settings_can_disable_all_hooks(git_repo, hooks_dir) -> None:
    (hooks_dir / "pre_commit.py").write_text("host.abort('disabled')\n", encoding="utf-8")
    (hooks_dir / "hooks.ini").write_text("[hooks]\nenabled = false\n", encoding="utf-8")

    assert discover_hooks(Commit(repository=git_repo)) == []
    assert Commit(repository=git_repo).call() == "wip"


def test_post_hooks_run_when_operation_fails(git_repo, hooks_dir) -> None:
    marker = Path(git_repo.working_tree_dir) / "post-ran"
    (hooks_dir / "post_failing.py").write_text(
        f"open({str(marker)!r}, 'w').close()\n", encoding="utf-8"
    )

    with pytest.raises(RuntimeError):
        Failing(repository=git_repo).call()
    assert marker.exists()


def test_explicit_hooks_skip_discovery() -> None:
    calls = []
    assert run_with_hooks(Commit(), lambda: calls.append("ran") or "done", hooks=[]) == "done"
    assert calls == ["ran"]


def test_hook_name_of() -> None:
    assert hook_name_of(Commit()) == "commit"
    assert hook_name_of(Failing()) == "failing"


def test_parameter_operation_exposes_values(git_repo, hooks_dir) -> None:
    (hooks_dir / "pre_tag.py").write_text("params['name'] = params['name'] + '-rc'\n", encoding="utf-8")
    op = parameter_operation("tag", {"name": "v1"}, repository=git_repo)

    assert op.call() == {"name": "v1-rc"}


def test_operation_error_wins_over_post_hook_abort(git_repo, hooks_dir) -> None:
    (hooks_dir / "post_failing.py").write_text("host.abort('post says no')\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="operation failed"):
        Failing(repository=git_repo).call()


def test_post_hook_abort_after_success_propagates(git_repo, hooks_dir) -> None:
    (hooks_dir / "post_commit.py").write_text("host.abort('post says no')\n", encoding="utf-8")
    op = Commit(repository=git_repo)

    with pytest.raises(AbortRequested, match="post says no"):
        op.call()
    assert op.performed == ["wip"]


def test_operation_needs_a_body() -> None:
    @dataclass
    class Bodiless(Operation):
        message: str = "wip"

    with pytest.raises(TypeError):
        Bodiless()  # pylint: disable=abstract-class-instantiated
