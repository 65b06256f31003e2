"""Run an operation between its pre and post hooks."""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence

import git

from hookbridge.config import HookSettings, load_settings
from hookbridge.discovery import find_hooks, hooks_dir_for
from hookbridge.dispatcher import CommandHook, create_hook
from hookbridge.exceptions import AbortRequested
from hookbridge.interpreters import InterpreterRegistry
from hookbridge.log_manager import log
from hookbridge.operation import hook_name_of, resolve_repository
from hookbridge.outcome import HookOutcome


def discover_hooks(
    operation: object, registry: Optional[InterpreterRegistry] = None
) -> List[CommandHook]:
    """
    Build the hook handles for ``operation`` from its repository's ``.hooks`` directory.

    Args:
        operation: Operation about to run
        registry: Interpreter registry used for dispatch

    Returns:
        Pre and post handles in file name order; empty when the operation has no
        repository or hooks are disabled
    """
    try:
        repo = resolve_repository(operation)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError) as exc:
        log.debug("No repository for %s: %s", type(operation).__name__, exc)
        return []
    if repo is None:
        return []

    hooks_dir = hooks_dir_for(repo)
    settings: HookSettings = load_settings(hooks_dir)
    if not settings.enabled:
        log.debug("Hooks disabled for '%s'", hooks_dir)
        return []

    name = hook_name_of(operation)
    return [create_hook(descriptor, registry, settings) for descriptor in find_hooks(hooks_dir, name)]


def execute_pre_hooks(operation: object, hooks: Sequence[CommandHook]) -> List[HookOutcome]:
    """
    Run every pre hook applying to ``operation``, one after the other.

    Raises:
        AbortRequested: from the first hook that aborts; later hooks do not run
    """
    outcomes: List[HookOutcome] = []
    for hook in hooks:
        if hook.pre_script is None or not hook.applies_to(operation):
            continue
        outcomes.append(hook.pre(operation))
    return outcomes


def execute_post_hooks(operation: object, hooks: Sequence[CommandHook], success: bool) -> List[HookOutcome]:
    """
    Run every post hook applying to ``operation``, one after the other.

    Raises:
        AbortRequested: from the first hook that reports a failure
    """
    outcomes: List[HookOutcome] = []
    for hook in hooks:
        if hook.post_script is None or not hook.applies_to(operation):
            continue
        outcomes.append(hook.post(operation, success))
    return outcomes


def run_with_hooks(
    operation: object,
    func: Callable[[], Any],
    hooks: Optional[Sequence[CommandHook]] = None,
    registry: Optional[InterpreterRegistry] = None,
) -> Any:
    """
    Call ``func`` with the operation's hooks around it.

    Args:
        operation: Operation whose fields hooks may rewrite before ``func`` runs
        func: The operation body
        hooks: Hook handles to use instead of discovering them
        registry: Interpreter registry used when discovering hooks

    Returns:
        Whatever ``func`` returns

    Raises:
        AbortRequested: if a pre hook aborts (``func`` is not called) or a post hook
        reports a failure after ``func`` succeeded. When ``func`` raises, its own
        error propagates and post hook aborts are only logged.
    """
    if hooks is None:
        hooks = discover_hooks(operation, registry)

    name = hook_name_of(operation)
    log.debug("Running %d hooks around '%s'", len(hooks), name)

    execute_pre_hooks(operation, hooks)

    try:
        result = func()
    except Exception:
        try:
            execute_post_hooks(operation, hooks, success=False)
        except AbortRequested as abort:
            log.error("Post hook abort after failed '%s' dropped: %s", name, abort.message)
        raise
    execute_post_hooks(operation, hooks, success=True)
    return result
