"""Run a hook inside the host process through a registered interpreter.

Evaluation is synchronous and has no timeout: a script that never returns
blocks the operation that triggered it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import git

from hookbridge import parameters
from hookbridge.discovery import HOOKS_DIR_NAME
from hookbridge.exceptions import AbortRequested
from hookbridge.host import HostAPI
from hookbridge.interpreters import InterpreterRegistry, get_registry
from hookbridge.log_manager import log
from hookbridge.outcome import HookOutcome
from hookbridge.utils import PathLike

PARAMS = "params"
HOST = "host"


def abort_message(message: str, script_name: str) -> str:
    """Return the user facing message for an abort raised by ``script_name``."""
    return f"{message} (command aborted by {HOOKS_DIR_NAME}/{script_name})"


def find_abort(exc: BaseException) -> Optional[AbortRequested]:
    """Return the :class:`AbortRequested` in the cause/context chain of ``exc``, if any."""

    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, AbortRequested):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


def run_embedded_script(
    operation: object,
    script_path: PathLike,
    host: Optional[HostAPI] = None,
    registry: Optional[InterpreterRegistry] = None,
) -> HookOutcome:
    """
    Evaluate ``script_path`` with the operation's parameters bound as ``params``.

    Args:
        operation: The operation triggering the script; its fields are updated from
            ``params`` when the script finishes normally
        script_path: Hook script to evaluate
        host: Repository handle bound as ``host``; resolved from the operation when omitted
        registry: Interpreter registry, the process-wide one by default

    Returns:
        HookOutcome: aborted when the script requested it, ignored when it could not
        run or failed for any other reason, allowed otherwise
    """
    script = Path(script_path)
    log.info("Running embedded script %s", script.absolute())

    if not script.is_file():
        log.warning("Script file does not exist %s", script)
        return HookOutcome.ignored(f"{script.name} does not exist")

    interpreter = (registry or get_registry()).for_file(script)
    if interpreter is None:
        return HookOutcome.ignored(f"no interpreter registered for {script.name}")

    try:
        if host is None:
            host = HostAPI.for_operation(operation)
    except (ValueError, git.InvalidGitRepositoryError, git.NoSuchPathError) as exc:
        log.warning("Cannot resolve repository for %s: %s", script.name, exc)
        return HookOutcome.ignored(f"no repository for {script.name}: {exc}")

    namespace: Dict[str, Any] = {PARAMS: parameters.extract(operation), HOST: host}
    try:
        namespace = interpreter.evaluate(script, namespace)
    except Exception as exc:  # pylint: disable=broad-except
        abort = find_abort(exc)
        if abort is not None:
            message = abort_message(abort.message, script.name)
            log.info("Hook %s aborted the operation: %s", script.name, abort.message)
            return HookOutcome.aborted(AbortRequested(message, hook=script.name))
        # a broken script counts as no script at all
        log.warning("Ignoring hook %s: %s: %s", script.name, type(exc).__name__, exc)
        return HookOutcome.ignored(f"{script.name} failed: {exc}")
    except SystemExit as exc:
        log.warning("Ignoring hook %s: script called exit(%s)", script.name, exc.code)
        return HookOutcome.ignored(f"{script.name} exited")

    updated = namespace.get(PARAMS)
    if isinstance(updated, Mapping):
        parameters.apply(updated, operation)
    else:
        log.warning(
            "Hook %s rebound '%s' to %s, not updating the operation", script.name, PARAMS, type(updated).__name__
        )
    return HookOutcome.allowed()
