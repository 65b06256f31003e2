"""
Hook execution for repository operations.
"""

from hookbridge.dispatcher import (
    CommandHook,
    ProcessHook,
    ScriptHook,
    create_hook,
    create_script_hook,
)
from hookbridge.discovery import HookDescriptor, HookPhase, find_hooks
from hookbridge.exceptions import AbortRequested, HookError, HookExecutionFailure
from hookbridge.executor import run_with_hooks
from hookbridge.host import HostAPI
from hookbridge.interpreters import InterpreterRegistry, PythonInterpreter, get_registry
from hookbridge.operation import Operation
from hookbridge.outcome import HookOutcome, OutcomeStatus
from hookbridge.parameters import apply, extract
from hookbridge.process import run_process_hook
from hookbridge.relay import OutputRelay
from hookbridge.scripting import run_embedded_script

__all__ = [
    # Errors
    "HookError",
    "AbortRequested",
    "HookExecutionFailure",
    # Results
    "HookOutcome",
    "OutcomeStatus",
    # Parameters
    "extract",
    "apply",
    # Runners
    "OutputRelay",
    "run_process_hook",
    "run_embedded_script",
    # Dispatch
    "InterpreterRegistry",
    "PythonInterpreter",
    "get_registry",
    "CommandHook",
    "ScriptHook",
    "ProcessHook",
    "create_script_hook",
    "create_hook",
    "HookDescriptor",
    "HookPhase",
    "find_hooks",
    # Host integration
    "HostAPI",
    "Operation",
    "run_with_hooks",
]
