"""Choose how a hook file runs and wrap it in a phase-specific handle."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Optional

from hookbridge.config import HookSettings
from hookbridge.discovery import HookDescriptor, HookPhase
from hookbridge.host import HostAPI
from hookbridge.interpreters import InterpreterRegistry, get_registry
from hookbridge.log_manager import log
from hookbridge.operation import hook_name_of
from hookbridge.outcome import HookOutcome
from hookbridge.process import run_process_hook
from hookbridge.scripting import run_embedded_script
from hookbridge.utils import PathLike


class CommandHook(ABC):
    """
    Handle running one hook file before or after an operation.

    A handle is wired for a single phase: :meth:`pre` does nothing on a post hook
    and :meth:`post` does nothing on a pre hook.
    """

    strategy = "none"

    def __init__(
        self,
        pre_script: Optional[Path] = None,
        post_script: Optional[Path] = None,
        operation_name: Optional[str] = None,
        settings: Optional[HookSettings] = None,
    ):
        self.pre_script = pre_script
        self.post_script = post_script
        self.operation_name = operation_name.lower() if operation_name else None
        self.settings = settings or HookSettings()

    @property
    def script(self) -> Optional[Path]:
        return self.pre_script or self.post_script

    @property
    def phase(self) -> HookPhase:
        return HookPhase.PRE if self.pre_script is not None else HookPhase.POST

    def applies_to(self, operation: object) -> bool:
        """Return True if this hook is wired to the type of ``operation``."""
        if self.operation_name is None:
            return True
        return hook_name_of(operation) == self.operation_name

    def pre(self, operation: object) -> HookOutcome:
        """
        Run the pre script against ``operation``.

        Raises:
            AbortRequested: if the hook asks for the operation not to run
        """
        if self.pre_script is None:
            return HookOutcome.ignored("not a pre hook")
        return self._run(self.pre_script, operation)

    def post(self, operation: object, success: bool = True) -> HookOutcome:
        """
        Run the post script once ``operation`` has run.

        Raises:
            AbortRequested: if the hook reports a failure
        """
        if self.post_script is None:
            return HookOutcome.ignored("not a post hook")
        log.debug("Post hook %s after %s operation", self.post_script.name, "successful" if success else "failed")
        return self._run(self.post_script, operation)

    def _run(self, script: Path, operation: object) -> HookOutcome:
        if self.settings.is_skipped(script):
            log.info("Hook %s disabled by configuration", script.name)
            return HookOutcome.ignored(f"{script.name} disabled by configuration")
        outcome = self._execute(script, operation)
        if not outcome.proceeds:
            log.error("Hook %s aborted: %s", script.name, outcome.message)
        elif outcome.reason:
            log.debug("Hook %s ignored: %s", script.name, outcome.reason)
        outcome.raise_for_abort()
        return outcome

    @abstractmethod
    def _execute(self, script: Path, operation: object) -> HookOutcome:
        """Run ``script`` for ``operation`` and report how it ended."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.phase.value}, {self.script})"


class ScriptHook(CommandHook):
    """Hook evaluated in-process by a registered interpreter."""

    strategy = "script"

    def __init__(
        self,
        pre_script: Optional[Path] = None,
        post_script: Optional[Path] = None,
        operation_name: Optional[str] = None,
        settings: Optional[HookSettings] = None,
        registry: Optional[InterpreterRegistry] = None,
        host: Optional[HostAPI] = None,
    ):
        super().__init__(pre_script, post_script, operation_name, settings)
        self.registry = registry
        self.host = host

    def _execute(self, script: Path, operation: object) -> HookOutcome:
        return run_embedded_script(operation, script, host=self.host, registry=self.registry)


class ProcessHook(CommandHook):
    """Hook started as an external executable."""

    strategy = "process"

    def __init__(
        self,
        pre_script: Optional[Path] = None,
        post_script: Optional[Path] = None,
        operation_name: Optional[str] = None,
        settings: Optional[HookSettings] = None,
        sink: Optional[BinaryIO] = None,
    ):
        super().__init__(pre_script, post_script, operation_name, settings)
        self.sink = sink

    def _execute(self, script: Path, operation: object) -> HookOutcome:
        return run_process_hook(script, sink=self.sink, settings=self.settings)


def create_script_hook(
    file: PathLike,
    pre_hook: bool,
    registry: Optional[InterpreterRegistry] = None,
    operation_name: Optional[str] = None,
    settings: Optional[HookSettings] = None,
) -> CommandHook:
    """
    Return the handle running ``file`` as a pre hook or a post hook.

    Files whose extension has a registered interpreter run in-process; every
    other file runs as an external process.
    """
    path = Path(file)
    pre_script = path if pre_hook else None
    post_script = None if pre_hook else path

    if registry is None:
        registry = get_registry()
    if registry.for_file(path) is None:
        hook: CommandHook = ProcessHook(pre_script, post_script, operation_name, settings)
    else:
        hook = ScriptHook(pre_script, post_script, operation_name, settings, registry=registry)
    log.debug("Created %s", hook)
    return hook


def create_hook(
    descriptor: HookDescriptor,
    registry: Optional[InterpreterRegistry] = None,
    settings: Optional[HookSettings] = None,
) -> CommandHook:
    """Return the handle for a discovered hook file."""
    return create_script_hook(
        descriptor.path,
        descriptor.is_pre,
        registry=registry,
        operation_name=descriptor.operation,
        settings=settings,
    )
