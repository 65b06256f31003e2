"""Run a hook as an external executable."""

from __future__ import annotations

import os
import signal
import subprocess
from pathlib import Path
from typing import BinaryIO, List, Optional

from hookbridge.config import HookSettings
from hookbridge.exceptions import HookExecutionFailure
from hookbridge.log_manager import log
from hookbridge.outcome import HookOutcome
from hookbridge.relay import OutputRelay, default_sink
from hookbridge.utils import PathLike, is_windows


def build_command(script_path: PathLike) -> Optional[List[str]]:
    """
    Return the argument vector used to start ``script_path``.

    On Windows the script goes through ``cmd.exe``. Everywhere else the file is
    executed directly and must carry the executable bit; None is returned when it
    does not, which is how a hook is switched off.
    """
    path = str(script_path)
    if is_windows():
        return ["cmd.exe", "/C", path]
    if not os.access(path, os.X_OK):
        return None
    return [path]


def _kill(process: subprocess.Popen) -> None:
    """Terminate the hook and anything it started in its session."""
    try:
        if is_windows():
            process.kill()
        else:
            os.killpg(process.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError) as exc:
        log.debug("Hook process %d already gone: %s", process.pid, exc)


def run_process_hook(
    script_path: PathLike,
    sink: Optional[BinaryIO] = None,
    settings: Optional[HookSettings] = None,
) -> HookOutcome:
    """
    Execute ``script_path`` as a subprocess and classify its exit status.

    Args:
        script_path: Hook executable
        sink: Binary stream receiving the hook's combined output, the host's
            standard output when omitted
        settings: Repository hook settings

    Returns:
        HookOutcome: allowed on exit status 0, aborted with a
        :class:`HookExecutionFailure` on any other status, ignored when the hook
        cannot be started or the wait is interrupted
    """
    settings = settings or HookSettings()
    script = Path(script_path)
    log.info("Running shell script %s", script.absolute())

    command = build_command(script.absolute())
    if command is None:
        log.debug("-- %s is not executable, skipping", script)
        return HookOutcome.ignored(f"{script.name} is not executable")

    if sink is None and settings.echo_output:
        sink = default_sink()
    elif not settings.echo_output:
        sink = None

    try:
        log.debug("-- starting process %s", script)
        process = subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            start_new_session=not is_windows(),
        )
    except OSError as exc:
        log.warning("Cannot run hook %s: %s", script, exc)
        return HookOutcome.ignored(f"cannot start {script.name}: {exc}")
    log.debug("-- process %s started", script)

    relay = OutputRelay(process.stdout, sink, name=f"hook-output-{script.name}")
    relay.start()
    try:
        try:
            log.debug("-- waiting for process %s to finish", script)
            exit_code = process.wait()
            log.debug("process %s exit code: %d", script, exit_code)
        except KeyboardInterrupt:
            log.warning("Interrupted while waiting for hook %s, ignoring it", script)
            _kill(process)
            process.wait()
            return HookOutcome.ignored(f"interrupted while waiting for {script.name}")
    finally:
        if not relay.stop(settings.relay_join_timeout):
            log.warning(
                "Output of %s still open after %.1fs, killing its process group",
                script,
                settings.relay_join_timeout,
            )
            _kill(process)
            relay.join(settings.relay_join_timeout)
        if relay.is_alive():
            log.error("Output relay for %s did not finish, abandoning it with its pipe left open", script)
        else:
            process.stdout.close()

    if exit_code != 0:
        return HookOutcome.aborted(HookExecutionFailure(exit_code, hook=script.name))
    return HookOutcome.allowed()
