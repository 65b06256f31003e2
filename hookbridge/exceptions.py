"""Exceptions crossing the hook subsystem boundary."""

from __future__ import annotations

from typing import Optional

NON_ZERO_EXIT_MESSAGE = "Hook script exited with non-zero error code"


class HookError(Exception):
    """Base exception for hook subsystem errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AbortRequested(HookError):
    """Raised when hook code asks for the triggering operation not to proceed."""

    def __init__(self, message: str, hook: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, details)
        self.hook = hook


class HookExecutionFailure(AbortRequested):
    """Raised when a process hook exits with a non-zero status."""

    def __init__(self, exit_code: int, hook: Optional[str] = None):
        super().__init__(NON_ZERO_EXIT_MESSAGE, hook, {"exit_code": exit_code})
        self.exit_code = exit_code


__all__ = [
    "NON_ZERO_EXIT_MESSAGE",
    "HookError",
    "AbortRequested",
    "HookExecutionFailure",
]
