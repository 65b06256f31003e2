"""Tagged result reported by every hook runner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hookbridge.exceptions import AbortRequested


class OutcomeStatus(Enum):
    """How a single hook invocation ended."""

    ALLOWED = "allowed"
    ABORTED = "aborted"
    IGNORED = "ignored"


@dataclass(frozen=True)
class HookOutcome:
    """Result of running one hook.

    ``IGNORED`` covers every hook that is absent, disabled or broken: the host
    operation proceeds exactly as for ``ALLOWED``, but the reason is kept so
    callers can tell the two apart when they care.
    """

    status: OutcomeStatus
    message: str = ""
    reason: str = ""
    error: Optional[AbortRequested] = None

    @classmethod
    def allowed(cls) -> "HookOutcome":
        return cls(OutcomeStatus.ALLOWED)

    @classmethod
    def aborted(cls, error: AbortRequested) -> "HookOutcome":
        return cls(OutcomeStatus.ABORTED, message=error.message, error=error)

    @classmethod
    def ignored(cls, reason: str) -> "HookOutcome":
        return cls(OutcomeStatus.IGNORED, reason=reason)

    @property
    def proceeds(self) -> bool:
        """True when the triggering operation may continue."""
        return self.status is not OutcomeStatus.ABORTED

    def raise_for_abort(self) -> None:
        """Raise the carried :class:`AbortRequested` if the hook aborted."""
        if self.status is OutcomeStatus.ABORTED:
            raise self.error or AbortRequested(self.message)
