"""Progress event types delivered to checkout callers.

CheckoutContextEvent | CheckoutProgressEvent is a two-case tagged variant.
The context event always has a value of zero and no description; it is sent
before git produces any output so callers can render an indicator
immediately.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class GitProgress:
    """One recognized progress line, reduced to an overall fraction.

    Attributes:
        title: Stage title as printed by git (e.g. "Checking out files")
        text: The raw line, suitable for display as a description
        value: Overall progress in [0, 1], never lower than a previous value
    """

    title: str
    text: str
    value: float


@dataclass(frozen=True)
class CheckoutContextEvent:
    """Initial event announcing a checkout before any progress is known."""

    title: str
    target_branch: str
    kind: Literal["checkout"] = "checkout"
    phase: Literal["context"] = "context"

    @property
    def value(self) -> float:
        return 0.0

    @property
    def description(self) -> None:
        return None


@dataclass(frozen=True)
class CheckoutProgressEvent:
    """Progress parsed from a git status line."""

    title: str
    description: str
    value: float
    target_branch: str
    kind: Literal["checkout"] = "checkout"
    phase: Literal["progress"] = "progress"


ProgressEvent = CheckoutContextEvent | CheckoutProgressEvent
