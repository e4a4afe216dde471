"""Protocol shared by all error results.

Operations that can fail in expected ways return `Result | Error` unions
instead of raising. Every error type exposes a stable `error_type` slug and a
human-readable `message`, which is all the CLI needs to report it.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class NonIdealState(Protocol):
    """Structural type implemented by every error result dataclass."""

    @property
    def error_type(self) -> str: ...

    @property
    def message(self) -> str: ...
