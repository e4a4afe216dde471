"""Discriminated union types for submodule updates.

SubmodulesUpdated | SubmoduleError follows the NonIdealState pattern used
by the checkout results.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SubmodulesUpdated:
    """Success result from initializing and updating submodules."""


@dataclass(frozen=True)
class SubmoduleError:
    """Error result from updating submodules. Implements NonIdealState."""

    message: str
    exit_code: int
    stderr: str

    @property
    def error_type(self) -> str:
        return "submodule-update-failed"
