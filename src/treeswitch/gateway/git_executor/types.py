"""Invocation, stream event and result types for the git executor gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from treeswitch.auth import GitErrorSignature


@dataclass(frozen=True)
class GitInvocation:
    """Everything needed to run one git command.

    Attributes:
        args: Arguments after the git executable
        cwd: Working directory (the repository path)
        operation: Short label identifying the caller, used in diagnostics
        env: Variables layered over the inherited environment
        expected_errors: Signatures to recognize in stderr when git fails
        track_lfs_progress: Ask Git LFS to report transfer progress
    """

    args: tuple[str, ...]
    cwd: Path
    operation: str
    env: dict[str, str] = field(default_factory=dict)
    expected_errors: tuple[GitErrorSignature, ...] = ()
    track_lfs_progress: bool = False

    @property
    def command_line(self) -> str:
        return " ".join(["git", *self.args])


@dataclass(frozen=True)
class GitResult:
    """Terminal state of a git process."""

    exit_code: int
    stdout: str
    stderr: str
    matched_error: GitErrorSignature | None = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class StatusLineEvent:
    """One line git wrote to its status (stderr) stream."""

    text: str


@dataclass(frozen=True)
class LfsProgressEvent:
    """One line Git LFS wrote to its progress file."""

    text: str


@dataclass(frozen=True)
class ProcessExitedEvent:
    """Final event of every stream."""

    result: GitResult


GitOutputEvent = StatusLineEvent | LfsProgressEvent
GitStreamEvent = StatusLineEvent | LfsProgressEvent | ProcessExitedEvent
