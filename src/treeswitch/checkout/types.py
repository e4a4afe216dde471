"""Discriminated union types for checkout operations.

CheckoutBranchResult | CheckoutError and CheckoutPathsResult | GitCommandError
follow the NonIdealState pattern: errors are values carrying an error_type
slug and a message, returned rather than raised.
"""

from dataclasses import dataclass

from treeswitch.gateway.submodules.types import SubmoduleError
from treeswitch.progress.types import CheckoutContextEvent, CheckoutProgressEvent


@dataclass(frozen=True)
class CheckoutBranchResult:
    """Success result from checking out a branch."""

    branch_name: str


@dataclass(frozen=True)
class CheckoutPathsResult:
    """Success result from restoring paths at HEAD."""

    paths: tuple[str, ...]


@dataclass(frozen=True)
class AuthenticationError:
    """Error: git failed because credentials were missing or rejected.

    The caller may ask for credentials and retry. Implements NonIdealState.
    """

    message: str
    reason: str
    exit_code: int
    stderr: str

    @property
    def error_type(self) -> str:
        return "authentication-failed"


@dataclass(frozen=True)
class GitCommandError:
    """Error: git failed for any reason not otherwise classified. Implements NonIdealState."""

    message: str
    exit_code: int
    stderr: str

    @property
    def error_type(self) -> str:
        return "git-command-failed"


CheckoutError = AuthenticationError | GitCommandError | SubmoduleError


@dataclass(frozen=True)
class CheckoutFinished:
    """Terminal event of a checkout stream, carrying the overall result."""

    result: CheckoutBranchResult | CheckoutError


CheckoutEvent = CheckoutContextEvent | CheckoutProgressEvent | CheckoutFinished
