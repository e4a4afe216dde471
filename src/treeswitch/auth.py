"""Authentication handling and failure signatures for git network access.

Checkout can reach the network (Git LFS smudge filters, submodule fetches).
The user's own credential helpers answer those requests; treeswitch only
names the account to use and makes sure git fails instead of prompting, so
the failure can be classified.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from treeswitch.types import GitAccount


@dataclass(frozen=True)
class GitErrorSignature:
    """A named pattern recognizing one class of git failure in stderr."""

    name: str
    pattern: re.Pattern[str]
    description: str

    def matches(self, stderr: str) -> bool:
        return self.pattern.search(stderr) is not None


# Order matters: the HTTPS authentication message is a more specific form of
# the generic one, so it is checked first.
AUTHENTICATION_ERRORS: tuple[GitErrorSignature, ...] = (
    GitErrorSignature(
        name="https-authentication-failed",
        pattern=re.compile(r"fatal: Authentication failed for 'https?://"),
        description="The remote rejected the supplied HTTPS credentials",
    ),
    GitErrorSignature(
        name="ssh-authentication-failed",
        pattern=re.compile(r"fatal: Authentication failed"),
        description="The remote rejected the supplied credentials",
    ),
    GitErrorSignature(
        name="ssh-permission-denied",
        pattern=re.compile(r"Permission denied \((?:publickey|password|keyboard-interactive)"),
        description="No SSH key was accepted by the remote",
    ),
    GitErrorSignature(
        name="terminal-prompt-required",
        pattern=re.compile(
            r"could not read (?:Username|Password) for '.+': terminal prompts disabled"
        ),
        description="Git needed to prompt for credentials interactively",
    ),
    GitErrorSignature(
        name="https-repository-not-found",
        pattern=re.compile(r"fatal: repository '.+' not found"),
        description="The remote repository was not found or access was denied",
    ),
    GitErrorSignature(
        name="ssh-repository-not-found",
        pattern=re.compile(r"ERROR: Repository not found"),
        description="The remote repository was not found or access was denied",
    ),
)


def match_expected_error(
    stderr: str, expected: tuple[GitErrorSignature, ...]
) -> GitErrorSignature | None:
    """Return the first expected signature matching stderr, if any."""
    for signature in expected:
        if signature.matches(stderr):
            return signature
    return None


def git_network_arguments(account: GitAccount | None) -> list[str]:
    """Arguments placed before the git subcommand for network operations.

    With an account, credential helpers are asked for that login on URLs
    under the account's endpoint. git matches `credential.<url>.*` settings
    by protocol and host, so other remotes are unaffected.
    """
    if account is None:
        return []
    endpoint = account.endpoint.rstrip("/")
    return ["-c", f"credential.{endpoint}.username={account.login}"]


def noninteractive_env() -> dict[str, str]:
    """Environment that makes git fail instead of prompting for credentials."""
    return {"GIT_TERMINAL_PROMPT": "0"}
