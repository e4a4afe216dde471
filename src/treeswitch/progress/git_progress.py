"""Parsers for the raw progress lines git and Git LFS print.

Git prints progress as "<title>: <pct>% (<value>/<total>)" and appends
", done." when a stage finishes, e.g.::

    Checking out files:  42% (21/50)
    Checking out files: 100% (50/50), done.

Git LFS writes one line per update to the file named by GIT_LFS_PROGRESS::

    download 1/3 1024/4096 assets/model.bin
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_PERCENT_PATTERN = re.compile(r"^(\d{1,3})% \((\d+)/(\d+)\)$")
_LFS_PATTERN = re.compile(r"^(\w+) (\d+)/(\d+) (\d+)/(\d+) (.+)$")


@dataclass(frozen=True)
class GitProgressLine:
    """A line git printed that has the shape of a progress report."""

    title: str
    value: int
    total: int | None
    percent: int | None
    done: bool
    text: str


@dataclass(frozen=True)
class LfsProgressLine:
    """A line from the Git LFS progress file."""

    direction: str
    file_number: int
    file_count: int
    bytes_so_far: int
    bytes_total: int
    name: str
    text: str

    @property
    def fraction(self) -> float:
        """Fraction of the whole LFS transfer completed.

        Files before the current one count as finished; the current file
        contributes its byte ratio.
        """
        if self.file_count <= 0:
            return 0.0
        if self.bytes_total > 0:
            current = min(self.bytes_so_far / self.bytes_total, 1.0)
        else:
            current = 1.0
        completed = max(self.file_number - 1, 0) + current
        return min(completed / self.file_count, 1.0)


def parse_git_progress_line(line: str) -> GitProgressLine | None:
    """Parse a git progress line, returning None for anything else."""
    text = line.strip()
    separator = text.rfind(": ")
    if separator <= 0:
        return None

    title = text[:separator]
    progress_text = text[separator + 2 :].strip()
    if not progress_text:
        return None

    parts = progress_text.split(", ")
    head = parts[0]
    if re.match(r"^\d+%", head):
        match = _PERCENT_PATTERN.match(head)
        if match is None:
            return None
        percent: int | None = int(match.group(1))
        value = int(match.group(2))
        total: int | None = int(match.group(3))
    elif head.isdigit():
        percent = None
        value = int(head)
        total = None
    else:
        return None

    return GitProgressLine(
        title=title,
        value=value,
        total=total,
        percent=percent,
        done="done." in parts[1:],
        text=text,
    )


def parse_lfs_progress_line(line: str) -> LfsProgressLine | None:
    """Parse a Git LFS progress file line, returning None if malformed."""
    text = line.strip()
    match = _LFS_PATTERN.match(text)
    if match is None:
        return None
    return LfsProgressLine(
        direction=match.group(1),
        file_number=int(match.group(2)),
        file_count=int(match.group(3)),
        bytes_so_far=int(match.group(4)),
        bytes_total=int(match.group(5)),
        name=match.group(6),
        text=text,
    )
