"""Stateful reducer from git checkout output to monotonic progress values."""

from __future__ import annotations

from treeswitch.progress.git_progress import parse_git_progress_line, parse_lfs_progress_line
from treeswitch.progress.types import GitProgress

# Stage titles git prints while writing the working tree. Older git versions
# print "Updating files" for the same phase.
CHECKOUT_STAGE_TITLES = frozenset({"Checking out files", "Updating files"})

# Share of the overall value given to the Git LFS transfer when LFS progress
# is tracked. Tunable; the checkout stage gets the remainder.
LFS_PHASE_WEIGHT = 0.1
CHECKOUT_WEIGHT = 1.0 - LFS_PHASE_WEIGHT

_LFS_TITLES = {
    "download": "Downloading Git LFS file",
    "checkout": "Checking out Git LFS file",
    "upload": "Uploading Git LFS file",
}


class CheckoutProgressParser:
    """Reduces checkout status lines to progress values in [0, 1].

    One parser serves exactly one checkout invocation. It holds the current
    stage, the last emitted value and the LFS phase accumulator; values it
    returns never decrease.
    """

    def __init__(self, *, track_lfs_progress: bool) -> None:
        self._track_lfs_progress = track_lfs_progress
        self._stage: str | None = None
        self._checkout_fraction = 0.0
        self._lfs_fraction = 0.0
        self._last_value = 0.0

    @property
    def stage(self) -> str | None:
        return self._stage

    @property
    def last_value(self) -> float:
        return self._last_value

    def parse(self, line: str) -> GitProgress | None:
        """Reduce a git status line; unrecognized lines return None."""
        progress = parse_git_progress_line(line)
        if progress is None or progress.title not in CHECKOUT_STAGE_TITLES:
            return None

        self._stage = progress.title
        if progress.total:
            self._checkout_fraction = min(progress.value / progress.total, 1.0)
        if progress.done:
            self._checkout_fraction = 1.0

        return GitProgress(title=progress.title, text=progress.text, value=self._emit())

    def parse_lfs(self, line: str) -> GitProgress | None:
        """Reduce a Git LFS progress line; malformed lines return None."""
        if not self._track_lfs_progress:
            return None
        progress = parse_lfs_progress_line(line)
        if progress is None:
            return None

        self._lfs_fraction = max(self._lfs_fraction, progress.fraction)
        title = _LFS_TITLES.get(progress.direction, "Transferring Git LFS file")
        description = (
            f"{title} {progress.file_number} of {progress.file_count}: {progress.name}"
        )
        return GitProgress(title=title, text=description, value=self._emit())

    def _emit(self) -> float:
        value = min(self._overall(), 1.0)
        # Out-of-order or repeated lines must not move progress backwards
        if value < self._last_value:
            value = self._last_value
        self._last_value = value
        return value

    def _overall(self) -> float:
        if not self._track_lfs_progress:
            return self._checkout_fraction
        # LFS files are smudged while git writes the tree, so a finished
        # checkout stage means the LFS phase is finished too.
        if self._checkout_fraction >= 1.0:
            return 1.0
        return CHECKOUT_WEIGHT * self._checkout_fraction + LFS_PHASE_WEIGHT * self._lfs_fraction
