"""Production implementation of the git executor using subprocess."""

from __future__ import annotations

import logging
import os
import queue
import re
import shlex
import subprocess
import tempfile
import threading
from collections.abc import Iterator
from pathlib import Path

from treeswitch.auth import match_expected_error
from treeswitch.gateway.git_executor.abc import GitExecutor
from treeswitch.gateway.git_executor.types import (
    GitInvocation,
    GitOutputEvent,
    GitResult,
    GitStreamEvent,
    LfsProgressEvent,
    ProcessExitedEvent,
    StatusLineEvent,
)
from treeswitch.gateway.time.abc import Time
from treeswitch.gateway.time.real import RealTime

# Upper bound on buffered output lines. Reader threads block when the
# consumer falls behind.
STREAM_QUEUE_SIZE = 256
LFS_POLL_INTERVAL = 0.1
STDOUT_JOIN_TIMEOUT = 5.0
STDERR_READ_SIZE = 4096

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(rb"[\r\n]")

# Marks the end of one producer thread's output in the stream queue
_PRODUCER_DONE = object()


def build_git_env(extra: dict[str, str]) -> dict[str, str]:
    """Copy the current environment and layer invocation variables on top."""
    env = os.environ.copy()
    env.update(extra)
    return env


class RealGitExecutor(GitExecutor):
    """Runs git commands via subprocess."""

    def __init__(
        self,
        *,
        git_executable: str = "git",
        timeout_seconds: float = 600,
        time: Time | None = None,
    ) -> None:
        """Initialize RealGitExecutor.

        Args:
            git_executable: Name or path of the git binary
            timeout_seconds: Kill git if it runs longer than this
            time: Time provider for LFS progress polling. Defaults to RealTime().
        """
        self._git_executable = git_executable
        self._timeout_seconds = timeout_seconds
        self._time = time if time is not None else RealTime()

    def run(self, invocation: GitInvocation) -> GitResult:
        cmd = [self._git_executable, *invocation.args]
        logger.debug(
            "%s: running %s in %s", invocation.operation, shlex.join(cmd), invocation.cwd
        )
        try:
            result = subprocess.run(
                cmd,
                cwd=invocation.cwd,
                env=build_git_env(invocation.env),
                capture_output=True,
                text=True,
                check=False,
                timeout=self._timeout_seconds,
            )
        except subprocess.TimeoutExpired:
            return GitResult(
                exit_code=-1,
                stdout="",
                stderr=f"git {invocation.operation} timed out after {self._timeout_seconds}s",
            )
        except OSError as e:
            return GitResult(exit_code=-1, stdout="", stderr=f"Failed to start git: {e}")

        logger.debug("%s: exited with %d", invocation.operation, result.returncode)
        return _make_result(invocation, result.returncode, result.stdout, result.stderr)

    def stream(self, invocation: GitInvocation) -> Iterator[GitStreamEvent]:
        env = build_git_env(invocation.env)
        if not invocation.track_lfs_progress:
            yield from self._stream_process(invocation, env, lfs_progress_path=None)
            return

        with tempfile.TemporaryDirectory(prefix="treeswitch-lfs-") as tmp_dir:
            progress_path = Path(tmp_dir) / "lfs-progress"
            progress_path.touch()
            env["GIT_LFS_PROGRESS"] = str(progress_path)
            yield from self._stream_process(invocation, env, lfs_progress_path=progress_path)

    def _stream_process(
        self,
        invocation: GitInvocation,
        env: dict[str, str],
        *,
        lfs_progress_path: Path | None,
    ) -> Iterator[GitStreamEvent]:
        cmd = [self._git_executable, *invocation.args]
        logger.debug(
            "%s: streaming %s in %s", invocation.operation, shlex.join(cmd), invocation.cwd
        )

        try:
            process = subprocess.Popen(
                cmd,
                cwd=invocation.cwd,
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            yield ProcessExitedEvent(
                result=GitResult(exit_code=-1, stdout="", stderr=f"Failed to start git: {e}")
            )
            return

        events: queue.Queue[GitOutputEvent | object] = queue.Queue(maxsize=STREAM_QUEUE_SIZE)
        stdout_output: list[str] = []
        splitter = _LineSplitter()
        stderr_output: list[bytes] = []
        stderr_closed = threading.Event()
        timed_out = threading.Event()

        def capture_stdout() -> None:
            if process.stdout:
                stdout_output.append(_decode(process.stdout.read()))

        def read_stderr() -> None:
            stream = process.stderr
            if stream is not None:
                # read1 returns whatever is available, so a progress update
                # ending in a bare carriage return is not held back
                for chunk in iter(lambda: stream.read1(STDERR_READ_SIZE), b""):
                    stderr_output.append(chunk)
                    for text in splitter.feed(chunk):
                        events.put(StatusLineEvent(text=text))
                for text in splitter.flush():
                    events.put(StatusLineEvent(text=text))
            stderr_closed.set()
            events.put(_PRODUCER_DONE)

        def tail_lfs_progress(path: Path) -> None:
            with path.open(encoding="utf-8") as progress_file:
                pending = ""
                while True:
                    chunk = progress_file.readline()
                    if chunk:
                        pending += chunk
                        if pending.endswith("\n"):
                            events.put(LfsProgressEvent(text=pending.rstrip("\n")))
                            pending = ""
                        continue
                    if stderr_closed.is_set():
                        break
                    self._time.sleep(LFS_POLL_INTERVAL)
                if pending:
                    events.put(LfsProgressEvent(text=pending))
            events.put(_PRODUCER_DONE)

        def kill_on_timeout() -> None:
            timed_out.set()
            process.kill()

        watchdog = threading.Timer(self._timeout_seconds, kill_on_timeout)
        watchdog.daemon = True
        watchdog.start()

        threads = [
            threading.Thread(target=capture_stdout, daemon=True),
            threading.Thread(target=read_stderr, daemon=True),
        ]
        if lfs_progress_path is not None:
            threads.append(
                threading.Thread(target=tail_lfs_progress, args=(lfs_progress_path,), daemon=True)
            )
        for thread in threads:
            thread.start()

        open_producers = len(threads) - 1
        try:
            while open_producers > 0:
                item = events.get()
                if item is _PRODUCER_DONE:
                    open_producers -= 1
                    continue
                yield item  # type: ignore[misc]

            returncode = process.wait()
        finally:
            watchdog.cancel()
            if process.poll() is None:
                # Consumer abandoned the stream before git finished
                process.kill()
                process.wait()

        threads[0].join(timeout=STDOUT_JOIN_TIMEOUT)
        logger.debug("%s: exited with %d", invocation.operation, returncode)

        stderr = _decode(b"".join(stderr_output))
        if timed_out.is_set():
            stderr += f"\ngit {invocation.operation} timed out after {self._timeout_seconds}s"
        yield ProcessExitedEvent(
            result=_make_result(invocation, returncode, "".join(stdout_output), stderr)
        )


def _make_result(
    invocation: GitInvocation, returncode: int, stdout: str, stderr: str
) -> GitResult:
    matched_error = None
    if returncode != 0:
        matched_error = match_expected_error(stderr, invocation.expected_errors)
    return GitResult(
        exit_code=returncode,
        stdout=stdout,
        stderr=stderr,
        matched_error=matched_error,
    )


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class _LineSplitter:
    """Splits a byte stream into lines ending at either CR or LF.

    git redraws progress in place with a bare carriage return; each redraw
    becomes its own line. Empty lines are dropped.
    """

    def __init__(self) -> None:
        self._pending = b""

    def feed(self, chunk: bytes) -> list[str]:
        parts = _LINE_BREAK.split(self._pending + chunk)
        self._pending = parts.pop()
        return [_decode(part) for part in parts if part]

    def flush(self) -> list[str]:
        rest, self._pending = self._pending, b""
        return [_decode(rest)] if rest else []
