# Copyright (c) Syntropy Systems
"""Shell script runner with resource usage and orphan prevention."""
from __future__ import annotations

import contextlib
import ctypes
import logging
import os
import signal
import subprocess
import sys
import time
from dataclasses import dataclass
from threading import Event, Thread

from absh.numbers import Duration, MemUsage

logger = logging.getLogger(__name__)

# ru_maxrss is reported in kilobytes on Linux and in bytes on macOS
MAXRSS_SCALE = 1 if sys.platform == "darwin" else 1024


def setup_pdeathsig() -> None:
    """Set PDEATHSIG so child dies when parent dies.

    This prevents orphan processes when absh is killed mid-run.
    Only works on Linux.
    """
    if sys.platform != "linux":
        return
    try:
        libc = ctypes.CDLL("libc.so.6", use_errno=True)
        pr_set_pdeathsig = 1
        libc.prctl(pr_set_pdeathsig, signal.SIGKILL)
    except (AttributeError, OSError):
        # Can't set PDEATHSIG, continue without it
        return


@dataclass(frozen=True)
class ScriptResult:
    """Outcome of one script execution."""

    exit_code: int
    elapsed: Duration
    max_rss: MemUsage
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.exit_code == 0 and not self.timed_out

    def describe(self) -> str:
        if self.timed_out:
            return "timed out"
        if self.exit_code < 0:
            return f"killed by signal {-self.exit_code}"
        return f"exit status {self.exit_code}"


class ScriptRunner:
    """Runs a shell script and reports wall time and peak memory.

    Features:
    - Uses start_new_session=True for reliable process group
    - Sets PDEATHSIG on Linux to prevent orphans
    - Reaps the child with wait4() to get its rusage
    - Terminates the process group when max_time is exceeded
    - Takes the process group down when wait() is interrupted
    """

    script: str
    shell: str
    max_time: float | None
    grace_period: float
    _process: subprocess.Popen[bytes] | None
    _started_ns: int
    _timed_out: Event
    _done: Event

    def __init__(
        self,
        script: str,
        shell: str = "/bin/sh",
        max_time: float | None = None,
        grace_period: float = 5.0,
    ) -> None:
        """Initialize a script runner.

        Args:
            script: Script text passed to ``shell -ec``
            shell: Shell interpreter
            max_time: Seconds after which the process group is terminated
            grace_period: Seconds to wait after SIGTERM before SIGKILL

        """
        self.script = script
        self.shell = shell
        self.max_time = max_time
        self.grace_period = grace_period
        self._process = None
        self._started_ns = 0
        self._timed_out = Event()
        self._done = Event()

    def start(self) -> None:
        """Start the script process."""
        self._started_ns = time.perf_counter_ns()
        self._process = subprocess.Popen(  # noqa: S603
            [self.shell, "-ec", self.script],
            stdin=subprocess.DEVNULL,
            start_new_session=True,  # Creates new process group
            preexec_fn=setup_pdeathsig if sys.platform == "linux" else None,  # noqa: PLW1509
        )

    def wait(self) -> ScriptResult:
        """Block until the script exits and collect its resource usage."""
        if self._process is None:
            msg = "script was not started"
            raise RuntimeError(msg)

        watchdog = None
        if self.max_time is not None:
            watchdog = Thread(target=self._watchdog, daemon=True)
            watchdog.start()

        try:
            _, status, rusage = os.wait4(self._process.pid, 0)
        except BaseException:
            # The script runs in its own session, so Ctrl+C never reaches it.
            self._kill_group()
            raise
        finally:
            self._done.set()
        elapsed = Duration(time.perf_counter_ns() - self._started_ns)

        exit_code = os.waitstatus_to_exitcode(status)
        # Popen must not try to reap the pid again.
        self._process.returncode = exit_code

        if watchdog is not None:
            watchdog.join(timeout=1.0)

        return ScriptResult(
            exit_code=exit_code,
            elapsed=elapsed,
            max_rss=MemUsage(rusage.ru_maxrss * MAXRSS_SCALE),
            timed_out=self._timed_out.is_set(),
        )

    def run(self) -> ScriptResult:
        self.start()
        return self.wait()

    def _watchdog(self) -> None:
        """Terminate the process group once max_time has passed."""
        assert self.max_time is not None
        if self._done.wait(timeout=self.max_time):
            return

        pgid = self.pgid
        if pgid is None:
            return
        self._timed_out.set()
        logger.debug("max time exceeded, terminating process group %d", pgid)

        # Send SIGTERM to process group
        with contextlib.suppress(OSError, ProcessLookupError):
            os.killpg(pgid, signal.SIGTERM)

        if self._done.wait(timeout=self.grace_period):
            return

        # Still alive - SIGKILL
        with contextlib.suppress(OSError, ProcessLookupError):
            os.killpg(pgid, signal.SIGKILL)

    def _kill_group(self) -> None:
        """Terminate the process group and reap the script."""
        assert self._process is not None
        pid = self._process.pid
        logger.debug("interrupted, terminating process group %d", pid)

        with contextlib.suppress(OSError, ProcessLookupError):
            os.killpg(pid, signal.SIGTERM)

        deadline = time.monotonic() + self.grace_period
        while time.monotonic() < deadline:
            try:
                reaped, status = os.waitpid(pid, os.WNOHANG)
            except ChildProcessError:
                return
            if reaped:
                self._process.returncode = os.waitstatus_to_exitcode(status)
                return
            time.sleep(0.01)

        # Still alive - SIGKILL
        with contextlib.suppress(OSError, ProcessLookupError):
            os.killpg(pid, signal.SIGKILL)
        with contextlib.suppress(ChildProcessError):
            _, status = os.waitpid(pid, 0)
            self._process.returncode = os.waitstatus_to_exitcode(status)

    @property
    def pid(self) -> int | None:
        """Get the process ID."""
        if self._process is None:
            return None
        return self._process.pid

    @property
    def pgid(self) -> int | None:
        """Get the process group ID."""
        if self._process is None:
            return None
        try:
            return os.getpgid(self._process.pid)
        except (OSError, ProcessLookupError):
            return None


@dataclass(frozen=True)
class CapturedOutput:
    exit_code: int
    stdout: str


def run_capture(cmd: str, shell: str = "/bin/sh") -> CapturedOutput:
    """Run a measure command and capture its stdout."""
    result = subprocess.run(  # noqa: S603
        [shell, "-ec", cmd],
        stdin=subprocess.DEVNULL,
        capture_output=True,
        text=True,
        check=False,
    )
    if result.stderr:
        logger.debug("measure command stderr: %s", result.stderr.strip())
    return CapturedOutput(exit_code=result.returncode, stdout=result.stdout)
