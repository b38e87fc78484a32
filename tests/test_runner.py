# Copyright (c) Syntropy Systems
"""Tests for the shell script runner."""

import os
import signal
import threading

import pytest

from absh.runner import ScriptRunner, run_capture


class TestScriptRunner:
    """Tests for ScriptRunner."""

    def test_success(self) -> None:
        """Test a passing script reports time and memory."""
        result = ScriptRunner("true").run()
        assert result.success
        assert result.exit_code == 0
        assert result.elapsed.nanos > 0
        assert result.max_rss.bytes > 0

    def test_exit_code(self) -> None:
        """Test a failing script reports its status."""
        result = ScriptRunner("exit 3").run()
        assert not result.success
        assert result.exit_code == 3
        assert result.describe() == "exit status 3"

    def test_errexit(self) -> None:
        """Test scripts run with -e and stop at the first failure."""
        result = ScriptRunner("false\nexit 0").run()
        assert result.exit_code == 1

    def test_max_time_terminates(self) -> None:
        """Test a script running past max_time is killed."""
        result = ScriptRunner("sleep 10", max_time=0.2, grace_period=0.5).run()
        assert result.timed_out
        assert not result.success
        assert result.elapsed.seconds() < 5
        assert result.describe() == "timed out"

    def test_within_max_time(self) -> None:
        """Test a quick script is unaffected by max_time."""
        result = ScriptRunner("true", max_time=10).run()
        assert result.success
        assert not result.timed_out

    def test_interrupt_terminates_process_group(self) -> None:
        """Test Ctrl+C during wait() takes the script down with it."""
        runner = ScriptRunner("exec sleep 10", grace_period=0.5)
        runner.start()
        pgid = runner.pgid
        assert pgid is not None

        main_thread = threading.main_thread().ident
        assert main_thread is not None
        timer = threading.Timer(0.3, signal.pthread_kill, (main_thread, signal.SIGINT))
        timer.start()
        try:
            with pytest.raises(KeyboardInterrupt):
                _ = runner.wait()
        finally:
            timer.cancel()

        with pytest.raises(ProcessLookupError):
            os.killpg(pgid, 0)

    def test_wait_before_start(self) -> None:
        """Test wait() requires start()."""
        with pytest.raises(RuntimeError):
            _ = ScriptRunner("true").wait()

    def test_pid_after_start(self) -> None:
        """Test the pid is known once started."""
        runner = ScriptRunner("true")
        assert runner.pid is None
        runner.start()
        assert runner.pid is not None
        _ = runner.wait()


class TestRunCapture:
    """Tests for run_capture."""

    def test_stdout(self) -> None:
        """Test stdout is captured as text."""
        output = run_capture("echo 42")
        assert output.exit_code == 0
        assert output.stdout.strip() == "42"

    def test_failure(self) -> None:
        """Test the exit code is returned, not raised."""
        assert run_capture("exit 2").exit_code == 2
