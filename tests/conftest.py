# Copyright (c) Syntropy Systems
"""Pytest fixtures for absh tests."""

import io
import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from rich.console import Console

from absh.run_log import RunLog

# Store original cwd at module load time
_original_cwd = Path.cwd()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def absh_project(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a project directory whose config sends run logs into it."""
    absh_dir = temp_dir / ".absh"
    absh_dir.mkdir()
    _ = (absh_dir / "config.yaml").write_text(f"log_dir: {temp_dir / 'logs'}\n")

    os.chdir(temp_dir)

    yield temp_dir

    # Always return to original cwd
    os.chdir(_original_cwd)


@pytest.fixture
def console_output() -> io.StringIO:
    """Buffer standing in for the terminal."""
    return io.StringIO()


@pytest.fixture
def run_log(temp_dir: Path, console_output: io.StringIO) -> Generator[RunLog, None, None]:
    """A run log writing under the temp dir, console captured."""
    console = Console(file=console_output, highlight=False, emoji=False, width=200)
    log = RunLog(temp_dir / "logs", console=console)
    yield log
    log.close()

