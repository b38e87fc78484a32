# Copyright (c) Syntropy Systems
"""Configuration management for absh."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import cast

import yaml


def get_global_config_dir() -> Path:
    """Get the global absh directory (~/.absh)."""
    return Path.home() / ".absh"


@dataclass
class AbshConfig:
    """Configuration for absh."""

    # Where run directories and the `last` symlink are written
    log_dir: Path = field(default_factory=get_global_config_dir)

    # Interpreter used for run, warmup and measure scripts
    shell: str = "/bin/sh"

    # Confidence level of the reported intervals
    confidence: float = 0.95

    # Width of the per-experiment mean bars (cells)
    bar_width: int = 40

    # Number of histogram buckets
    histogram_width: int = 50

    # Grace period before SIGKILL after SIGTERM on --max-time (seconds)
    kill_grace_period: float = 5.0


def find_absh_dir(start_path: Path | None = None) -> Path | None:
    """Find the nearest .absh directory by walking up from start_path.

    Returns None if no .absh directory is found.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        absh_dir = current / ".absh"
        if absh_dir.is_dir():
            return absh_dir
        current = current.parent

    # Check root
    absh_dir = current / ".absh"
    if absh_dir.is_dir():
        return absh_dir

    return None


def load_config(absh_dir: Path | None = None) -> AbshConfig:
    """Load configuration from .absh/config.yaml or defaults.

    Looks for config in:
    1. Provided absh_dir
    2. Nearest .absh directory walking up
    3. ~/.absh/config.yaml
    4. Defaults
    """
    config = AbshConfig()

    config_path = None

    if absh_dir is not None:
        config_path = absh_dir / "config.yaml"
    else:
        found_dir = find_absh_dir()
        if found_dir is not None and (found_dir / "config.yaml").exists():
            config_path = found_dir / "config.yaml"
        else:
            global_config = get_global_config_dir() / "config.yaml"
            if global_config.exists():
                config_path = global_config

    if config_path is not None and config_path.exists():
        with config_path.open() as f:
            data = cast("dict[str, object]", yaml.safe_load(f) or {})

        log_dir = data.get("log_dir")
        if isinstance(log_dir, str) and log_dir:
            config.log_dir = Path(log_dir).expanduser()
        shell = data.get("shell")
        if isinstance(shell, str) and shell:
            config.shell = shell
        confidence = data.get("confidence")
        if isinstance(confidence, (int, float)) and 0 < confidence < 1:
            config.confidence = float(confidence)
        bar_width = data.get("bar_width")
        if isinstance(bar_width, int) and bar_width > 0:
            config.bar_width = bar_width
        histogram_width = data.get("histogram_width")
        if isinstance(histogram_width, int) and histogram_width > 0:
            config.histogram_width = histogram_width
        kill_grace_period = data.get("kill_grace_period")
        if isinstance(kill_grace_period, (int, float)):
            config.kill_grace_period = float(kill_grace_period)

    return config
