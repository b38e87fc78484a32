# Copyright (c) Syntropy Systems
"""Terminal histograms of sample distributions."""
from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from absh.bars import colored, render_column

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from absh.experiment import ExperimentName

K = TypeVar("K")

ROW_PREFIX = ": distr=["


def bucket_index(value: float, lo: float, hi: float, buckets: int) -> int:
    """Bucket of value on [lo, hi]; hi itself falls in the last bucket."""
    if hi <= lo:
        return buckets // 2
    index = int((value - lo) / (hi - lo) * buckets)
    return min(max(index, 0), buckets - 1)


def histogram(
    sequences: Mapping[K, Sequence[float]], buckets: int
) -> tuple[dict[K, list[int]], float, float]:
    """Count every sequence into the same equal-width buckets.

    Returns the counts per key and the shared (min, max) range.
    """
    if buckets <= 0:
        msg = f"bucket count must be positive, got {buckets}"
        raise ValueError(msg)

    all_values = [v for values in sequences.values() for v in values]
    lo = min(all_values, default=0.0)
    hi = max(all_values, default=0.0)

    counts: dict[K, list[int]] = {}
    for key, values in sequences.items():
        row = [0] * buckets
        for value in values:
            row[bucket_index(value, lo, hi, buckets)] += 1
        counts[key] = row
    return counts, lo, hi


def render_distribution(
    sequences: Mapping[ExperimentName, Sequence[float]],
    width: int,
    fmt: Callable[[float], str] = str,
    colors: Mapping[ExperimentName, str] | None = None,
) -> list[str]:
    """Render one histogram row per experiment plus a range axis.

    Bucket heights are scaled by the largest count of any experiment, so rows
    are comparable with each other.
    """
    counts, lo, hi = histogram(sequences, width)
    peak = max((c for row in counts.values() for c in row), default=0)

    lines = []
    for name, row in counts.items():
        color = colors[name] if colors and name in colors else name.color
        cells = "".join(render_column(c / peak if peak else 0.0) for c in row)
        lines.append(f"{name.colored()}{ROW_PREFIX}{colored(cells, color)}]")

    lines.append(_axis(fmt(lo), fmt(hi), width))
    return lines


def _axis(lo_label: str, hi_label: str, width: int) -> str:
    indent = " " * (1 + len(ROW_PREFIX))
    gap = width - len(lo_label) - len(hi_label)
    if gap < 1:
        return f"{indent}{lo_label} {hi_label}"
    return f"{indent}{lo_label}{' ' * gap}{hi_label}"
