# Copyright (c) Syntropy Systems
"""Sample statistics and pairwise significance verdicts.

Everything here takes plain float sequences and returns plain floats. Sums
and spreads go through numpy. Confidence intervals use Student's t
distribution; the critical value comes from ``scipy.stats.t.ppf``, which
inverts the regularized incomplete beta function to double precision.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np
from scipy import stats as scipy_stats

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_CONFIDENCE = 0.95


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean. Raises ValueError for an empty sequence."""
    if not values:
        msg = "mean requires at least one sample"
        raise ValueError(msg)
    return float(np.mean(values))


def variance(values: Sequence[float]) -> float:
    """Sample variance with the n-1 denominator; 0 for a single sample."""
    n = len(values)
    if n < 2:
        return 0.0
    return float(np.var(values, ddof=1))


def std_dev(values: Sequence[float]) -> float:
    return math.sqrt(variance(values))


def standard_error(values: Sequence[float]) -> float:
    return math.sqrt(variance(values) / len(values))


def t_critical(df: int, confidence: float = DEFAULT_CONFIDENCE) -> float:
    """Two-tailed critical value of Student's t distribution.

    Returns ``inf`` when there are no degrees of freedom.
    """
    if df <= 0:
        return math.inf
    return float(scipy_stats.t.ppf(1 - (1 - confidence) / 2, df))


def margin(values: Sequence[float], confidence: float = DEFAULT_CONFIDENCE) -> float:
    """Half-width of the confidence interval around the mean."""
    n = len(values)
    if n < 2:
        return math.inf
    return t_critical(n - 1, confidence) * standard_error(values)


def confidence_interval(
    values: Sequence[float], confidence: float = DEFAULT_CONFIDENCE
) -> tuple[float, float]:
    m = mean(values)
    half = margin(values, confidence)
    return m - half, m + half


@dataclass(frozen=True)
class StatSummary:
    """Derived statistics of one sample sequence."""

    count: int
    mean: float
    std_dev: float
    standard_error: float
    margin: float
    min: float
    max: float

    @property
    def low(self) -> float:
        return self.mean - self.margin

    @property
    def high(self) -> float:
        return self.mean + self.margin

    @property
    def has_interval(self) -> bool:
        return math.isfinite(self.margin)


def summarize(
    values: Sequence[float], confidence: float = DEFAULT_CONFIDENCE
) -> StatSummary:
    return StatSummary(
        count=len(values),
        mean=mean(values),
        std_dev=std_dev(values),
        standard_error=standard_error(values),
        margin=margin(values, confidence),
        min=min(values),
        max=max(values),
    )


class Direction(Enum):
    """Which way a significant difference goes, relative to the baseline."""

    FASTER = "faster"
    SLOWER = "slower"


@dataclass(frozen=True)
class Verdict:
    """``direction`` is None when the comparison is inconclusive."""

    direction: Direction | None = None

    @property
    def significant(self) -> bool:
        return self.direction is not None

    def __str__(self) -> str:
        if self.direction is None:
            return "Inconclusive"
        return f"Significant({self.direction.value})"


INCONCLUSIVE = Verdict()


@dataclass(frozen=True)
class Comparison:
    verdict: Verdict
    relative_change: float | None


def relative_change(baseline_mean: float, other_mean: float) -> float | None:
    """Percent change of other versus baseline; None for a zero baseline."""
    if baseline_mean == 0:
        return None
    return (other_mean - baseline_mean) / baseline_mean * 100


def compare_summaries(baseline: StatSummary, other: StatSummary) -> Comparison:
    change = relative_change(baseline.mean, other.mean)
    if not (baseline.has_interval and other.has_interval):
        return Comparison(INCONCLUSIVE, change)
    # Touching intervals count as overlapping.
    if other.low > baseline.high:
        return Comparison(Verdict(Direction.SLOWER), change)
    if other.high < baseline.low:
        return Comparison(Verdict(Direction.FASTER), change)
    return Comparison(INCONCLUSIVE, change)


def compare(
    baseline: Sequence[float],
    other: Sequence[float],
    confidence: float = DEFAULT_CONFIDENCE,
) -> Comparison:
    """Compare two sample sequences by confidence interval disjointness.

    The sequences may have different lengths; samples are not paired.
    """
    return compare_summaries(
        summarize(baseline, confidence), summarize(other, confidence)
    )
