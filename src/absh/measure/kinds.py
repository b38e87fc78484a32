# Copyright (c) Syntropy Systems
"""Metric kinds and their display rules."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from absh.measure.key import MeasureKey, MeasureKind
from absh.numbers import Duration, MemUsage, Scalar

if TYPE_CHECKING:
    from collections.abc import Sequence

    from absh.models.measure import UserMeasureSpec
    from absh.numbers import Number


@dataclass(frozen=True)
class Measure:
    """A metric shown in the report.

    The kind is carried by ``key``; everything kind-specific (units, verdict
    wording) is decided by matching on it.
    """

    key: MeasureKey
    id: str
    name: str
    is_size: bool = False

    @classmethod
    def wall_time(cls) -> Measure:
        return cls(MeasureKey.WALL_TIME, "time", "Time (in seconds)")

    @classmethod
    def max_rss(cls) -> Measure:
        return cls(MeasureKey.MAX_RSS, "max_rss", "Max RSS (in MiB)", is_size=True)

    @classmethod
    def user(cls, index: int, spec: UserMeasureSpec) -> Measure:
        unit = "in MiB" if spec.is_size else "raw value"
        return cls(
            MeasureKey.user(index),
            spec.id,
            f"{spec.name} ({unit})",
            is_size=spec.is_size,
        )

    @property
    def number_type(self) -> type[Number]:
        kind = self.key.kind
        if kind is MeasureKind.WALL_TIME:
            return Duration
        if kind is MeasureKind.MAX_RSS:
            return MemUsage
        if kind is MeasureKind.USER:
            return MemUsage if self.is_size else Scalar
        msg = f"unknown measure kind: {kind}"
        raise AssertionError(msg)

    def direction_words(self) -> tuple[str, str]:
        """Words for a significantly lower and higher mean."""
        if self.key.kind is MeasureKind.WALL_TIME:
            return "faster", "slower"
        return "lower", "higher"

    def format(self, value: float) -> str:
        """Format a float-converted value in this metric's unit."""
        return str(self.number_type.from_float(value))


def active_measures(
    mem: bool, user_specs: Sequence[UserMeasureSpec] = ()
) -> list[Measure]:
    """Metrics in report order: wall time, memory when enabled, user metrics."""
    measures = [Measure.wall_time()]
    if mem:
        measures.append(Measure.max_rss())
    measures.extend(Measure.user(i, spec) for i, spec in enumerate(user_specs))
    return measures
