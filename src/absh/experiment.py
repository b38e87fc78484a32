# Copyright (c) Syntropy Systems
"""Experiments: the script variants under comparison."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from absh.bars import colored
from absh.measure.key import MeasureKey
from absh.measure.map import MeasureMap

if TYPE_CHECKING:
    from collections.abc import Mapping


class ExperimentName(Enum):
    """One of the five fixed experiment slots."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"

    @property
    def color(self) -> str:
        return _COLORS[self]

    def colored(self) -> str:
        return colored(self.value, self.color)

    def __str__(self) -> str:
        return self.value


_COLORS = {
    ExperimentName.A: "cyan",
    ExperimentName.B: "magenta",
    ExperimentName.C: "yellow",
    ExperimentName.D: "blue",
    ExperimentName.E: "bright_white",
}


@dataclass
class Experiment:
    """A script variant and everything measured for it so far."""

    name: ExperimentName
    run: str
    warmup: str = ""
    measures: MeasureMap = field(default_factory=MeasureMap)

    def runs(self) -> int:
        """Number of successful runs recorded."""
        return self.measures.count(MeasureKey.WALL_TIME)

    def samples(self, key: MeasureKey) -> list[float]:
        """Float-converted samples of one metric, in recording order."""
        return [sample.as_float() for sample in self.measures[key]]


def build_experiments(
    scripts: Mapping[ExperimentName, str | None],
    warmups: Mapping[ExperimentName, str | None] | None = None,
    user_count: int = 0,
) -> dict[ExperimentName, Experiment]:
    """Create the configured experiments in A-E order.

    Variants without a run script are skipped; A is required.
    """
    warmups = warmups or {}
    if not scripts.get(ExperimentName.A):
        msg = "experiment A requires a run script"
        raise ValueError(msg)

    experiments: dict[ExperimentName, Experiment] = {}
    for name in ExperimentName:
        run = scripts.get(name)
        if run is None:
            continue
        experiments[name] = Experiment(
            name=name,
            run=run,
            warmup=warmups.get(name) or "",
            measures=MeasureMap(user_count),
        )
    return experiments
