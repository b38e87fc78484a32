# Copyright (c) Syntropy Systems
"""Raw sample dump written next to each run log."""

from __future__ import annotations

from pydantic import Field

from absh.models.base import AbshBaseModel


class RawMeasure(AbshBaseModel):
    """Every recorded sample of one metric, per experiment."""

    id: str
    name: str
    unit: str
    samples: dict[str, list[float]] = Field(default_factory=dict)


class RawSamples(AbshBaseModel):
    """All metrics of a run, in report order."""

    measures: list[RawMeasure] = Field(default_factory=list)
