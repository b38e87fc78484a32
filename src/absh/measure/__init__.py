# Copyright (c) Syntropy Systems
"""Metric keys, kinds and per-experiment sample storage."""

from absh.measure.key import MeasureKey, MeasureKind
from absh.measure.kinds import Measure, active_measures
from absh.measure.map import MeasureMap

__all__ = ["Measure", "MeasureKey", "MeasureKind", "MeasureMap", "active_measures"]
