# Copyright (c) Syntropy Systems
"""Pydantic models for absh."""

from absh.models.measure import UserMeasureSpec
from absh.models.raw import RawMeasure, RawSamples

__all__ = ["RawMeasure", "RawSamples", "UserMeasureSpec"]
