# Copyright (c) Syntropy Systems
"""Stable identifiers for tracked metrics."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

FIRST_USER_INDEX = 2


class MeasureKind(Enum):
    """The closed set of metric kinds."""

    WALL_TIME = "wall_time"
    MAX_RSS = "max_rss"
    USER = "user"


@dataclass(frozen=True)
class MeasureKey:
    """Identifies one metric; maps to a dense integer index.

    ``WALL_TIME`` is 0, ``MAX_RSS`` is 1 and user metric ``i`` is ``2 + i``.
    """

    kind: MeasureKind
    user_index: int = 0

    WALL_TIME: ClassVar[MeasureKey]
    MAX_RSS: ClassVar[MeasureKey]

    def __post_init__(self) -> None:
        if self.user_index < 0:
            msg = f"user metric index must be non-negative, got {self.user_index}"
            raise ValueError(msg)
        if self.kind is not MeasureKind.USER and self.user_index != 0:
            msg = f"{self.kind.value} does not take a user index"
            raise ValueError(msg)

    @classmethod
    def user(cls, index: int) -> MeasureKey:
        return cls(MeasureKind.USER, index)

    @property
    def index(self) -> int:
        if self.kind is MeasureKind.WALL_TIME:
            return 0
        if self.kind is MeasureKind.MAX_RSS:
            return 1
        return FIRST_USER_INDEX + self.user_index

    @classmethod
    def from_index(cls, index: int) -> MeasureKey:
        if index < 0:
            msg = f"metric index must be non-negative, got {index}"
            raise ValueError(msg)
        if index == 0:
            return cls.WALL_TIME
        if index == 1:
            return cls.MAX_RSS
        return cls.user(index - FIRST_USER_INDEX)

    def __str__(self) -> str:
        if self.kind is MeasureKind.USER:
            return f"user({self.user_index})"
        return self.kind.value


MeasureKey.WALL_TIME = MeasureKey(MeasureKind.WALL_TIME)
MeasureKey.MAX_RSS = MeasureKey(MeasureKind.MAX_RSS)
