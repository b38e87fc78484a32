# Copyright (c) Syntropy Systems
"""Measured quantities.

Every sample is stored as one of the quantity types below. Statistics are
computed on ``as_float()`` and converted back with ``from_float()`` for
display, so the unit survives the arithmetic.
"""
from __future__ import annotations

from typing import ClassVar, Protocol, TypeVar

NANOS_PER_SECOND = 1_000_000_000
BYTES_PER_MIB = 1 << 20

N = TypeVar("N", bound="Number")


class Number(Protocol):
    """Interface shared by all measured quantities."""

    unit: ClassVar[str]

    def __add__(self: N, other: N) -> N:
        ...

    def div(self: N, count: int) -> N:
        ...

    def as_float(self) -> float:
        ...

    @classmethod
    def from_float(cls: type[N], value: float) -> N:
        ...


class Duration:
    """Wall clock time in integer nanoseconds."""

    __slots__ = ("nanos",)

    unit: ClassVar[str] = "s"

    def __init__(self, nanos: int = 0) -> None:
        self.nanos = int(nanos)

    @classmethod
    def from_seconds(cls, seconds: float) -> Duration:
        return cls(round(seconds * NANOS_PER_SECOND))

    @classmethod
    def from_float(cls, value: float) -> Duration:
        return cls(round(value))

    def as_float(self) -> float:
        return float(self.nanos)

    def seconds(self) -> float:
        return self.nanos / NANOS_PER_SECOND

    def div(self, count: int) -> Duration:
        return Duration(self.nanos // count)

    def __add__(self, other: Duration) -> Duration:
        return Duration(self.nanos + other.nanos)

    def __radd__(self, other: int) -> Duration:
        # Lets sum() start from 0.
        if other == 0:
            return self
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Duration) and other.nanos == self.nanos

    def __hash__(self) -> int:
        return hash(("Duration", self.nanos))

    def __repr__(self) -> str:
        return f"Duration({self.nanos})"

    def __str__(self) -> str:
        return f"{self.seconds():.3f}s"


class MemUsage:
    """Memory size in integer bytes, displayed in MiB."""

    __slots__ = ("bytes",)

    unit: ClassVar[str] = "MiB"

    def __init__(self, nbytes: int = 0) -> None:
        self.bytes = int(nbytes)

    @classmethod
    def from_float(cls, value: float) -> MemUsage:
        return cls(round(value))

    def as_float(self) -> float:
        return float(self.bytes)

    def mib(self) -> float:
        return self.bytes / BYTES_PER_MIB

    def div(self, count: int) -> MemUsage:
        return MemUsage(self.bytes // count)

    def __add__(self, other: MemUsage) -> MemUsage:
        return MemUsage(self.bytes + other.bytes)

    def __radd__(self, other: int) -> MemUsage:
        if other == 0:
            return self
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MemUsage) and other.bytes == self.bytes

    def __hash__(self) -> int:
        return hash(("MemUsage", self.bytes))

    def __repr__(self) -> str:
        return f"MemUsage({self.bytes})"

    def __str__(self) -> str:
        return f"{self.mib():.1f}MiB"


class Scalar:
    """Dimensionless user-reported value."""

    __slots__ = ("value",)

    unit: ClassVar[str] = ""

    def __init__(self, value: float = 0.0) -> None:
        self.value = float(value)

    @classmethod
    def from_float(cls, value: float) -> Scalar:
        return cls(value)

    def as_float(self) -> float:
        return self.value

    def div(self, count: int) -> Scalar:
        return Scalar(self.value / count)

    def __add__(self, other: Scalar) -> Scalar:
        return Scalar(self.value + other.value)

    def __radd__(self, other: int) -> Scalar:
        if other == 0:
            return self
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Scalar) and other.value == self.value

    def __hash__(self) -> int:
        return hash(("Scalar", self.value))

    def __repr__(self) -> str:
        return f"Scalar({self.value!r})"

    def __str__(self) -> str:
        return f"{self.value:.3f}"
