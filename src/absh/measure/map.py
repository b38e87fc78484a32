# Copyright (c) Syntropy Systems
"""Per-experiment sample storage."""
from __future__ import annotations

from typing import TYPE_CHECKING

from absh.measure.key import FIRST_USER_INDEX, MeasureKey

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from absh.numbers import Number


class MeasureMap:
    """Append-only sample sequences, one slot per metric key.

    Slots live in a list indexed by ``MeasureKey.index``; its size is fixed
    at construction from the number of user metrics.
    """

    _slots: list[list[Number]]

    def __init__(self, user_count: int = 0) -> None:
        self._slots = [[] for _ in range(FIRST_USER_INDEX + user_count)]

    def _slot(self, key: MeasureKey) -> list[Number]:
        index = key.index
        if index >= len(self._slots):
            raise KeyError(key)
        return self._slots[index]

    def __getitem__(self, key: MeasureKey) -> list[Number]:
        # Callers get a copy; appends go through append() / push_all().
        return list(self._slot(key))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, MeasureKey) and key.index < len(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def append(self, key: MeasureKey, sample: Number) -> None:
        self._slot(key).append(sample)

    def push_all(self, samples: Mapping[MeasureKey, Number]) -> None:
        """Append one sample to every sequence at once.

        Either every slot grows by one or nothing is recorded.
        """
        missing = [key for key in self.keys() if key not in samples]
        if missing:
            msg = f"incomplete sample set, missing {', '.join(map(str, missing))}"
            raise ValueError(msg)
        unknown = [key for key in samples if key not in self]
        if unknown:
            # Checked before appending so slot lengths stay equal.
            raise KeyError(unknown[0])
        for key, sample in samples.items():
            self._slot(key).append(sample)

    def clear(self) -> None:
        for slot in self._slots:
            slot.clear()

    def count(self, key: MeasureKey) -> int:
        return len(self._slot(key))

    def keys(self) -> Iterator[MeasureKey]:
        for index in range(len(self._slots)):
            yield MeasureKey.from_index(index)

    def values(self) -> Iterator[list[Number]]:
        for slot in self._slots:
            yield list(slot)

    def items(self) -> Iterator[tuple[MeasureKey, list[Number]]]:
        for index, slot in enumerate(self._slots):
            yield MeasureKey.from_index(index), list(slot)
