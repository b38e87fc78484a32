# Copyright (c) Syntropy Systems
"""User-defined metric specification (--also-measure)."""

from __future__ import annotations

from typing import ClassVar

from pydantic import ConfigDict
from typing_extensions import Self

from absh.errors import MeasureSpecError
from absh.models.base import AbshBaseModel

SPEC_FIELD_COUNT = 4


class UserMeasureSpec(AbshBaseModel):
    """A metric measured by running a command after each successful run.

    Written as ``id:is_size:description:command``, where ``is_size`` is
    ``1`` for byte counts and ``0`` for plain numbers. The command's trimmed
    stdout must parse as a number.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    id: str
    is_size: bool
    name: str
    cmd: str

    @classmethod
    def parse(cls, spec: str) -> Self:
        """Parse a spec string, raising MeasureSpecError when malformed."""
        parts = spec.split(":", SPEC_FIELD_COUNT - 1)
        if len(parts) != SPEC_FIELD_COUNT:
            raise MeasureSpecError(spec)
        measure_id, is_size, name, cmd = parts
        if is_size not in ("0", "1"):
            raise MeasureSpecError(spec)
        return cls(id=measure_id, is_size=is_size == "1", name=name, cmd=cmd)

    def __str__(self) -> str:
        return f"{self.id}:{int(self.is_size)}:{self.name}:{self.cmd}"
