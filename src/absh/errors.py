# Copyright (c) Syntropy Systems
"""Exceptions raised by absh."""


class AbshError(Exception):
    """Base class for absh errors."""


class MeasureSpecError(AbshError, ValueError):
    """A --also-measure specification could not be parsed."""

    def __init__(self, spec: str) -> None:
        super().__init__(
            f"invalid measure spec {spec!r}, expected id:0|1:description:command"
        )
        self.spec = spec


class MeasurementUnavailableError(AbshError):
    """The platform did not report a required resource usage value."""
