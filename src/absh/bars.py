# Copyright (c) Syntropy Systems
"""Proportional bars with eighth-of-a-cell resolution."""
from __future__ import annotations

import math

from rich.markup import escape

STEPS = 8
FULL = "█"
EMPTY = " "
# Index i is a cell filled i/8 of the way.
HORIZONTAL = (EMPTY, "▏", "▎", "▍", "▌", "▋", "▊", "▉", FULL)
VERTICAL = (EMPTY, "▁", "▂", "▃", "▄", "▅", "▆", "▇", FULL)


def _clamp(fraction: float) -> float:
    if math.isnan(fraction):
        return 0.0
    return min(max(fraction, 0.0), 1.0)


def filled_eighths(fraction: float, width: int) -> int:
    """Number of filled eighth-cells for fraction of width cells.

    Rounds up, so any non-zero fraction shows at least one eighth.
    """
    total = width * STEPS
    return min(math.ceil(_clamp(fraction) * total), total)


def render_bar(fraction: float, width: int) -> str:
    """Render fraction as a left-aligned bar exactly width cells wide."""
    if width <= 0:
        return ""
    eighths = filled_eighths(fraction, width)
    full, rest = divmod(eighths, STEPS)
    bar = FULL * full
    if rest:
        bar += HORIZONTAL[rest]
    return bar + EMPTY * (width - len(bar))


def render_column(fraction: float) -> str:
    """Render fraction as one bottom-aligned cell."""
    return VERTICAL[filled_eighths(fraction, 1)]


def colored(text: str, color: str | None) -> str:
    """Wrap text in console markup for color; text is escaped."""
    text = escape(text)
    if not color:
        return text
    return f"[{color}]{text}[/{color}]"
