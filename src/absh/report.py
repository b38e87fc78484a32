# Copyright (c) Syntropy Systems
"""Comparison report rendering.

A report is rebuilt from the complete sample history after every round. It
is a pure function of the experiments' samples: no I/O, and identical input
renders byte-identical text. The text carries rich console markup.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.markup import escape

from absh.bars import colored, render_bar
from absh.distr_plot import render_distribution
from absh.stats import (
    DEFAULT_CONFIDENCE,
    INCONCLUSIVE,
    Comparison,
    Direction,
    StatSummary,
    compare_summaries,
    summarize,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from absh.experiment import Experiment, ExperimentName
    from absh.measure.kinds import Measure

VERDICT_COLORS = {Direction.FASTER: "green", Direction.SLOWER: "red"}


@dataclass(frozen=True)
class ReportSettings:
    """Rendering knobs, usually taken from AbshConfig."""

    confidence: float = DEFAULT_CONFIDENCE
    bar_width: int = 40
    histogram_width: int = 50


@dataclass(frozen=True)
class Report:
    """The full report (bars and histograms) and its numbers-only form."""

    full: str
    short: str


def _format_margin(measure: Measure, summary: StatSummary) -> str:
    if not math.isfinite(summary.margin):
        return "±n/a"
    return f"±{measure.format(summary.margin)}"


def _format_change(change: float | None) -> str:
    if change is None:
        return "n/a"
    return f"{change:+.1f}%"


def _verdict_word(measure: Measure, comparison: Comparison) -> str:
    direction = comparison.verdict.direction
    if direction is None:
        return "inconclusive"
    lower, higher = measure.direction_words()
    return lower if direction is Direction.FASTER else higher


def _stats_line(
    measure: Measure,
    name: ExperimentName,
    summary: StatSummary | None,
    baseline: ExperimentName,
    comparison: Comparison | None,
) -> str:
    if summary is None:
        return escape(f"{name}: n=0")

    fmt = measure.format
    line = (
        f"{name}: n={summary.count}"
        f" mean={fmt(summary.mean)} {_format_margin(measure, summary)}"
        f" se={fmt(summary.standard_error)} std={fmt(summary.std_dev)}"
        f" min={fmt(summary.min)} max={fmt(summary.max)}"
    )
    if comparison is None:
        return escape(line)

    line += (
        f" {name}/{baseline}={_format_change(comparison.relative_change)}"
        f" ({_verdict_word(measure, comparison)})"
    )
    direction = comparison.verdict.direction
    return colored(line, VERDICT_COLORS[direction] if direction else None)


def _bar_lines(
    measure: Measure,
    summaries: Mapping[ExperimentName, StatSummary | None],
    width: int,
) -> list[str]:
    means = [s.mean for s in summaries.values() if s is not None]
    top = max(means, default=0.0)

    lines = []
    for name, summary in summaries.items():
        if summary is None or top <= 0:
            fraction = 0.0
        else:
            fraction = summary.mean / top
        bar = colored(render_bar(fraction, width), name.color)
        value = measure.format(summary.mean) if summary is not None else "-"
        lines.append(f"{name.colored()}: [{bar}] {escape(value)}")
    return lines


def _render_measure(
    measure: Measure,
    experiments: Mapping[ExperimentName, Experiment],
    full: bool,
    settings: ReportSettings,
) -> list[str]:
    samples = {name: exp.samples(measure.key) for name, exp in experiments.items()}
    summaries: dict[ExperimentName, StatSummary | None] = {
        name: summarize(values, settings.confidence) if values else None
        for name, values in samples.items()
    }

    baseline = next(iter(experiments))
    baseline_summary = summaries[baseline]

    lines = [f"[bold]{escape(measure.name)}:[/bold]"]
    for name, summary in summaries.items():
        comparison = None
        if name != baseline:
            if baseline_summary is None or summary is None:
                comparison = Comparison(INCONCLUSIVE, None)
            else:
                comparison = compare_summaries(baseline_summary, summary)
        lines.append(_stats_line(measure, name, summary, baseline, comparison))

    if full:
        lines.extend(_bar_lines(measure, summaries, settings.bar_width))
        lines.extend(
            render_distribution(
                samples,
                settings.histogram_width,
                fmt=lambda v: escape(measure.format(v)),
            )
        )
    return lines


def render_stats(
    measures: Sequence[Measure],
    experiments: Mapping[ExperimentName, Experiment],
    full: bool,
    settings: ReportSettings | None = None,
) -> str:
    """Render every metric's statistics for the current samples.

    The first experiment in ``experiments`` is the baseline. With ``full``
    the per-experiment mean bars and distribution histograms are included.
    """
    if not experiments:
        return ""
    settings = settings or ReportSettings()
    blocks = [
        "\n".join(_render_measure(measure, experiments, full, settings))
        for measure in measures
    ]
    return "\n\n".join(blocks) + "\n"


def render_report(
    measures: Sequence[Measure],
    experiments: Mapping[ExperimentName, Experiment],
    settings: ReportSettings | None = None,
) -> Report:
    return Report(
        full=render_stats(measures, experiments, True, settings),
        short=render_stats(measures, experiments, False, settings),
    )
