# Copyright (c) Syntropy Systems
"""Tests for report rendering."""

from absh.experiment import Experiment, ExperimentName
from absh.measure import MeasureKey, MeasureMap, active_measures
from absh.models.measure import UserMeasureSpec
from absh.numbers import Duration, MemUsage, Scalar
from absh.report import ReportSettings, render_report, render_stats
from absh.run_log import strip_markup

MIB = 1024 * 1024


def experiment_with(
    name: ExperimentName,
    seconds: list[float],
    rss_mib: list[float] | None = None,
) -> Experiment:
    """Build an experiment whose wall times are the given seconds."""
    experiment = Experiment(name=name, run="true", measures=MeasureMap())
    rss_mib = rss_mib or [1.0] * len(seconds)
    for secs, rss in zip(seconds, rss_mib):
        experiment.measures.push_all(
            {
                MeasureKey.WALL_TIME: Duration.from_seconds(secs),
                MeasureKey.MAX_RSS: MemUsage(round(rss * MIB)),
            }
        )
    return experiment


def two_experiments() -> dict[ExperimentName, Experiment]:
    return {
        ExperimentName.A: experiment_with(ExperimentName.A, [10, 12, 11, 13, 9]),
        ExperimentName.B: experiment_with(ExperimentName.B, [20, 22, 21, 19, 23]),
    }


class TestRenderStats:
    """Tests for render_stats."""

    def test_short_report_lines(self) -> None:
        """Test the numeric summary of a clearly slower variant."""
        short = render_stats(active_measures(False), two_experiments(), False)
        lines = strip_markup(short).splitlines()
        assert lines[0] == "Time (in seconds):"
        assert lines[1] == (
            "A: n=5 mean=11.000s ±1.963s se=0.707s std=1.581s "
            "min=9.000s max=13.000s"
        )
        assert lines[2].startswith("B: n=5 mean=21.000s ±1.963s")
        assert lines[2].endswith("B/A=+90.9% (slower)")
        assert len(lines) == 3

    def test_verdict_colors(self) -> None:
        """Test slower is red, faster is green, baseline uncolored."""
        experiments = two_experiments()
        short = render_stats(active_measures(False), experiments, False)
        assert "[red]B: n=5" in short
        assert "[green]" not in short
        assert "\nA: n=5" in short

        reversed_order = {
            ExperimentName.B: experiments[ExperimentName.B],
            ExperimentName.A: experiments[ExperimentName.A],
        }
        short = render_stats(active_measures(False), reversed_order, False)
        assert "[green]A: n=5" in short
        assert "A/B=-47.6% (faster)" in strip_markup(short)

    def test_inconclusive_is_uncolored(self) -> None:
        """Test equal constant samples give an uncolored inconclusive line."""
        experiments = {
            ExperimentName.A: experiment_with(ExperimentName.A, [5, 5, 5, 5]),
            ExperimentName.B: experiment_with(ExperimentName.B, [5, 5, 5, 5]),
        }
        short = render_stats(active_measures(False), experiments, False)
        assert "[red]" not in short
        assert "[green]" not in short
        assert "B/A=+0.0% (inconclusive)" in short
        assert "±0.000s" in short

    def test_single_sample_experiment(self) -> None:
        """Test one sample degrades to inconclusive instead of failing."""
        experiments = {
            ExperimentName.A: experiment_with(ExperimentName.A, [1, 2, 3]),
            ExperimentName.B: experiment_with(ExperimentName.B, [50]),
        }
        report = render_report(active_measures(True), experiments)
        short = strip_markup(report.short)
        assert "B: n=1 mean=50.000s ±n/a" in short
        assert "(inconclusive)" in short
        assert "distr=[" in report.full

    def test_experiment_without_samples(self) -> None:
        """Test an experiment that never succeeded is listed with n=0."""
        experiments = two_experiments()
        experiments[ExperimentName.C] = Experiment(
            name=ExperimentName.C, run="false", measures=MeasureMap()
        )
        report = render_report(active_measures(False), experiments)
        assert "C: n=0" in strip_markup(report.short)
        assert "C: [" in strip_markup(report.full)

    def test_full_adds_bars_and_histogram(self) -> None:
        """Test full mode adds mean bars and distributions to short mode."""
        settings = ReportSettings(bar_width=10, histogram_width=8)
        report = render_report(active_measures(False), two_experiments(), settings)
        full = strip_markup(report.full)
        short = strip_markup(report.short)

        assert "distr=[" not in short
        assert full.startswith(short.rstrip("\n"))
        assert "B: [██████████] 21.000s" in full
        assert "A: [█████▎    ] 11.000s" in full
        assert "A: distr=[" in full
        assert "B: distr=[" in full

    def test_memory_and_user_metrics(self) -> None:
        """Test each active metric gets its own block in its unit."""
        specs = [UserMeasureSpec.parse("n:0:Files:ls | wc -l")]
        experiments = {}
        for name, base in ((ExperimentName.A, 1.0), (ExperimentName.B, 2.0)):
            experiment = Experiment(name=name, run="true", measures=MeasureMap(1))
            for i in range(3):
                experiment.measures.push_all(
                    {
                        MeasureKey.WALL_TIME: Duration.from_seconds(base + i / 100),
                        MeasureKey.MAX_RSS: MemUsage(round((base + i) * MIB)),
                        MeasureKey.user(0): Scalar(base * 10 + i),
                    }
                )
            experiments[name] = experiment

        short = strip_markup(
            render_stats(active_measures(True, specs), experiments, False)
        )
        blocks = short.split("\n\n")
        assert [block.splitlines()[0] for block in blocks] == [
            "Time (in seconds):",
            "Max RSS (in MiB):",
            "Files (raw value):",
        ]
        assert "A: n=3 mean=2.0MiB" in blocks[1]
        assert "(higher)" in blocks[1] or "(inconclusive)" in blocks[1]
        assert "A: n=3 mean=11.000" in blocks[2]

    def test_deterministic(self) -> None:
        """Test identical input renders byte-identical output."""
        measures = active_measures(True)
        first = render_report(measures, two_experiments())
        second = render_report(measures, two_experiments())
        assert first == second

    def test_no_experiments(self) -> None:
        """Test an empty experiment set renders nothing."""
        assert render_stats(active_measures(False), {}, True) == ""
