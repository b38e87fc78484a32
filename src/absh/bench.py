# Copyright (c) Syntropy Systems
"""The measurement loop: run rounds, record samples, publish reports."""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rich.markup import escape

from absh.config import AbshConfig
from absh.errors import MeasurementUnavailableError
from absh.measure.key import MeasureKey
from absh.measure.kinds import active_measures
from absh.models.raw import RawMeasure, RawSamples
from absh.numbers import MemUsage, Scalar
from absh.report import Report, ReportSettings, render_report
from absh.runner import ScriptRunner, run_capture

if TYPE_CHECKING:
    from collections.abc import Mapping

    from absh.experiment import Experiment, ExperimentName
    from absh.models.measure import UserMeasureSpec
    from absh.numbers import Number
    from absh.run_log import ReportSink, RunLog

logger = logging.getLogger(__name__)

MIN_SAMPLES_FOR_REPORT = 2


@dataclass
class BenchOptions:
    """What to run and measure, as given on the command line."""

    random_order: bool = False
    ignore_first: bool = False
    iterations: int | None = None
    mem: bool = False
    also_measure: list[UserMeasureSpec] = field(default_factory=list)
    max_time: float | None = None


class Bench:
    """Runs every experiment once per round and reports after each round."""

    experiments: dict[ExperimentName, Experiment]
    options: BenchOptions
    config: AbshConfig
    log: RunLog
    sink: ReportSink

    def __init__(
        self,
        experiments: Mapping[ExperimentName, Experiment],
        options: BenchOptions,
        log: RunLog,
        config: AbshConfig | None = None,
        sink: ReportSink | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.experiments = dict(experiments)
        self.options = options
        self.config = config or AbshConfig()
        self.log = log
        self.sink = sink or log
        self._rng = rng or random.Random()
        self.measures = active_measures(options.mem, options.also_measure)
        self.settings = ReportSettings(
            confidence=self.config.confidence,
            bar_width=self.config.bar_width,
            histogram_width=self.config.histogram_width,
        )

    def _print_script(self, title: str, script: str) -> None:
        self.log.both(title)
        for line in script.splitlines():
            self.log.both(f"    {escape(line)}")

    def _soft_failure(self, experiment: Experiment, message: str) -> bool:
        logger.warning("%s: %s", experiment.name, message)
        self.log.log_only(f"{experiment.name}: {escape(message)}")
        return False

    def _runner(self, script: str, max_time: float | None = None) -> ScriptRunner:
        return ScriptRunner(
            script,
            shell=self.config.shell,
            max_time=max_time,
            grace_period=self.config.kill_grace_period,
        )

    def run_test(self, experiment: Experiment) -> bool:
        """Run one experiment once and record its samples.

        Returns False when the round was discarded. Raises
        MeasurementUnavailableError when the platform reports no max RSS.
        """
        self.log.both()
        self.log.both(f"running test: {experiment.name.colored()}")

        if experiment.warmup.strip():
            self._print_script("running warmup script:", experiment.warmup)
            warmup = self._runner(experiment.warmup).run()
            if not warmup.success:
                return self._soft_failure(
                    experiment, f"warmup failed: {warmup.describe()}"
                )

        self._print_script("running script:", experiment.run)
        max_time = self.options.max_time
        result = self._runner(experiment.run, max_time).run()

        too_long = result.timed_out or (
            max_time is not None and result.elapsed.seconds() > max_time
        )
        if too_long:
            return self._soft_failure(
                experiment,
                f"script took too long: {int(result.elapsed.seconds())} s",
            )
        if not result.success:
            return self._soft_failure(
                experiment, f"script failed: {result.describe()}"
            )
        if result.max_rss.bytes == 0:
            msg = "maxrss not available"
            raise MeasurementUnavailableError(msg)

        samples: dict[MeasureKey, Number] = {
            MeasureKey.WALL_TIME: result.elapsed,
            MeasureKey.MAX_RSS: result.max_rss,
        }
        extra_info = ""
        for index, spec in enumerate(self.options.also_measure):
            output = run_capture(spec.cmd, shell=self.config.shell)
            if output.exit_code != 0:
                return self._soft_failure(
                    experiment,
                    f"also_measure {spec} failed: exit status {output.exit_code}",
                )
            try:
                value = float(output.stdout.strip())
            except ValueError:
                value = math.nan
            if not math.isfinite(value):
                return self._soft_failure(
                    experiment,
                    f"also_measure {spec} printed a non-number: "
                    f"{output.stdout.strip()!r}",
                )
            sample: Number = MemUsage(round(value)) if spec.is_size else Scalar(value)
            samples[MeasureKey.user(index)] = sample
            extra_info += f", {escape(spec.id)} {sample}"

        experiment.measures.push_all(samples)

        self.log.both(
            f"{experiment.name.colored()} finished in {result.elapsed}, "
            f"max rss {result.max_rss}{extra_info}"
        )
        return True

    def run_round(self) -> None:
        """Run every experiment once, optionally in random order."""
        order = list(self.experiments)
        if self.options.random_order:
            self._rng.shuffle(order)
        for name in order:
            _ = self.run_test(self.experiments[name])

    def min_runs(self) -> int:
        return min(experiment.runs() for experiment in self.experiments.values())

    def clear(self) -> None:
        for experiment in self.experiments.values():
            experiment.measures.clear()

    def report(self) -> Report:
        return render_report(self.measures, self.experiments, self.settings)

    def raw_samples(self) -> RawSamples:
        return RawSamples(
            measures=[
                RawMeasure(
                    id=measure.id,
                    name=measure.name,
                    unit=measure.number_type.unit,
                    samples={
                        str(name): experiment.samples(measure.key)
                        for name, experiment in self.experiments.items()
                    },
                )
                for measure in self.measures
            ]
        )

    def _log_setup(self) -> None:
        self.log.log_only(f"random_order: {self.options.random_order}")
        for name, experiment in self.experiments.items():
            self.log.log_only(f"{name}.run: {escape(experiment.run)}")
            if experiment.warmup:
                self.log.log_only(f"{name}.warmup: {escape(experiment.warmup)}")

    def run(self) -> None:
        """Run rounds until the iteration limit (forever without one)."""
        self._log_setup()

        if self.options.ignore_first:
            self.run_round()
            self.clear()
            self.log.both()
            self.log.both("Ignoring first run pair results.")
            self.log.both("Now collecting the results.")
            self.log.both(
                "Statistics will be printed after the second successful iteration."
            )
        else:
            self.log.both()
            self.log.both(
                "[yellow]First run pair results will be used in statistics.[/yellow]"
            )
            self.log.both("[yellow]Results might be skewed.[/yellow]")
            self.log.both(
                "[yellow]Use `-i` command line flag to ignore the first "
                "iteration.[/yellow]"
            )

        iterations = self.options.iterations
        while True:
            self.run_round()
            min_count = self.min_runs()

            if min_count >= MIN_SAMPLES_FOR_REPORT:
                self.log.both()
                report = self.report()
                self.sink.write_report(report.full, report.short)
                self.log.write_raw(self.raw_samples())

            if iterations is not None and min_count >= iterations:
                break
