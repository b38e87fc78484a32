# Copyright (c) Syntropy Systems
"""Main CLI entry point for absh."""
from __future__ import annotations

import logging
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from absh.bench import Bench, BenchOptions
from absh.config import load_config
from absh.errors import AbshError, MeasureSpecError
from absh.experiment import ExperimentName, build_experiments
from absh.models.measure import UserMeasureSpec
from absh.run_log import RunLog

console = Console(stderr=True, highlight=False, emoji=False)

app = typer.Typer(
    name="absh",
    help="A/B testing for shell scripts.",
    add_completion=False,
)


def configure_logging(debug: bool) -> None:
    """Route package logging through rich on stderr."""
    handler = RichHandler(console=console, show_path=False, show_time=False)
    root = logging.getLogger("absh")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.propagate = False


def parse_also_measure(specs: list[str] | None) -> list[UserMeasureSpec]:
    """Parse --also-measure values, failing before anything runs."""
    parsed = []
    for spec in specs or []:
        try:
            parsed.append(UserMeasureSpec.parse(spec))
        except MeasureSpecError as e:
            raise typer.BadParameter(str(e), param_hint="--also-measure") from e
    return parsed


@app.command()
def main(  # noqa: PLR0913
    a: str = typer.Option(..., "-a", help="A variant shell script."),
    b: Optional[str] = typer.Option(None, "-b", help="B variant shell script."),
    c: Optional[str] = typer.Option(None, "-c", help="C variant shell script."),
    d: Optional[str] = typer.Option(None, "-d", help="D variant shell script."),
    e: Optional[str] = typer.Option(None, "-e", help="E variant shell script."),
    aw: Optional[str] = typer.Option(
        None, "-A", "--a-warmup", help="A variant warmup shell script."
    ),
    bw: Optional[str] = typer.Option(
        None, "-B", "--b-warmup", help="B variant warmup shell script."
    ),
    cw: Optional[str] = typer.Option(
        None, "-C", "--c-warmup", help="C variant warmup shell script."
    ),
    dw: Optional[str] = typer.Option(
        None, "-D", "--d-warmup", help="D variant warmup shell script."
    ),
    ew: Optional[str] = typer.Option(
        None, "-E", "--e-warmup", help="E variant warmup shell script."
    ),
    random_order: bool = typer.Option(
        False, "-r", help="Randomise test execution order."
    ),
    ignore_first: bool = typer.Option(
        False, "-i", help="Ignore the results of the first iteration."
    ),
    iterations: Optional[int] = typer.Option(
        None,
        "-n",
        min=1,
        help="Stop after n successful iterations (run forever if not specified).",
    ),
    mem: bool = typer.Option(
        False, "-m", "--mem", help="Also measure max resident set size."
    ),
    also_measure: Optional[list[str]] = typer.Option(
        None,
        "--also-measure",
        help=(
            "Extra metric as id:is_size(0|1):description:command, measured "
            "after each run from the command's stdout."
        ),
    ),
    max_time: Optional[int] = typer.Option(
        None,
        "--max-time",
        min=1,
        help="Test is considered failed if it takes longer than this many seconds.",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """A/B testing for shell scripts.

    Example:
        absh -a 'sleep 0.1' -b 'sleep 0.2' -n 10

    """
    configure_logging(debug)
    user_specs = parse_also_measure(also_measure)

    config = load_config()
    experiments = build_experiments(
        {
            ExperimentName.A: a,
            ExperimentName.B: b,
            ExperimentName.C: c,
            ExperimentName.D: d,
            ExperimentName.E: e,
        },
        {
            ExperimentName.A: aw,
            ExperimentName.B: bw,
            ExperimentName.C: cw,
            ExperimentName.D: dw,
            ExperimentName.E: ew,
        },
        user_count=len(user_specs),
    )
    options = BenchOptions(
        random_order=random_order,
        ignore_first=ignore_first,
        iterations=iterations,
        mem=mem,
        also_measure=user_specs,
        max_time=max_time,
    )

    try:
        log = RunLog(config.log_dir, console=console)
    except OSError as exc:
        console.print(f"[red]Error:[/red] cannot create run log: {exc}")
        raise typer.Exit(1) from exc

    with log:
        console.print(f"Writing absh data to {escape(str(log.name))}/")
        if log.last is not None:
            console.print(f"Log symlink is {escape(str(log.last))}")
        log.write_args(sys.argv)

        bench = Bench(experiments, options, log, config=config)
        try:
            bench.run()
        except AbshError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(1) from exc
        except KeyboardInterrupt:
            console.print("\n[dim]Interrupted[/dim]")
            raise typer.Exit(130) from None


if __name__ == "__main__":
    app()
