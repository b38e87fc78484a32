# Copyright (c) Syntropy Systems
"""On-disk run log and report sink."""
from __future__ import annotations

import logging
import os
import shlex
import uuid
from datetime import datetime
from pathlib import Path
from typing import IO, TYPE_CHECKING, Protocol

from rich.console import Console
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from typing_extensions import Self

    from absh.models.raw import RawSamples

logger = logging.getLogger(__name__)

LAST_LINK = "last"


class ReportSink(Protocol):
    """Receives both renderings of every report."""

    def write_report(self, full: str, short: str) -> None:
        ...


def strip_markup(markup: str) -> str:
    """Plain text of a console markup string."""
    return Text.from_markup(markup, emoji=False).plain


def new_run_name() -> str:
    now = datetime.now()
    rand = str(uuid.uuid4())[:6]
    return f"{now.strftime('%Y%m%d-%H%M%S')}-{rand}"


class RunLog:
    """Directory holding everything written during one absh invocation.

    Layout::

        <log_dir>/<run name>/args.txt   command line
        <log_dir>/<run name>/log.txt    progress and short reports
        <log_dir>/<run name>/graph.txt  latest full report
        <log_dir>/<run name>/raw.json   every sample recorded so far
        <log_dir>/last                  symlink to the newest run directory

    Markup is rendered to the console and stripped in files.
    """

    run_dir: Path
    console: Console
    _last: Path | None
    _log_file: IO[str] | None

    def __init__(
        self,
        log_dir: Path,
        console: Console | None = None,
        run_name: str | None = None,
    ) -> None:
        self.run_dir = log_dir / (run_name or new_run_name())
        self.run_dir.mkdir(parents=True, exist_ok=False)
        self.console = console or Console(stderr=True, highlight=False, emoji=False)
        self._log_file = (self.run_dir / "log.txt").open("a")
        self._last = self._link_last(log_dir)

    def _link_last(self, log_dir: Path) -> Path | None:
        """Point <log_dir>/last at this run, replacing any previous link."""
        link = log_dir / LAST_LINK
        tmp = log_dir / f".{LAST_LINK}-{uuid.uuid4().hex[:8]}"
        try:
            tmp.symlink_to(self.run_dir.name, target_is_directory=True)
            os.replace(tmp, link)
        except OSError as exc:
            logger.warning("could not update %s: %s", link, exc)
            tmp.unlink(missing_ok=True)
            return None
        return link

    @property
    def name(self) -> Path:
        return self.run_dir

    @property
    def last(self) -> Path | None:
        return self._last

    def log_only(self, markup: str = "") -> None:
        if self._log_file is None:
            msg = "run log is closed"
            raise RuntimeError(msg)
        _ = self._log_file.write(strip_markup(markup) + "\n")
        self._log_file.flush()

    def stderr_only(self, markup: str = "") -> None:
        self.console.print(markup, soft_wrap=True)

    def both(self, markup: str = "") -> None:
        self.log_only(markup)
        self.stderr_only(markup)

    def write_args(self, argv: Sequence[str]) -> None:
        _ = (self.run_dir / "args.txt").write_text(shlex.join(argv) + "\n")

    def write_graph(self, full: str) -> None:
        _ = (self.run_dir / "graph.txt").write_text(strip_markup(full))

    def write_raw(self, raw: RawSamples) -> None:
        path = self.run_dir / "raw.json"
        tmp = path.with_suffix(".json.tmp")
        _ = tmp.write_text(raw.model_dump_json(indent=2) + "\n")
        os.replace(tmp, path)

    def write_report(self, full: str, short: str) -> None:
        self.console.print(full, soft_wrap=True, end="")
        if self._log_file is not None:
            _ = self._log_file.write(strip_markup(short))
            self._log_file.flush()
        self.write_graph(full)

    def close(self) -> None:
        if self._log_file is not None:
            self._log_file.close()
            self._log_file = None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
