"""Console reporting for cycle detection runs."""

import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import timedelta
from enum import IntEnum
from typing import IO

import click
from attrs import define, field
from humanize import precisedelta


class Volume(IntEnum):
    """Logging verbosity levels."""

    quiet = 0
    normal = 1
    verbose = 2
    debug = 3


TITLE = "cyclefinder"


@define
class Reporter:
    """Writes progress messages to the terminal.

    Messages are only written if their level is at most the configured
    volume, so the default of Volume.quiet keeps library use silent.
    """

    volume: Volume = Volume.quiet
    stream: IO[str] | None = field(default=None)

    def warn(self, msg: str) -> None:
        self.report(msg, Volume.normal, fg="red")

    def note(self, msg: str) -> None:
        self.report(msg, Volume.normal, fg="green")

    def info(self, msg: str) -> None:
        self.report(msg, Volume.verbose)

    def debug(self, msg: str) -> None:
        self.report(msg, Volume.debug, dim=True)

    def report(self, msg: str, level: Volume, **style) -> None:
        if level > self.volume:
            return
        click.echo(
            f"{click.style(TITLE, fg='blue')} {click.style(msg, **style)}",
            file=self.stream if self.stream is not None else sys.stderr,
        )

    @contextmanager
    def timed(self, label: str) -> Iterator[None]:
        """Report how long the body took once it completes."""
        start = time.monotonic()
        try:
            yield
        finally:
            elapsed = timedelta(seconds=time.monotonic() - start)
            self.info(
                f"{label} took {precisedelta(elapsed, minimum_unit='milliseconds')}"
            )
