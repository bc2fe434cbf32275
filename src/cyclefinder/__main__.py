"""Main entry point for cyclefinder."""

import os
import sys
from functools import partial

import click

from cyclefinder.cli import EnumChoice, validate_pattern
from cyclefinder.detector import (
    CycleDetector,
    DetectorOptions,
    format_cycle,
    report_cycle,
)
from cyclefinder.imports import ImportGraphError, build_module_index
from cyclefinder.reporting import Volume


@click.command(
    help="""
Check the Python modules under SOURCE_ROOT for circular imports.

Every cycle found is printed as a chain of paths, and the exit status is
non-zero if any were found.
""".strip()
)
@click.version_option(package_name="cyclefinder")
@click.option(
    "--include",
    default=None,
    callback=validate_pattern,
    help="Only consider modules whose path matches this regular expression.",
)
@click.option(
    "--exclude",
    default=None,
    callback=validate_pattern,
    help="Ignore modules whose path matches this regular expression.",
)
@click.option(
    "--ignore-target",
    default=None,
    callback=validate_pattern,
    help=(
        "Don't report cycles anchored on modules whose path matches this "
        "regular expression. Defaults to ignoring site-packages."
    ),
)
@click.option(
    "--cwd",
    default=None,
    type=click.Path(exists=True, file_okay=False),
    help="Directory that reported paths are relative to. Defaults to the current directory.",
)
@click.option(
    "--ignore-lazy-imports",
    is_flag=True,
    default=False,
    help="Don't treat imports inside function bodies as dependencies.",
)
@click.option(
    "--volume",
    default="quiet",
    type=EnumChoice(Volume),
    help="Level of progress output to provide on stderr.",
)
@click.option(
    "--fail-on-error/--warn-only",
    default=True,
    help="""
By default cycles are treated as errors and cause a non-zero exit status.
With --warn-only they are still printed but the exit status is zero.
""",
)
@click.argument(
    "source_root",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
)
def main(
    source_root: str,
    include,
    exclude,
    ignore_target,
    cwd: str | None,
    ignore_lazy_imports: bool,
    volume: Volume,
    fail_on_error: bool,
) -> None:
    options_kwargs = dict(
        cwd=cwd or os.getcwd(),
        volume=volume,
        ignore_lazy_imports=ignore_lazy_imports,
        on_detected=partial(report_cycle, fail_on_error=fail_on_error),
    )
    for name, pattern in [
        ("include", include),
        ("exclude", exclude),
        ("ignore_target", ignore_target),
    ]:
        if pattern is not None:
            options_kwargs[name] = pattern

    try:
        index = build_module_index(source_root)
    except ImportGraphError as e:
        raise click.UsageError(str(e))

    detector = CycleDetector(DetectorOptions(**options_kwargs))
    context = detector.analyze(index)

    for cycle in context.cycles:
        click.echo(format_cycle(cycle))

    for warning in context.warnings:
        click.secho(f"WARNING: {warning}", fg="yellow", err=True)

    for error in context.errors:
        if isinstance(error, Exception):
            click.secho(f"Error in on_detected hook: {error!r}", fg="red", err=True)
        else:
            click.secho(f"ERROR: {error}", fg="red", err=True)

    if context.cycles:
        click.echo(
            f"Found {len(context.cycles)} import cycle(s).",
            err=True,
        )
        if context.errors:
            sys.exit(1)
    else:
        click.echo("No import cycles detected.", err=True)


if __name__ == "__main__":  # pragma: no cover
    main(prog_name="cyclefinder")
