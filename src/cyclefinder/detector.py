"""Circular import detection for a set of modules.

This ties the graph algorithms to the module model from
cyclefinder.imports: it decides which modules and which imports make up the
dependency graph, runs the detection, and hands every cycle it finds to a
hook as a list of paths.
"""

import os
import re
from collections.abc import Callable, Iterable, Iterator
from typing import Any, TypeVar

from attrs import define, field

from cyclefinder.acyclic import check
from cyclefinder.graph import FunctionGraph, Graph
from cyclefinder.imports import Dependency, Module, ModuleIndex
from cyclefinder.reconstruct import reconstruct
from cyclefinder.reporting import Reporter, Volume


V = TypeVar("V")


def find_cycles(
    graph: Graph[V],
    *,
    is_reportable: Callable[[V], bool] | None = None,
    include_target: Callable[[V], bool] | None = None,
    reporter: Reporter | None = None,
) -> Iterator[list[V]]:
    """Yield one cycle per vertex that heads a back edge.

    Targets for which no reportable cycle can be reconstructed are skipped.
    """
    result = check(graph, include_target=include_target)
    if reporter is not None:
        if result.is_acyclic:
            reporter.note("no cycle imports")
        else:
            reporter.warn("found cycle imports -> processing")

    for target in result.cycle_targets:
        cycle = reconstruct(graph, target, is_reportable=is_reportable)
        if cycle is not None:
            yield cycle
        elif reporter is not None:
            reporter.debug(f"skipping unreportable cycle at {target!r}")


@define
class AnalysisContext:
    """State shared with the hooks during a single analysis.

    Hooks may append to warnings and errors. An exception raised by
    on_detected is recorded in errors rather than aborting the analysis.
    """

    modules: list[Module] = field(factory=list)
    warnings: list[Any] = field(factory=list)
    errors: list[Any] = field(factory=list)
    cycles: list[list[str]] = field(factory=list)


def noop(*args: Any, **kwargs: Any) -> None:
    pass


def _compile(value: str | re.Pattern[str]) -> re.Pattern[str]:
    return re.compile(value) if isinstance(value, str) else value


def format_cycle(paths: Iterable[str]) -> str:
    return " -> ".join(paths)


def report_cycle(context: AnalysisContext, paths: list[str], *, fail_on_error: bool) -> None:
    """The on_detected hook used by the command line."""
    message = f"Circular dependency detected:\n {format_cycle(paths)}"
    if fail_on_error:
        context.errors.append(message)
    else:
        context.warnings.append(message)


@define
class DetectorOptions:
    """Configuration for a CycleDetector.

    The defaults consider every module, ignore nothing, and stay silent.
    """

    include: re.Pattern[str] = field(default=re.compile(".*"), converter=_compile)
    exclude: re.Pattern[str] = field(default=re.compile("$^"), converter=_compile)
    # Cycles anchored on a module whose path matches this are not reported.
    ignore_target: re.Pattern[str] = field(
        default=re.compile("site-packages"), converter=_compile
    )
    cwd: str = field(factory=os.getcwd)
    volume: Volume = Volume.quiet
    ignore_lazy_imports: bool = False
    on_start: Callable[[AnalysisContext], None] = noop
    on_detected: Callable[[AnalysisContext, list[str]], None] = noop
    on_end: Callable[[AnalysisContext], None] = noop


class CycleDetector:
    """Finds circular imports between modules and reports them to hooks."""

    def __init__(self, options: DetectorOptions | None = None):
        self.options = options or DetectorOptions()
        self.reporter = Reporter(volume=self.options.volume)

    def analyze(self, index: ModuleIndex) -> AnalysisContext:
        context = AnalysisContext(modules=list(index))
        self.options.on_start(context)
        self.reporter.note("start analyze")

        with self.reporter.timed("analysis"):
            graph = self.dependency_graph(index)
            self.reporter.debug(f"{len(graph.vertices)} modules in dependency graph")

            for cycle in find_cycles(
                graph,
                is_reportable=has_resource,
                include_target=self.is_target,
                reporter=self.reporter,
            ):
                # print modules as paths in error messages
                paths = [self.relative(module) for module in cycle]
                context.cycles.append(paths)
                try:
                    self.options.on_detected(context, paths)
                except Exception as e:
                    context.errors.append(e)

            self.options.on_end(context)

        self.reporter.note("complete")
        return context

    def dependency_graph(self, index: ModuleIndex) -> FunctionGraph[Module]:
        """The graph of modules we care about and the imports between them."""
        include = self.options.include
        exclude = self.options.exclude

        # vertices of the dependency graph are the modules
        vertices = [
            module
            for module in index
            if module.resource is not None
            and include.search(module.resource)
            and not exclude.search(module.resource)
        ]

        def arrow(module: Module) -> list[Module]:
            result = []
            for dependency in module.dependencies:
                if self.ignores(dependency):
                    continue
                target = index.resolve(dependency)
                if target is None or target.resource is None:
                    continue
                # `from pkg import attr` inside pkg resolves back to pkg.
                if target is module:
                    continue
                result.append(target)
            return result

        return FunctionGraph(vertices=vertices, arrow=arrow)

    def ignores(self, dependency: Dependency) -> bool:
        if dependency.weak:
            return True
        return self.options.ignore_lazy_imports and dependency.lazy

    def is_target(self, module: Module) -> bool:
        return module.resource is not None and not self.options.ignore_target.search(
            module.resource
        )

    def relative(self, module: Module) -> str:
        assert module.resource is not None
        return os.path.relpath(module.resource, self.options.cwd)


def has_resource(module: Module) -> bool:
    return module.resource is not None
