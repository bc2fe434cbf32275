"""Acyclicity checking by depth-first search.

A directed graph has a cycle if and only if a depth-first search finds an
edge pointing at a vertex that is still on the active traversal stack (a
"back edge"). check() runs such a search over every vertex of the graph and
collects the heads of those back edges. Each head is a vertex that lies on
at least one cycle, and is used as the anchor for reconstructing that cycle
later (see cyclefinder.reconstruct).

The search is iterative so that long dependency chains don't run into the
interpreter's recursion limit, but it visits and finishes vertices in
exactly the order the obvious recursive version would.
"""

from collections.abc import Callable, Hashable, Iterable, Iterator
from typing import Generic, TypeVar

from attrs import define, field

from cyclefinder.graph import Graph


V = TypeVar("V")
T = TypeVar("T")


@define(frozen=True)
class CheckResult(Generic[T]):
    """Outcome of check().

    cycle_targets holds each back-edge head once, in the order they were
    first found.
    """

    is_acyclic: bool
    cycle_targets: tuple[T, ...] = field(converter=tuple)


def depth_first_traversal(
    graph: Graph[V],
    on_visit: Callable[[V, list[V]], None] | None = None,
    on_back_edge: Callable[[V, V], None] | None = None,
) -> None:
    """Depth-first traversal of the whole graph.

    on_visit is called with each vertex and its successors when the vertex
    is first entered. on_back_edge is called with the tail and head of every
    back edge, in the order they are found.
    """
    key = graph.key
    # Vertices whose visit is in progress, i.e. the active stack.
    discovered: set[Hashable] = set()
    # Vertices whose visit is complete. Never shrinks.
    finished: set[Hashable] = set()

    def enter(vertex: V) -> tuple[V, Iterator[V]]:
        discovered.add(key(vertex))
        adjacent = list(graph.successors(vertex))
        if on_visit is not None:
            on_visit(vertex, adjacent)
        return vertex, iter(adjacent)

    for root in graph.vertices:
        root_key = key(root)
        if root_key in discovered or root_key in finished:
            continue

        stack = [enter(root)]
        while stack:
            vertex, remaining = stack[-1]
            for successor in remaining:
                successor_key = key(successor)
                if successor_key in discovered:
                    if on_back_edge is not None:
                        on_back_edge(vertex, successor)
                elif successor_key not in finished:
                    stack.append(enter(successor))
                    break
            else:
                stack.pop()
                vertex_key = key(vertex)
                discovered.discard(vertex_key)
                finished.add(vertex_key)


def check(
    graph: Graph[V],
    include_target: Callable[[V], bool] | None = None,
) -> CheckResult[V]:
    """Test whether a directed graph is acyclic.

    Returns whether the graph is acyclic together with the vertices that
    head at least one back edge. If include_target is given, back edges
    whose head it rejects are ignored entirely.
    """
    seen_targets: set[Hashable] = set()
    targets: list[V] = []

    def back_edge(tail: V, head: V) -> None:
        head_key = graph.key(head)
        if head_key in seen_targets:
            return
        if include_target is not None and not include_target(head):
            return
        seen_targets.add(head_key)
        targets.append(head)

    depth_first_traversal(graph, on_back_edge=back_edge)
    return CheckResult(is_acyclic=not targets, cycle_targets=targets)


def is_acyclic(graph: Graph[V]) -> bool:
    return check(graph).is_acyclic


def back_edges(graph: Graph[V]) -> Iterable[tuple[V, V]]:
    """Every back edge found by a depth-first traversal, as (tail, head)."""
    result: list[tuple[V, V]] = []
    depth_first_traversal(
        graph, on_back_edge=lambda tail, head: result.append((tail, head))
    )
    return result
