"""Reconstruction of a concrete cycle through a given vertex.

check() only tells us which vertices sit on a cycle. To show a useful
message we need an actual path, so for each such vertex we run a second,
independent depth-first search rooted at it, and stop at the first edge
that leads back to the root.

The path found is the first one in successor order. It is deterministic
for a fixed graph, but it is not necessarily the shortest cycle through
the target, and callers may rely on that ordering not changing.
"""

from collections.abc import Callable, Hashable, Iterator
from typing import TypeVar

from cyclefinder.graph import Graph


V = TypeVar("V")


def reconstruct(
    graph: Graph[V],
    target: V,
    is_reportable: Callable[[V], bool] | None = None,
) -> list[V] | None:
    """Find a cycle that starts and ends at target.

    Returns the cycle as [target, ..., target], where each element is a
    successor of the one before it, or None if no such cycle could be
    found. If is_reportable is given, vertices it rejects are never part of
    the returned path: a branch of the search that reaches one is abandoned,
    and if target itself is rejected the result is None.
    """
    key = graph.key
    target_key = key(target)
    seen: set[Hashable] = set()

    def enter(vertex: V) -> tuple[V, Iterator[V]] | None:
        seen.add(key(vertex))
        if is_reportable is not None and not is_reportable(vertex):
            return None
        return vertex, iter(graph.successors(vertex))

    root = enter(target)
    if root is None:
        return None

    # The path from target to the current vertex is exactly the vertices of
    # the frames on this stack.
    stack = [root]
    while stack:
        vertex, remaining = stack[-1]
        for successor in remaining:
            successor_key = key(successor)
            if successor_key in seen:
                if successor_key == target_key:
                    return [v for v, _ in stack] + [successor]
                # Closes some other cycle, which doesn't help us here.
                continue
            frame = enter(successor)
            if frame is not None:
                stack.append(frame)
                break
        else:
            stack.pop()
    return None
