"""Graph abstraction consumed by the cycle detection algorithms.

The algorithms never construct a graph themselves. Callers supply anything
that satisfies the Graph protocol:

- vertices: the vertices to start traversals from, in order
- successors(v): the direct successors of v, in order
- key(v): the identity key of v, used for every "have we seen this" check

Two ready-made implementations are provided. FunctionGraph compares
vertices by object identity, which is what you want when vertices are
domain objects (modules, tasks, entities). MappingGraph is convenient for
adjacency dicts with hashable vertices such as strings.
"""

from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from typing import Generic, Protocol, TypeVar

from attrs import define, field


V = TypeVar("V")
T = TypeVar("T")
H = TypeVar("H", bound=Hashable)


class Graph(Protocol[V]):
    """A lazily defined directed graph.

    successors must return the same result every time it is called with the
    same vertex during a single detection run.
    """

    @property
    def vertices(self) -> Sequence[V]: ...

    def successors(self, vertex: V) -> Iterable[V]: ...

    def key(self, vertex: V) -> Hashable: ...


@define(frozen=True)
class FunctionGraph(Generic[T]):
    """A graph given as a list of vertices and an arrow function.

    For example, for the graph

        x <- y <- z

    vertices == [x, y, z] and arrow maps x to [], y to [x] and z to [y].

    Vertices are compared by identity, so two equal but distinct objects
    are two different vertices.
    """

    vertices: Sequence[T] = field(converter=tuple)
    arrow: Callable[[T], Iterable[T]]

    def successors(self, vertex: T) -> Iterable[T]:
        return self.arrow(vertex)

    def key(self, vertex: T) -> Hashable:
        return id(vertex)


@define(frozen=True)
class MappingGraph(Generic[H]):
    """A graph given as an adjacency mapping from vertex to successors.

    Vertices that only ever appear as successors are still reachable, they
    just have no outgoing edges.
    """

    edges: Mapping[H, Sequence[H]] = field(
        converter=lambda edges: {k: tuple(v) for k, v in edges.items()}
    )

    @property
    def vertices(self) -> Sequence[H]:
        return tuple(self.edges)

    def successors(self, vertex: H) -> Iterable[H]:
        return self.edges.get(vertex, ())

    def key(self, vertex: H) -> Hashable:
        return vertex
