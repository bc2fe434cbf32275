from collections.abc import Hashable, Sequence

from attrs import define
from hypothesis import strategies as st

from cyclefinder.graph import FunctionGraph, Graph, MappingGraph


@define(eq=False)
class Node:
    """A vertex compared by identity, optionally without a resource."""

    name: str
    resource: str | None = None

    def __repr__(self) -> str:
        return f"Node({self.name!r})"


def nodes_graph(edges: dict[str, list[str]], unreportable=()) -> tuple[FunctionGraph[Node], dict[str, Node]]:
    """Build an identity-keyed graph from a dict of names."""
    names = list(edges)
    for targets in edges.values():
        for t in targets:
            if t not in names:
                names.append(t)
    nodes = {
        name: Node(name, resource=None if name in unreportable else f"{name}.py")
        for name in names
    }
    graph = FunctionGraph(
        vertices=[nodes[n] for n in edges],
        arrow=lambda node: [nodes[t] for t in edges.get(node.name, ())],
    )
    return graph, nodes


def names(path: Sequence[Node] | None) -> list[str] | None:
    if path is None:
        return None
    return [n.name for n in path]


def has_resource(node: Node) -> bool:
    return node.resource is not None


def is_closed_walk(graph: Graph, path: Sequence) -> bool:
    """Consecutive elements are joined by edges and the walk returns to its start."""
    if len(path) < 2:
        return False
    key = graph.key
    if key(path[0]) != key(path[-1]):
        return False
    for a, b in zip(path, path[1:]):
        if key(b) not in {key(s) for s in graph.successors(a)}:
            return False
    return True


def has_cycle_by_reachability(edges: dict[Hashable, Sequence[Hashable]]) -> bool:
    """Independent oracle: some vertex can reach itself in one or more steps."""
    for start in edges:
        frontier = list(edges.get(start, ()))
        seen = set()
        while frontier:
            v = frontier.pop()
            if v == start:
                return True
            if v in seen:
                continue
            seen.add(v)
            frontier.extend(edges.get(v, ()))
    return False


@st.composite
def adjacency(draw, max_vertices=8, acyclic=False):
    """Random adjacency dicts over small integer vertices.

    With acyclic=True every edge goes from a larger to a smaller vertex.
    """
    n = draw(st.integers(1, max_vertices))
    edges = {}
    for v in range(n):
        candidates = list(range(v)) if acyclic else list(range(n))
        if candidates:
            successors = draw(st.lists(st.sampled_from(candidates), max_size=4))
        else:
            successors = []
        edges[v] = successors
    return edges


graphs = adjacency().map(MappingGraph)
acyclic_graphs = adjacency(acyclic=True).map(MappingGraph)
