"""Cycle detection for lazily defined directed graphs."""

from cyclefinder.acyclic import (
    CheckResult,
    back_edges,
    check,
    depth_first_traversal,
    is_acyclic,
)
from cyclefinder.detector import CycleDetector, DetectorOptions, find_cycles
from cyclefinder.graph import FunctionGraph, Graph, MappingGraph
from cyclefinder.reconstruct import reconstruct


__all__ = [
    "CheckResult",
    "CycleDetector",
    "DetectorOptions",
    "FunctionGraph",
    "Graph",
    "MappingGraph",
    "back_edges",
    "check",
    "depth_first_traversal",
    "find_cycles",
    "is_acyclic",
    "reconstruct",
]
