"""Sibling dependency graph and topological ordering."""
from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from gitvendor.core.cascade.exceptions import CascadeCycleError, CascadeError


@dataclass(slots=True)
class DependencyGraph:
    """Project -> dependencies, with an explicit node registry.

    ``dependencies["A"] == ("B",)`` means A vendors from B, so B must be
    pulled before A.
    """

    nodes: set[str] = field(default_factory=set)
    dependencies: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def add_node(self, name: str) -> None:
        self.nodes.add(name)
        self.dependencies.setdefault(name, ())

    def add_edge(self, dependent: str, dependency: str) -> None:
        """Record that ``dependent`` depends on ``dependency``.

        Self-loops and duplicate edges are ignored.
        """
        if dependent == dependency:
            return
        self.add_node(dependent)
        self.add_node(dependency)
        current = self.dependencies[dependent]
        if dependency not in current:
            self.dependencies[dependent] = current + (dependency,)

    def validate(self) -> None:
        """Check that every dependency target is a registered node."""
        unknown = sorted(
            {dep for deps in self.dependencies.values() for dep in deps} - self.nodes
        )
        if unknown or set(self.dependencies) != self.nodes:
            raise CascadeError(
                f"dependency graph references unregistered projects: {', '.join(unknown)}",
                context={"unknown": unknown},
            )

    def dependents_of(self, name: str) -> list[str]:
        return sorted(n for n, deps in self.dependencies.items() if name in deps)

    def order(self) -> list[str]:
        return topological_sort(self.dependencies)

    def __len__(self) -> int:
        return len(self.nodes)

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(self.dependencies[name]) for name in sorted(self.nodes)}


def topological_sort(graph: Mapping[str, Iterable[str]]) -> list[str]:
    """Order projects so every dependency precedes its dependents.

    Kahn's algorithm on the reversed relation: a node's in-degree is the number
    of projects it depends on. Ready nodes are taken in lexicographic order so
    the same graph always yields the same order. Dependency targets that are
    not keys of ``graph`` are registered as nodes without dependencies.

    Raises:
        CascadeCycleError: Naming every node left with unresolved dependencies
    """
    in_degree: dict[str, int] = {}
    reverse_adj: dict[str, list[str]] = {}

    for node, deps in graph.items():
        deps = list(dict.fromkeys(deps))
        in_degree[node] = in_degree.get(node, 0) + len(deps)
        for dep in deps:
            in_degree.setdefault(dep, 0)
            reverse_adj.setdefault(dep, []).append(node)

    ready = [node for node, deg in in_degree.items() if deg == 0]
    heapq.heapify(ready)

    order: list[str] = []
    while ready:
        node = heapq.heappop(ready)
        order.append(node)
        for dependent in sorted(reverse_adj.get(node, ())):
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                heapq.heappush(ready, dependent)

    if len(order) != len(in_degree):
        raise CascadeCycleError(node for node, deg in in_degree.items() if deg > 0)

    return order


__all__ = ["DependencyGraph", "topological_sort"]
