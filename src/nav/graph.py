# src/nav/graph.py
"""
NavGraph: read-only navigation graph consumed by the belief core.

Building a nav graph from level geometry is someone else's job. This class
only stores the result (node positions + weighted undirected edges) in a
networkx Graph and answers the four queries the core needs:

- position(i)          → Vec3 of node i
- nearest_node(point)  → index of the closest node
- neighbours(i)        → (j, cost) pairs in insertion order
- nodes_within(box)    → sorted node indices inside a bounding box
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from world.geometry import BoundingBox, Vec3


class NavGraph:
    """
    Undirected weighted graph of navigation nodes.

    Neighbour order follows edge insertion order (networkx keeps adjacency
    dicts ordered), which keeps path search results reproducible.
    """

    def __init__(self) -> None:
        self._graph = nx.Graph()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_vertex(self, index: int, position: Vec3) -> None:
        self._graph.add_node(index, pos=position)

    def add_edge(self, a: int, b: int, cost: Optional[float] = None) -> None:
        """Connect a and b; cost defaults to the straight-line distance."""
        if a not in self._graph or b not in self._graph:
            raise KeyError(f"Unknown nav node in edge ({a}, {b})")
        if cost is None:
            cost = self.position(a).distance(self.position(b))
        if cost < 0:
            raise ValueError(f"Negative edge cost {cost} for ({a}, {b})")
        self._graph.add_edge(a, b, weight=float(cost))

    @classmethod
    def from_positions(
        cls,
        positions: Sequence[Vec3] | Mapping[int, Vec3],
        edges: Iterable[Tuple[int, int] | Tuple[int, int, float]],
    ) -> "NavGraph":
        """
        Build a graph from node positions and (a, b[, cost]) edges.

        A plain sequence of positions is indexed 0..n-1.
        """
        graph = cls()
        items = positions.items() if isinstance(positions, Mapping) else enumerate(positions)
        for index, pos in items:
            graph.add_vertex(int(index), pos)
        for edge in edges:
            if len(edge) == 3:
                a, b, cost = edge  # type: ignore[misc]
                graph.add_edge(a, b, cost)
            else:
                a, b = edge  # type: ignore[misc]
                graph.add_edge(a, b)
        return graph

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __contains__(self, index: object) -> bool:
        return index in self._graph

    def nodes(self) -> List[int]:
        return list(self._graph.nodes)

    def position(self, index: int) -> Vec3:
        return self._graph.nodes[index]["pos"]

    def neighbours(self, index: int) -> Iterator[Tuple[int, float]]:
        for other, data in self._graph.adj[index].items():
            yield other, data["weight"]

    def nearest_node(self, point: Vec3) -> Optional[int]:
        """Closest node to `point`; the first inserted wins ties. None if empty."""
        best: Optional[int] = None
        best_d = float("inf")
        for index, data in self._graph.nodes(data=True):
            d = data["pos"].distance_squared(point)
            if d < best_d:
                best, best_d = index, d
        return best

    def nodes_within(self, box: BoundingBox) -> Tuple[int, ...]:
        """Sorted indices of nodes whose position lies inside `box`."""
        return tuple(
            sorted(
                index
                for index, data in self._graph.nodes(data=True)
                if box.contains(data["pos"])
            )
        )


__all__ = ["NavGraph"]
