"""
Distance-ordered traversal of a surface graph.

The visitor expands surfels by increasing value of a vertex functor, e.g. the
Euclidean distance from the embedded seed. The value is evaluated on each
surfel on its own, it is not accumulated along paths, so the same surfel
always gets the same key and a plain min-heap with lazy deletion is enough.

Typical use, pulling one node at a time:

    visitor = DistanceVisitor(surface, functor, bel)
    while not visitor.finished():
        visitor.expand()
        surfel, distance = visitor.current()
"""

import heapq
import itertools
import logging
from typing import Callable, Iterator, List, NamedTuple, Optional, Set, Tuple

from .errors import TraversalStateError
from .kspace import SCell

logger = logging.getLogger(__name__)


class Node(NamedTuple):
    """A visited surfel and its distance."""
    surfel: SCell
    distance: float


class DistanceVisitor:
    """
    Ordered expansion over a graph exposing ``write_neighbors(vertex)``.

    Nodes come out by non-decreasing distance as long as every vertex but
    the start has a neighbor with a distance not larger than its own (true
    for the Euclidean distance to the start on most shapes); otherwise they
    come out in best-first order.

    Args:
        graph: surface graph, typically an ImplicitDigitalSurface
        functor: callable mapping a vertex to its scalar distance
        start: vertex the traversal starts from
    """

    def __init__(self, graph, functor: Callable[[SCell], float], start: SCell):
        self.graph = graph
        self.functor = functor
        self.start = start

        self._counter = itertools.count()
        self._queue: List[Tuple[float, int, SCell]] = []
        self._visited: Set[SCell] = set()
        self._current: Optional[Node] = None
        self._push(start)

    def _push(self, vertex: SCell) -> None:
        # the counter breaks distance ties by discovery order
        heapq.heappush(self._queue, (float(self.functor(vertex)), next(self._counter), vertex))

    def _discard_visited(self) -> None:
        while self._queue and self._queue[0][2] in self._visited:
            heapq.heappop(self._queue)

    def finished(self) -> bool:
        """True when no reachable vertex is left to expand."""
        return not self._queue

    def current(self) -> Node:
        """Most recently expanded node."""
        if self._current is None:
            raise TraversalStateError("current() called before the first expand()")
        return self._current

    def expand(self) -> Node:
        """
        Pop the closest unvisited vertex, mark it and queue its unvisited neighbors.

        Returns:
            The expanded node, also available through ``current()``
        """
        if self.finished():
            raise TraversalStateError("expand() called on a finished traversal")

        distance, _, vertex = heapq.heappop(self._queue)
        self._visited.add(vertex)
        self._current = Node(vertex, distance)

        for neighbor in self.graph.write_neighbors(vertex):
            if neighbor not in self._visited:
                self._push(neighbor)

        self._discard_visited()
        return self._current

    def terminate(self) -> None:
        """Stop the traversal; ``finished()`` becomes True."""
        self._queue.clear()

    @property
    def visited(self) -> frozenset:
        return frozenset(self._visited)

    @property
    def n_visited(self) -> int:
        return len(self._visited)

    def __iter__(self) -> Iterator[Node]:
        while not self.finished():
            yield self.expand()
        logger.debug("Distance traversal from %s visited %d vertices",
                     self.start, len(self._visited))
