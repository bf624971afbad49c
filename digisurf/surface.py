"""
Implicit digital surface container.

The boundary of a shape given by a point predicate is never stored: the
container only knows a seed bel and computes, on demand, the bels adjacent to
any bel of the same connected component. This is the single primitive the
tracker and the distance visitor need.
"""

import copy
import logging
from typing import Iterator, List, Optional, Tuple

from .adjacency import SurfelAdjacency
from .digital_set import PointPredicate
from .errors import InvalidSurfelError
from .kspace import KhalimskySpace, SCell, shifted

logger = logging.getLogger(__name__)

# How the adjacent bel was reached from the current one
FOLLOW_INNER = 1   # turn around the inner spel
FOLLOW_LINEL = 2   # translate along the tracking direction
FOLLOW_OUTER = 3   # turn around the outer spel


class ImplicitDigitalSurface:
    """
    Connected boundary component of a shape, defined by a predicate.

    The space and the predicate are referenced, not copied, and must outlive
    the container. Pass ``clone=True`` to keep a private deep copy of the
    predicate instead.

    Args:
        ks: Khalimsky space the shape lives in
        predicate: point predicate telling if a spel is inside the shape
        adjacency: surfel adjacency policy
        seed: a bel of the component, oriented with its inside spel direct
        clone: own a copy of the predicate
    """

    def __init__(self, ks: KhalimskySpace, predicate: PointPredicate,
                 adjacency: SurfelAdjacency, seed: SCell, clone: bool = False):
        if adjacency.dimension != ks.dimension:
            raise ValueError(f"Adjacency of dimension {adjacency.dimension} "
                             f"for a space of dimension {ks.dimension}")
        self.space = ks
        self.predicate = copy.deepcopy(predicate) if clone else predicate
        self.adjacency = adjacency
        self._domain = ks.domain

        if not ks.s_is_surfel(seed) or not self.is_bel(seed):
            raise InvalidSurfelError(f"Seed {seed} is not a bel of the shape")
        self.seed = seed

    # ----------------------- Spel classification ---------------------------

    def is_inside(self, spel) -> bool:
        """Tell if a spel belongs to the shape; spels outside the space never do."""
        return self._is_inside_kcoords(spel.coords)

    def _is_inside_kcoords(self, kcoords) -> bool:
        point = tuple(x // 2 for x in kcoords)
        if not self._domain.contains(point):
            return False
        return bool(self.predicate(point))

    def inner_spel(self, surfel: SCell) -> SCell:
        return self.space.s_direct_incident(surfel, self.space.s_orth_dir(surfel))

    def outer_spel(self, surfel: SCell) -> SCell:
        return self.space.s_indirect_incident(surfel, self.space.s_orth_dir(surfel))

    def is_bel(self, surfel: SCell) -> bool:
        """True if the direct spel is inside and the indirect one outside."""
        return self.is_inside(self.inner_spel(surfel)) and \
            not self.is_inside(self.outer_spel(surfel))

    # ----------------------- Adjacency -------------------------------------

    def adjacent_surfel(self, surfel: SCell, track_dir: int,
                        positive: bool) -> Tuple[SCell, int]:
        """
        Bel following ``surfel`` along ``track_dir``.

        Args:
            surfel: a bel of the surface
            track_dir: open direction of the surfel to move along
            positive: move towards increasing coordinates

        Returns:
            (adjacent bel, FOLLOW_INNER | FOLLOW_LINEL | FOLLOW_OUTER)
        """
        ks = self.space
        orth_dir = ks.s_orth_dir(surfel)
        inner_up = ks.s_direct(surfel, orth_dir)
        step = 1 if positive else -1

        inner = shifted(surfel.coords, orth_dir, 1 if inner_up else -1)
        outer = shifted(surfel.coords, orth_dir, -1 if inner_up else 1)
        inner_adj = shifted(inner, track_dir, 2 * step)
        outer_adj = shifted(outer, track_dir, 2 * step)

        # inner_adj outside and outer_adj inside is the ambiguous case:
        # interior links the two inside spels, exterior separates them
        if self.adjacency.get_adjacency(track_dir, orth_dir):
            if self._is_inside_kcoords(outer_adj):
                code = FOLLOW_OUTER
            elif self._is_inside_kcoords(inner_adj):
                code = FOLLOW_LINEL
            else:
                code = FOLLOW_INNER
        else:
            if not self._is_inside_kcoords(inner_adj):
                code = FOLLOW_INNER
            elif self._is_inside_kcoords(outer_adj):
                code = FOLLOW_OUTER
            else:
                code = FOLLOW_LINEL

        if code == FOLLOW_INNER:
            adj = ks.s_bel(shifted(inner, track_dir, step), not positive)
        elif code == FOLLOW_OUTER:
            adj = ks.s_bel(shifted(outer, track_dir, step), positive)
        else:
            adj = SCell(shifted(surfel.coords, track_dir, 2 * step), surfel.positive)
        return adj, code

    def write_neighbors(self, surfel: SCell,
                        track_dir: Optional[int] = None) -> List[SCell]:
        """
        Bels adjacent to ``surfel`` on the same boundary component.

        Directions are scanned in increasing order, the positive move before
        the negative one, so the result is deterministic. Neighbors that fall
        outside the space (open spaces only) are dropped.

        Args:
            surfel: a bel of the surface
            track_dir: restrict to this tracking direction (default: all)
        """
        ks = self.space
        dirs = ks.s_dirs(surfel) if track_dir is None else [track_dir]
        neighbors = []
        for k in dirs:
            for positive in (True, False):
                adj, _ = self.adjacent_surfel(surfel, k, positive)
                if ks.s_is_inside(adj):
                    neighbors.append(adj)
        return neighbors

    def degree(self, surfel: SCell) -> int:
        return len(self.write_neighbors(surfel))

    @property
    def best_capacity(self) -> int:
        """Upper bound on the number of neighbors of a surfel."""
        return 2 * (self.space.dimension - 1)

    # ----------------------- Whole-surface services ------------------------

    def __iter__(self) -> Iterator[SCell]:
        """Iterate over every bel of the component by tracking from the seed."""
        from .surfaces import iter_boundary
        return iter_boundary(self)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"ImplicitDigitalSurface(space={self.space!r}, seed={self.seed})"

