"""
Surfel adjacency policy.

When tracking a boundary in dimension >= 2, the surfel following a given one
along a tracking direction is ambiguous when the two spels touching the edge
diagonally disagree with the two others. The policy tells, for each pair of
directions, whether the interior or the exterior candidate is chosen.
"""

import numpy as np


class SurfelAdjacency:
    """
    Table of interior/exterior choices indexed by (tracking dir, orthogonal dir).

    Args:
        dimension: dimension of the space
        interior: default choice for every pair of directions
    """

    def __init__(self, dimension: int, interior: bool = True):
        if dimension < 1:
            raise ValueError(f"Invalid dimension: {dimension}")
        self.dimension = dimension
        self._table = np.full((dimension, dimension), bool(interior), dtype=bool)

    def get_adjacency(self, i: int, j: int) -> bool:
        """True if the interior candidate is followed for tracking dir i, orthogonal dir j."""
        return bool(self._table[i, j])

    def set_adjacency(self, i: int, j: int, interior: bool) -> None:
        """Refine the choice for one pair of distinct directions."""
        if i == j:
            raise ValueError("Tracking and orthogonal directions must differ")
        self._table[i, j] = bool(interior)

    def reverse(self) -> 'SurfelAdjacency':
        """Complementary policy, for tracking the boundary of the complement."""
        other = SurfelAdjacency(self.dimension)
        other._table = ~self._table
        return other

    def __eq__(self, other) -> bool:
        if not isinstance(other, SurfelAdjacency):
            return NotImplemented
        return (self.dimension == other.dimension and
                bool(np.array_equal(self._table, other._table)))

    def __repr__(self) -> str:
        if self._table.all():
            return f"SurfelAdjacency({self.dimension}, interior=True)"
        if not self._table.any():
            return f"SurfelAdjacency({self.dimension}, interior=False)"
        return f"SurfelAdjacency({self.dimension}, table={self._table.astype(int).tolist()})"
