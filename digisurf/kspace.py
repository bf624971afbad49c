"""
Cellular grid space (Khalimsky space) of arbitrary dimension.

Cells of every dimension are addressed with integer Khalimsky coordinates.
A coordinate is *open* when it is even and *closed* when it is odd, so that:

    - a spel (voxel) has all coordinates even; digital point p <-> cell 2p
    - a surfel has exactly one odd coordinate, its orthogonal direction
    - a pointel has all coordinates odd

Signed cells carry an orientation. The orientation of a cell along an axis k
is *direct* when it points towards increasing coordinates:

    direct(c, k) = sign(c) XOR (number of open axes before k is odd)

The incident cell met in the direct orientation is returned with a positive
sign, the other one with a negative sign. Boundary surfels built by this
package are always oriented so that their direct incident spel is the one
inside the shape.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .domain import Domain, Point


@dataclass(frozen=True, order=True)
class Cell:
    """Unsigned cell given by its Khalimsky coordinates."""
    coords: Tuple[int, ...]


@dataclass(frozen=True, order=True)
class SCell:
    """Signed cell: Khalimsky coordinates plus an orientation."""
    coords: Tuple[int, ...]
    positive: bool = True


def shifted(coords: Tuple[int, ...], k: int, delta: int) -> Tuple[int, ...]:
    out = list(coords)
    out[k] += delta
    return tuple(out)


class KhalimskySpace:
    """
    Bounded nD Khalimsky space built over a digital domain.

    The space is empty until ``init`` succeeds and read-only afterwards. Cells
    built from user coordinates (``u_cell``, ``s_cell``, ``u_spel``, ``s_spel``)
    are checked against the bounds; incidence and adjacency arithmetic is not,
    use ``u_is_inside`` on its results.

    When ``closed`` is True the space also holds the cells bounding the
    outermost spels, so that shapes touching the domain border still have a
    closed boundary.
    """

    POS = True
    NEG = False

    def __init__(self, lower: Optional[Sequence[int]] = None,
                 upper: Optional[Sequence[int]] = None,
                 closed: bool = True):
        self._lower: Optional[Point] = None
        self._upper: Optional[Point] = None
        self._closed = closed
        self._min_kcoords: Optional[Point] = None
        self._max_kcoords: Optional[Point] = None

        if lower is not None or upper is not None:
            if not self.init(lower, upper, closed):
                raise ValueError(f"Invalid Khalimsky space bounds: {lower} .. {upper}")

    def init(self, lower: Sequence[int], upper: Sequence[int],
             closed: bool = True) -> bool:
        """
        Set the bounds of the space.

        Args:
            lower: lowest digital point of the domain
            upper: highest digital point of the domain
            closed: whether the bounding cells belong to the space

        Returns:
            False if the bounds are missing, of different dimensions, of
            dimension 0 or inverted; True otherwise.
        """
        if lower is None or upper is None:
            return False
        lower = tuple(int(x) for x in lower)
        upper = tuple(int(x) for x in upper)
        if len(lower) != len(upper) or len(lower) < 1:
            return False
        if any(lo > hi for lo, hi in zip(lower, upper)):
            return False

        margin = 1 if closed else 0
        self._lower = lower
        self._upper = upper
        self._closed = closed
        self._min_kcoords = tuple(2 * lo - margin for lo in lower)
        self._max_kcoords = tuple(2 * hi + margin for hi in upper)
        return True

    # ----------------------- Space properties ------------------------------

    @property
    def is_valid(self) -> bool:
        return self._lower is not None

    @property
    def dimension(self) -> int:
        return len(self._lower)

    @property
    def lower_bound(self) -> Point:
        return self._lower

    @property
    def upper_bound(self) -> Point:
        return self._upper

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def domain(self) -> Domain:
        """Digital domain of the spels of the space."""
        return Domain(self._lower, self._upper)

    def size(self, k: int) -> int:
        """Number of spels along axis k."""
        return self._upper[k] - self._lower[k] + 1

    def min_kcoord(self, k: int) -> int:
        return self._min_kcoords[k]

    def max_kcoord(self, k: int) -> int:
        return self._max_kcoords[k]

    # ----------------------- Cell creation ---------------------------------

    def u_cell(self, coords: Sequence[int]) -> Cell:
        """Unsigned cell from Khalimsky coordinates, checked against the bounds."""
        cell = Cell(tuple(int(x) for x in coords))
        if not self.u_is_inside(cell):
            raise ValueError(f"Cell {cell.coords} lies outside the space")
        return cell

    def s_cell(self, coords: Sequence[int], positive: bool = True) -> SCell:
        """Signed cell from Khalimsky coordinates, checked against the bounds."""
        return self.signs(self.u_cell(coords), positive)

    def u_spel(self, point: Sequence[int]) -> Cell:
        """Spel of a digital point."""
        return self.u_cell([2 * x for x in point])

    def s_spel(self, point: Sequence[int], positive: bool = True) -> SCell:
        return self.signs(self.u_spel(point), positive)

    def s_bel(self, coords: Sequence[int], inner_positive: bool) -> SCell:
        """
        Oriented surfel whose inside lies towards increasing coordinates
        along its orthogonal direction iff ``inner_positive``.

        Not checked against the bounds: trackers build candidates just past
        the border of an open space and filter them with ``s_is_inside``.
        """
        scell = SCell(tuple(coords), True)
        if self.s_direct(scell, self.s_orth_dir(scell)) != inner_positive:
            scell = SCell(scell.coords, False)
        return scell

    # ----------------------- Sign services ---------------------------------

    @staticmethod
    def signs(cell: Cell, positive: bool = True) -> SCell:
        return SCell(cell.coords, positive)

    @staticmethod
    def unsigns(scell: SCell) -> Cell:
        """Strip the orientation of a signed cell."""
        return Cell(scell.coords)

    @staticmethod
    def s_opp(scell: SCell) -> SCell:
        """Same cell with the opposite orientation."""
        return SCell(scell.coords, not scell.positive)

    # ----------------------- Read accessors --------------------------------

    @staticmethod
    def u_coords(cell) -> Point:
        """Digital point of a cell (floor of the half Khalimsky coordinates)."""
        return tuple(x // 2 for x in cell.coords)

    s_coords = u_coords

    @staticmethod
    def u_is_open(cell, k: int) -> bool:
        return cell.coords[k] % 2 == 0

    @staticmethod
    def u_dim(cell) -> int:
        """Topological dimension of a cell: its number of open coordinates."""
        return sum(1 for x in cell.coords if x % 2 == 0)

    s_dim = u_dim

    def u_is_spel(self, cell) -> bool:
        return self.u_dim(cell) == len(cell.coords)

    def u_is_surfel(self, cell) -> bool:
        return self.u_dim(cell) == len(cell.coords) - 1

    s_is_surfel = u_is_surfel

    @staticmethod
    def s_dirs(cell) -> List[int]:
        """Open axes of a cell, i.e. the directions along which it extends."""
        return [k for k, x in enumerate(cell.coords) if x % 2 == 0]

    u_dirs = s_dirs

    @staticmethod
    def s_orth_dirs(cell) -> List[int]:
        return [k for k, x in enumerate(cell.coords) if x % 2 != 0]

    def s_orth_dir(self, surfel) -> int:
        """Orthogonal direction of a surfel."""
        orth = self.s_orth_dirs(surfel)
        if len(orth) != 1:
            raise ValueError(f"Cell {surfel.coords} is not a surfel")
        return orth[0]

    def u_is_inside(self, cell) -> bool:
        """Check if a cell lies within the Khalimsky bounds of the space."""
        return all(lo <= x <= hi for x, lo, hi
                   in zip(cell.coords, self._min_kcoords, self._max_kcoords))

    s_is_inside = u_is_inside

    # ----------------------- Incidence and adjacency -----------------------

    @staticmethod
    def s_direct(scell: SCell, k: int) -> bool:
        """True if the direct orientation of the cell along k points to +k."""
        direct = scell.positive
        for i in range(k):
            if scell.coords[i] % 2 == 0:
                direct = not direct
        return direct

    def s_incident(self, scell: SCell, k: int, up: bool) -> SCell:
        """Incident cell along k, towards +k if ``up``, with induced sign (unchecked)."""
        coords = shifted(scell.coords, k, 1 if up else -1)
        return SCell(coords, up == self.s_direct(scell, k))

    def s_direct_incident(self, scell: SCell, k: int) -> SCell:
        return self.s_incident(scell, k, self.s_direct(scell, k))

    def s_indirect_incident(self, scell: SCell, k: int) -> SCell:
        return self.s_incident(scell, k, not self.s_direct(scell, k))

    @staticmethod
    def u_incident(cell: Cell, k: int, up: bool) -> Cell:
        return Cell(shifted(cell.coords, k, 1 if up else -1))

    @staticmethod
    def s_adjacent(scell: SCell, k: int, up: bool) -> SCell:
        """Cell of the same type one step away along axis k, same sign (unchecked)."""
        return SCell(shifted(scell.coords, k, 2 if up else -2), scell.positive)

    @staticmethod
    def u_adjacent(cell: Cell, k: int, up: bool) -> Cell:
        return Cell(shifted(cell.coords, k, 2 if up else -2))

    def u_proper_neighborhood(self, cell: Cell) -> List[Cell]:
        """Adjacent cells along every axis that lie in the space."""
        neighbors = []
        for k in range(len(cell.coords)):
            for up in (False, True):
                neighbor = self.u_adjacent(cell, k, up)
                if self.u_is_inside(neighbor):
                    neighbors.append(neighbor)
        return neighbors

    def spels_of_surfel(self, surfel: SCell) -> Tuple[SCell, SCell]:
        """
        Decompose a surfel into its two incident spels.

        Returns:
            (direct spel, indirect spel), signed positive and negative
            respectively. For a bel the first one is the inside spel.
        """
        k = self.s_orth_dir(surfel)
        return self.s_direct_incident(surfel, k), self.s_indirect_incident(surfel, k)

    def __repr__(self) -> str:
        if not self.is_valid:
            return "KhalimskySpace(<uninitialized>)"
        return (f"KhalimskySpace(lower={self._lower}, upper={self._upper}, "
                f"closed={self._closed})")
