"""
Boundary extraction services: seed search, tracking and brute-force listing.

    find_a_bel          -> one bel of the shape, by bounded random search
    iter_boundary       -> lazily tracks the component of a surface's seed
    track_boundary      -> the whole component as a set
    make_boundary       -> every bel of the domain, by exhaustive scan
    boundary_components -> all components, largest first
"""

import logging
from collections import deque
from typing import Iterator, List, Set

import numpy as np

from .adjacency import SurfelAdjacency
from .digital_set import PointPredicate, sample_predicate
from .errors import BelNotFoundError
from .kspace import KhalimskySpace, SCell
from .surface import ImplicitDigitalSurface

logger = logging.getLogger(__name__)


def find_a_bel(ks: KhalimskySpace, predicate: PointPredicate,
               max_trials: int = 1000, rng=None) -> SCell:
    """
    Find one boundary element of the shape described by a predicate.

    A first spel is drawn at random in the domain, then up to ``max_trials``
    other spels until one of them disagrees with the first. The segment
    between both is walked axis by axis and the surfel at the first change
    is returned, oriented with its inside spel direct.

    Args:
        ks: Khalimsky space of the shape
        predicate: point predicate
        max_trials: budget of random draws
        rng: numpy Generator, integer seed or None

    Returns:
        A bel of the shape

    Raises:
        BelNotFoundError: if no disagreeing spel was drawn within the budget
            (always the case for an empty or full shape)
    """
    rng = np.random.default_rng(rng)
    lower = np.array(ks.lower_bound, dtype=np.int64)
    upper = np.array(ks.upper_bound, dtype=np.int64)

    def draw():
        return tuple(int(x) for x in rng.integers(lower, upper + 1))

    x1 = draw()
    in_x1 = bool(predicate(x1))
    x2 = None
    for _ in range(max_trials):
        candidate = draw()
        if bool(predicate(candidate)) != in_x1:
            x2 = candidate
            break

    if x2 is None:
        logger.warning("No bel found after %d trials", max_trials)
        raise BelNotFoundError(f"No boundary element found after {max_trials} trials")

    current = list(x1)
    for k in range(ks.dimension):
        step = 1 if x2[k] > current[k] else -1
        while current[k] != x2[k]:
            following = list(current)
            following[k] += step
            if bool(predicate(tuple(following))) != in_x1:
                coords = [2 * x for x in current]
                coords[k] += step
                # The inside spel is on the +step side iff we walk out of the outside
                return ks.s_bel(coords, (step > 0) != in_x1)
            current = following

    # x1 and x2 disagree, so the walk always meets a change
    raise BelNotFoundError(f"Predicate is not stable between {x1} and {x2}")


def iter_boundary(surface: ImplicitDigitalSurface) -> Iterator[SCell]:
    """
    Yield each bel of the component containing the surface seed exactly once.

    The frontier is a FIFO queue; emission order is not part of the contract.
    There is no size limit: an unbounded shape yields an unbounded stream.
    """
    visited: Set[SCell] = set()
    frontier = deque([surface.seed])

    while frontier:
        surfel = frontier.popleft()
        if surfel in visited:
            continue
        visited.add(surfel)
        yield surfel

        for neighbor in surface.write_neighbors(surfel):
            if neighbor not in visited:
                frontier.append(neighbor)


def track_boundary(ks: KhalimskySpace, adjacency: SurfelAdjacency,
                   predicate: PointPredicate, bel: SCell) -> Set[SCell]:
    """
    Track the boundary component containing a bel.

    Returns:
        Set of all bels of the component
    """
    surface = ImplicitDigitalSurface(ks, predicate, adjacency, bel)
    boundary = set(iter_boundary(surface))
    logger.debug("Tracked %d surfels from %s", len(boundary), bel)
    return boundary


def _predicate_mask(ks: KhalimskySpace, predicate: PointPredicate) -> np.ndarray:
    domain = ks.domain
    if getattr(predicate, "domain", None) == domain and hasattr(predicate, "to_mask"):
        return predicate.to_mask()
    return sample_predicate(domain, predicate)


def make_boundary(ks: KhalimskySpace, predicate: PointPredicate) -> Set[SCell]:
    """
    List every bel of the shape by scanning the whole domain.

    Spels outside the domain count as outside; in a closed space this yields
    the faces on the domain border too.

    Returns:
        Set of oriented bels (inside spel direct)
    """
    mask = _predicate_mask(ks, predicate)
    pad = 1 if ks.closed else 0
    if pad:
        mask = np.pad(mask, 1, mode="constant", constant_values=False)
    origin = np.array(ks.lower_bound, dtype=np.int64) - pad
    dim = ks.dimension

    bels = set()
    for k in range(dim):
        lo = mask[tuple(slice(None, -1) if i == k else slice(None) for i in range(dim))]
        hi = mask[tuple(slice(1, None) if i == k else slice(None) for i in range(dim))]
        changes = lo != hi
        inside_up = hi[changes]

        for idx, up in zip(np.argwhere(changes), inside_up):
            coords = [2 * int(x) for x in idx + origin]
            coords[k] += 1
            bels.add(ks.s_bel(coords, bool(up)))

    logger.debug("Found %d bels by exhaustive scan", len(bels))
    return bels


def boundary_components(ks: KhalimskySpace, adjacency: SurfelAdjacency,
                        predicate: PointPredicate) -> List[Set[SCell]]:
    """
    Split the boundary of a shape into its connected components.

    Returns:
        List of sets of bels, sorted by size (largest first)
    """
    components = []
    assigned: Set[SCell] = set()

    for bel in sorted(make_boundary(ks, predicate)):
        if bel in assigned:
            continue
        component = track_boundary(ks, adjacency, predicate, bel)
        assigned |= component
        components.append(component)

    components.sort(key=len, reverse=True)
    return components
