"""
Vertex functors: mapping surfels to scalars.

The distance visitor weighs surfels with any callable SCell -> float. The
usual one embeds the surfel in R^n and measures its Euclidean distance to a
fixed point:

    functor = Composer(CanonicEmbedder(ks), DistanceToPoint(EuclideanDistance(), p))
"""

from typing import Callable

import numpy as np

from .kspace import KhalimskySpace, SCell


class CanonicEmbedder:
    """
    Embed a cell at the center of its geometric realization.

    Spel 2p maps to p, a surfel maps to the center of its face. An optional
    grid step scales the result.
    """

    def __init__(self, ks: KhalimskySpace, h: float = 1.0):
        self.space = ks
        self.h = h

    def __call__(self, cell) -> np.ndarray:
        return np.asarray(cell.coords, dtype=np.float64) * (0.5 * self.h)


class EuclideanDistance:
    """Euclidean distance between two real points."""

    def __call__(self, a, b) -> float:
        return float(np.linalg.norm(np.asarray(a, dtype=np.float64) -
                                    np.asarray(b, dtype=np.float64)))


class DistanceToPoint:
    """Bind the second argument of a distance to a fixed point."""

    def __init__(self, distance: Callable, point):
        self.distance = distance
        self.point = np.asarray(point, dtype=np.float64)

    def __call__(self, x) -> float:
        return self.distance(x, self.point)


class Composer:
    """Composition x -> second(first(x))."""

    def __init__(self, first: Callable, second: Callable):
        self.first = first
        self.second = second

    def __call__(self, x):
        return self.second(self.first(x))


def make_distance_functor(ks: KhalimskySpace, source: SCell,
                          h: float = 1.0) -> Composer:
    """Euclidean distance from the embedding of ``source``, as a vertex functor."""
    embedder = CanonicEmbedder(ks, h)
    return Composer(embedder, DistanceToPoint(EuclideanDistance(), embedder(source)))
