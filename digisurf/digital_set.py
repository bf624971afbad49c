"""
Digital sets and point predicates.

A point predicate is any callable taking a digital point (tuple of ints) and
returning whether it belongs to the shape. The surface machinery only relies
on that; the classes here are the two usual providers.
"""

import logging
from typing import Callable, Iterable, Optional, Sequence, Set, Tuple

import numpy as np

from .domain import Domain, Point

logger = logging.getLogger(__name__)

PointPredicate = Callable[[Tuple[int, ...]], bool]


class DigitalSet:
    """
    Set of digital points living in a domain.

    Points outside the domain cannot be inserted. Calling the set on a point
    tests membership, so a DigitalSet is a point predicate.
    """

    def __init__(self, domain: Domain, points: Iterable[Sequence[int]] = ()):
        self.domain = domain
        self._points: Set[Point] = set()
        for p in points:
            self.insert(p)

    def insert(self, point: Sequence[int]) -> None:
        point = tuple(int(x) for x in point)
        if not self.domain.contains(point):
            raise ValueError(f"Point {point} lies outside the domain")
        self._points.add(point)

    def __contains__(self, point) -> bool:
        return tuple(point) in self._points

    def __call__(self, point) -> bool:
        return tuple(point) in self._points

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def to_mask(self) -> np.ndarray:
        """Boolean array over the domain, True on points of the set."""
        mask = np.zeros(self.domain.shape, dtype=bool)
        for p in self._points:
            mask[self.domain.index_of(p)] = True
        return mask

    @classmethod
    def from_image(cls, image: np.ndarray, min_t: float, max_t: float,
                   lower: Optional[Sequence[int]] = None) -> 'DigitalSet':
        """
        Points whose image value I(p) satisfies min_t <= I(p) <= max_t.

        Args:
            image: nD array indexed by point - lower
            min_t, max_t: inclusive threshold window
            lower: digital point of image[0, ..., 0] (default: origin)
        """
        image = np.asarray(image)
        domain = Domain.from_shape(image.shape, lower)
        mask = (image >= min_t) & (image <= max_t)
        offset = np.array(domain.lower_bound, dtype=np.int64)
        points = [tuple(int(x) for x in idx) for idx in np.argwhere(mask) + offset]
        logger.debug("Digital set from image: %d of %d points in [%s, %s]",
                     len(points), domain.size, min_t, max_t)
        return cls(domain, points)


class ImagePredicate:
    """
    Threshold-window predicate read directly from an image array.

    Points outside the image domain are outside the shape.
    """

    def __init__(self, image: np.ndarray, min_t: float, max_t: float,
                 lower: Optional[Sequence[int]] = None):
        image = np.asarray(image)
        self.domain = Domain.from_shape(image.shape, lower)
        self.min_t = min_t
        self.max_t = max_t
        self._mask = (image >= min_t) & (image <= max_t)

    def __call__(self, point) -> bool:
        if not self.domain.contains(point):
            return False
        return bool(self._mask[self.domain.index_of(point)])

    def to_mask(self) -> np.ndarray:
        return self._mask.copy()

    @property
    def n_points(self) -> int:
        return int(self._mask.sum())


def sample_predicate(domain: Domain, predicate: PointPredicate) -> np.ndarray:
    """
    Evaluate a predicate on every point of a domain.

    Returns:
        Boolean array of shape ``domain.shape``
    """
    if domain.is_empty:
        return np.zeros(tuple(max(n, 0) for n in domain.shape), dtype=bool)
    values = np.fromiter((bool(predicate(p)) for p in domain.points()),
                         dtype=bool, count=domain.size)
    return values.reshape(domain.shape)
