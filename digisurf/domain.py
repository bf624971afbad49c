"""
Integer domains for digital images and digital sets.

A domain is the axis-aligned box of digital points ``lower_bound..upper_bound``
(both inclusive) that an image or a digital set lives in.
"""

import itertools
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

import numpy as np

Point = Tuple[int, ...]


@dataclass(frozen=True)
class Domain:
    """nD axis-aligned box of digital points, bounds inclusive."""
    lower_bound: Point
    upper_bound: Point

    def __post_init__(self):
        lower = tuple(int(x) for x in self.lower_bound)
        upper = tuple(int(x) for x in self.upper_bound)
        if len(lower) != len(upper):
            raise ValueError(f"Bounds of different dimensions: {lower} and {upper}")
        object.__setattr__(self, "lower_bound", lower)
        object.__setattr__(self, "upper_bound", upper)

    @classmethod
    def from_shape(cls, shape: Sequence[int],
                   lower_bound: Sequence[int] = None) -> 'Domain':
        """Domain of an array of the given shape whose first element sits at lower_bound."""
        if lower_bound is None:
            lower_bound = (0,) * len(shape)
        upper = tuple(int(lo) + int(n) - 1 for lo, n in zip(lower_bound, shape))
        return cls(tuple(lower_bound), upper)

    @property
    def dimension(self) -> int:
        return len(self.lower_bound)

    @property
    def shape(self) -> Tuple[int, ...]:
        """Number of points along each axis."""
        return tuple(hi - lo + 1 for lo, hi in zip(self.lower_bound, self.upper_bound))

    @property
    def size(self) -> int:
        """Total number of points (0 for an empty domain)."""
        if self.is_empty:
            return 0
        return int(np.prod(self.shape))

    @property
    def is_empty(self) -> bool:
        return any(n <= 0 for n in self.shape)

    @property
    def center(self) -> np.ndarray:
        """Real-valued center of the box."""
        return (np.array(self.lower_bound, dtype=np.float64) +
                np.array(self.upper_bound, dtype=np.float64)) / 2

    def contains(self, point: Sequence[int]) -> bool:
        """Check if a digital point lies inside the domain."""
        return all(lo <= x <= hi for x, lo, hi
                   in zip(point, self.lower_bound, self.upper_bound))

    def __contains__(self, point) -> bool:
        return self.contains(point)

    def points(self) -> Iterator[Point]:
        """Iterate over all points, last axis varying fastest (numpy C order)."""
        ranges = [range(lo, hi + 1) for lo, hi in zip(self.lower_bound, self.upper_bound)]
        return itertools.product(*ranges)

    def index_of(self, point: Sequence[int]) -> Tuple[int, ...]:
        """Array index of a point, for arrays laid out over this domain."""
        return tuple(x - lo for x, lo in zip(point, self.lower_bound))
