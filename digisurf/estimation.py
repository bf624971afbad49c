"""
True local estimators on digital surfaces.

When a digital shape is the digitization of a known continuous shape, the
exact value of a geometric quantity (normal, curvatures) can be attached to
every surfel: embed the surfel, optionally project it onto the continuous
surface, and evaluate the quantity there. These "true" values are the
reference discrete estimators are compared against.
"""

import logging
from typing import Iterable, Optional

import numpy as np

from .errors import EstimatorStateError
from .functors import CanonicEmbedder
from .kspace import KhalimskySpace, SCell

logger = logging.getLogger(__name__)


class ImplicitShape:
    """
    Continuous shape given by an implicit function, negative inside.

    Subclasses implement ``__call__``; the gradient defaults to central
    differences.
    """

    gradient_step = 1e-6

    def __call__(self, p) -> float:
        raise NotImplementedError

    def gradient(self, p) -> np.ndarray:
        p = np.asarray(p, dtype=np.float64)
        grad = np.zeros_like(p)
        for k in range(len(p)):
            dp = np.zeros_like(p)
            dp[k] = self.gradient_step
            grad[k] = (self(p + dp) - self(p - dp)) / (2 * self.gradient_step)
        return grad

    def is_inside(self, p) -> bool:
        return self(p) <= 0

    def nearest_point(self, p, accuracy: float = 0.1, max_iter: int = 20,
                      gamma: float = 1.0) -> np.ndarray:
        """
        Project a point onto the zero level set by damped Newton steps.

        Args:
            p: starting point
            accuracy: stop when |f(q)| < accuracy
            max_iter: maximum number of steps
            gamma: step coefficient (1 is a full Newton step)
        """
        q = np.array(p, dtype=np.float64)
        for _ in range(max_iter):
            value = self(q)
            if abs(value) < accuracy:
                break
            grad = self.gradient(q)
            norm2 = float(np.dot(grad, grad))
            if norm2 == 0.0:
                break
            q = q - gamma * value * grad / norm2
        return q

    def as_predicate(self, h: float = 1.0):
        """Gauss digitization with grid step h: point p is inside iff f(h p) <= 0."""
        def predicate(point) -> bool:
            return self(np.asarray(point, dtype=np.float64) * h) <= 0
        return predicate


class ImplicitBall(ImplicitShape):
    """Euclidean ball, f(p) = |p - c|^2 - r^2."""

    def __init__(self, center, radius: float):
        if radius <= 0:
            raise ValueError(f"Ball radius must be positive, got {radius}")
        self.center = np.asarray(center, dtype=np.float64)
        self.radius = float(radius)

    @property
    def dimension(self) -> int:
        return len(self.center)

    def __call__(self, p) -> float:
        d = np.asarray(p, dtype=np.float64) - self.center
        return float(np.dot(d, d) - self.radius ** 2)

    def gradient(self, p) -> np.ndarray:
        return 2 * (np.asarray(p, dtype=np.float64) - self.center)

    def normal(self, p) -> np.ndarray:
        """Outward unit normal of the level set through p."""
        d = np.asarray(p, dtype=np.float64) - self.center
        norm = np.linalg.norm(d)
        if norm == 0:
            return np.zeros_like(d)
        return d / norm

    def mean_curvature(self, p) -> float:
        return 1.0 / self.radius

    def gaussian_curvature(self, p) -> float:
        return self.radius ** -(self.dimension - 1)


class ShapeGeometricFunctor:
    """Geometric quantity read from an attached shape at a real point."""

    def __init__(self, shape: Optional[ImplicitShape] = None):
        self.shape = shape

    def attach(self, shape: ImplicitShape) -> None:
        self.shape = shape

    def __call__(self, p):
        if self.shape is None:
            raise EstimatorStateError(f"{type(self).__name__} has no attached shape")
        return self.quantity(np.asarray(p, dtype=np.float64))

    def quantity(self, p):
        raise NotImplementedError


class ShapeNormalFunctor(ShapeGeometricFunctor):
    def quantity(self, p) -> np.ndarray:
        return self.shape.normal(p)


class ShapeMeanCurvatureFunctor(ShapeGeometricFunctor):
    def quantity(self, p) -> float:
        return self.shape.mean_curvature(p)


class ShapeGaussianCurvatureFunctor(ShapeGeometricFunctor):
    def quantity(self, p) -> float:
        return self.shape.gaussian_curvature(p)


class TrueLocalEstimator:
    """
    Evaluate a shape quantity at the (projected) embedding of surfels.

    Usage:
        estimator = TrueLocalEstimator(ks, ShapeNormalFunctor())
        estimator.attach(ball)
        estimator.init(h=0.5, max_iter=20, accuracy=1e-6)
        normals = estimator.eval_many(surfels)

    Args:
        ks: Khalimsky space of the surfels
        functor: geometric functor, attached to the shape by ``attach``
    """

    def __init__(self, ks: KhalimskySpace, functor: ShapeGeometricFunctor):
        self.space = ks
        self.functor = functor
        self.shape: Optional[ImplicitShape] = None
        self.h: Optional[float] = None
        self.max_iter = 0
        self.accuracy = 0.1
        self.gamma = 1.0
        self._embedder: Optional[CanonicEmbedder] = None

    def attach(self, shape: ImplicitShape) -> None:
        self.shape = shape
        self.functor.attach(shape)

    def init(self, h: float, max_iter: int = 0, accuracy: float = 0.1,
             gamma: float = 1.0) -> None:
        """
        Set the grid step and the projection parameters.

        Args:
            h: grid step of the digitization
            max_iter: projection steps onto the shape (0: no projection)
            accuracy: projection stops when |f| < accuracy
            gamma: projection step coefficient
        """
        if h <= 0:
            raise ValueError(f"Grid step must be positive, got {h}")
        self.h = h
        self.max_iter = max_iter
        self.accuracy = accuracy
        self.gamma = gamma
        self._embedder = CanonicEmbedder(self.space, h)

    @property
    def is_valid(self) -> bool:
        return self.shape is not None and self.h is not None

    def eval(self, surfel: SCell):
        if not self.is_valid:
            raise EstimatorStateError("Estimator needs attach() and init() before eval()")
        p = self._embedder(surfel)
        if self.max_iter > 0:
            p = self.shape.nearest_point(p, self.accuracy, self.max_iter, self.gamma)
        return self.functor(p)

    def eval_many(self, surfels: Iterable[SCell]) -> np.ndarray:
        values = [self.eval(s) for s in surfels]
        logger.debug("Evaluated %d surfels", len(values))
        return np.asarray(values)
