"""
digisurf - Digital surface tracking and distance traversal.

This package provides tools for extracting the boundary of shapes defined on
Khalimsky (cellular grid) spaces: seed search, exhaustive boundary tracking
and distance-ordered traversal of digital surfaces.
"""

from .kspace import (
    Cell,
    SCell,
    KhalimskySpace,
)
from .domain import Domain
from .adjacency import SurfelAdjacency
from .digital_set import (
    DigitalSet,
    ImagePredicate,
    sample_predicate,
)
from .surface import ImplicitDigitalSurface
from .surfaces import (
    find_a_bel,
    iter_boundary,
    track_boundary,
    make_boundary,
    boundary_components,
)
from .visitor import DistanceVisitor, Node
from .functors import (
    CanonicEmbedder,
    EuclideanDistance,
    DistanceToPoint,
    Composer,
    make_distance_functor,
)
from .estimation import (
    ImplicitShape,
    ImplicitBall,
    ShapeNormalFunctor,
    ShapeMeanCurvatureFunctor,
    ShapeGaussianCurvatureFunctor,
    TrueLocalEstimator,
)
from .surface_features import (
    SurfaceFeatures,
    extract_surface_features,
    count_shape_components,
    print_feature_summary,
)
from .volume_io import load_volume, load_vol, save_vol, load_predicate
from .config import TrackingConfig, DEFAULT_CONFIG, load_config
from .errors import (
    DigitalSurfaceError,
    BelNotFoundError,
    InvalidSurfelError,
    TraversalStateError,
    EstimatorStateError,
)

__version__ = "0.1.0"
__all__ = [
    # Cellular grid space
    "Cell",
    "SCell",
    "KhalimskySpace",
    "Domain",
    "SurfelAdjacency",
    # Digital sets
    "DigitalSet",
    "ImagePredicate",
    "sample_predicate",
    # Surfaces and traversals
    "ImplicitDigitalSurface",
    "find_a_bel",
    "iter_boundary",
    "track_boundary",
    "make_boundary",
    "boundary_components",
    "DistanceVisitor",
    "Node",
    # Functors
    "CanonicEmbedder",
    "EuclideanDistance",
    "DistanceToPoint",
    "Composer",
    "make_distance_functor",
    # Estimation
    "ImplicitShape",
    "ImplicitBall",
    "ShapeNormalFunctor",
    "ShapeMeanCurvatureFunctor",
    "ShapeGaussianCurvatureFunctor",
    "TrueLocalEstimator",
    # Surface features
    "SurfaceFeatures",
    "extract_surface_features",
    "count_shape_components",
    "print_feature_summary",
    # I/O and configuration
    "load_volume",
    "load_vol",
    "save_vol",
    "load_predicate",
    "TrackingConfig",
    "DEFAULT_CONFIG",
    "load_config",
    # Errors
    "DigitalSurfaceError",
    "BelNotFoundError",
    "InvalidSurfelError",
    "TraversalStateError",
    "EstimatorStateError",
]
