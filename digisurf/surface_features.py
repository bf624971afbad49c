"""
Feature extraction for digital surfaces.

Summarizes a set of surfels (usually one tracked boundary component, or all
of them) with geometric, orientation and connectivity statistics.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

import numpy as np
from scipy import ndimage
from scipy.spatial import ConvexHull

from .functors import CanonicEmbedder
from .kspace import KhalimskySpace, SCell

AXIS_NAMES = "xyzw"


@dataclass
class SurfaceFeatures:
    """Characterization of a digital surface."""
    # Basic geometry
    dimension: int
    n_surfels: int
    area: float  # n_surfels * h^(d-1)
    bbox_min: np.ndarray  # Bounding box of surfel centers
    bbox_max: np.ndarray
    centroid: np.ndarray
    characteristic_length: float

    # Orientation: number of surfels per outward normal direction
    normal_histogram: Dict[str, int] = field(default_factory=dict)

    # Connectivity
    # None when no boundary components were given
    n_components: Optional[int] = None
    largest_component_fraction: Optional[float] = None
    fragmentation_index: Optional[float] = None  # 1 - largest_component_fraction

    # Shape
    hull_area: Optional[float] = None
    compactness: float = 1.0  # area / convex hull area (>= 1 for staircases)
    n_shape_components: Optional[int] = None
    max_distance: Optional[float] = None

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        out = {}
        for k, v in self.__dict__.items():
            if v is None:
                continue
            out[k] = v.tolist() if isinstance(v, np.ndarray) else v
        return out


def axis_name(k: int) -> str:
    return AXIS_NAMES[k] if k < len(AXIS_NAMES) else f"x{k}"


def outward_normal_label(ks: KhalimskySpace, bel: SCell) -> str:
    """Label such as '+z' for the outward normal of an oriented bel."""
    k = ks.s_orth_dir(bel)
    # the inside spel is direct, so the outside lies the other way
    sign = "-" if ks.s_direct(bel, k) else "+"
    return f"{sign}{axis_name(k)}"


def count_shape_components(mask: np.ndarray) -> int:
    """Number of face-connected components of a binary image."""
    structure = ndimage.generate_binary_structure(mask.ndim, 1)
    _, n_components = ndimage.label(mask, structure=structure)
    return int(n_components)


def compute_hull_area(points: np.ndarray) -> Optional[float]:
    """
    Boundary measure of the convex hull of points (perimeter in 2D).

    Returns:
        None when the hull is degenerate (flat or too few points)
    """
    if points.shape[1] < 2 or len(points) <= points.shape[1]:
        return None
    try:
        hull = ConvexHull(points)
    except (RuntimeError, ValueError):
        # Qhull rejects coplanar input
        return None
    return float(hull.area)


def extract_surface_features(ks: KhalimskySpace,
                             surfels: Iterable[SCell],
                             h: float = 1.0,
                             components: Optional[List[Set[SCell]]] = None,
                             mask: Optional[np.ndarray] = None,
                             max_distance: Optional[float] = None) -> SurfaceFeatures:
    """
    Extract features of a digital surface.

    Args:
        ks: Khalimsky space of the surfels
        surfels: oriented bels of the surface
        h: grid step
        components: boundary components, for connectivity statistics
        mask: binary image of the shape, to count its components
        max_distance: largest distance reached by a distance traversal

    Returns:
        SurfaceFeatures object with all computed metrics
    """
    surfels = list(surfels)
    if not surfels:
        raise ValueError("Cannot extract features of an empty surface")

    dim = ks.dimension
    embedder = CanonicEmbedder(ks, h)
    centers = np.array([embedder(s) for s in surfels])

    bbox_min = centers.min(axis=0)
    bbox_max = centers.max(axis=0)
    extents = np.maximum(bbox_max - bbox_min, 0.0)
    nonzero = extents[extents > 1e-10]
    char_length = float(np.prod(nonzero) ** (1 / len(nonzero))) if len(nonzero) else 0.0

    area = len(surfels) * h ** (dim - 1)

    histogram: Dict[str, int] = {}
    for s in surfels:
        label = outward_normal_label(ks, s)
        histogram[label] = histogram.get(label, 0) + 1

    # Connected components
    n_components = largest_fraction = fragmentation = None
    if components:
        sizes = np.array([len(c) for c in components])
        n_components = len(components)
        largest_fraction = float(sizes.max() / sizes.sum())
        fragmentation = 1.0 - largest_fraction

    hull_area = compute_hull_area(centers)
    compactness = area / hull_area if hull_area else 1.0

    n_shape_components = count_shape_components(mask) if mask is not None else None

    return SurfaceFeatures(
        dimension=dim,
        n_surfels=len(surfels),
        area=area,
        bbox_min=bbox_min,
        bbox_max=bbox_max,
        centroid=centers.mean(axis=0),
        characteristic_length=char_length,
        normal_histogram=dict(sorted(histogram.items())),
        n_components=n_components,
        largest_component_fraction=largest_fraction,
        fragmentation_index=fragmentation,
        hull_area=hull_area,
        compactness=compactness,
        n_shape_components=n_shape_components,
        max_distance=max_distance,
    )


def print_feature_summary(features: SurfaceFeatures) -> None:
    """Print a formatted summary of surface features."""
    print("=" * 60)
    print("DIGITAL SURFACE SUMMARY")
    print("=" * 60)

    print(f"\nGeometry:")
    print(f"  Dimension: {features.dimension}")
    print(f"  Surfels: {features.n_surfels}")
    print(f"  Area: {features.area:.4f}")
    print(f"  Centroid: {np.array2string(features.centroid, precision=3)}")
    print(f"  Characteristic length: {features.characteristic_length:.4f}")

    print(f"\nOrientation:")
    for label, count in features.normal_histogram.items():
        print(f"  {label}: {count}")

    print(f"\nConnectivity:")
    if features.n_components is not None:
        print(f"  Boundary components: {features.n_components}")
        print(f"  Largest component: {features.largest_component_fraction*100:.1f}%")
    if features.n_shape_components is not None:
        print(f"  Shape components: {features.n_shape_components}")

    print(f"\nShape:")
    if features.hull_area is not None:
        print(f"  Convex hull area: {features.hull_area:.4f}")
    print(f"  Compactness: {features.compactness:.3f} (1.0 = convex and smooth)")
    if features.max_distance is not None:
        print(f"  Max distance from seed: {features.max_distance:.4f}")

    print("=" * 60)
