#!/usr/bin/env python3
"""
Tests for digital surface feature extraction.
"""

import sys
import os

import numpy as np
import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from digisurf.adjacency import SurfelAdjacency
from digisurf.digital_set import DigitalSet
from digisurf.domain import Domain
from digisurf.kspace import KhalimskySpace
from digisurf.surfaces import make_boundary, boundary_components
from digisurf.surface_features import (
    extract_surface_features,
    count_shape_components,
    compute_hull_area,
    print_feature_summary,
)


def create_cube(size: int = 2, margin: int = 1) -> DigitalSet:
    n = size + 2 * margin
    domain = Domain((0, 0, 0), (n - 1,) * 3)
    cube = Domain((margin,) * 3, (margin + size - 1,) * 3)
    return DigitalSet(domain, cube.points())


def test_cube_features():
    cube = create_cube(size=2)
    ks = KhalimskySpace(cube.domain.lower_bound, cube.domain.upper_bound)
    surfels = make_boundary(ks, cube)

    features = extract_surface_features(ks, surfels, h=0.5, mask=cube.to_mask())
    assert features.dimension == 3
    assert features.n_surfels == 24
    assert features.area == pytest.approx(24 * 0.25)
    assert features.normal_histogram == {
        "+x": 4, "+y": 4, "+z": 4, "-x": 4, "-y": 4, "-z": 4,
    }
    # surfel centers of a cube on points 1..2 span 0.5..2.5, scaled by h
    assert np.allclose(features.bbox_min, 0.25)
    assert np.allclose(features.bbox_max, 1.25)
    assert np.allclose(features.centroid, 0.75)
    assert features.characteristic_length == pytest.approx(1.0)
    assert features.n_shape_components == 1
    assert features.hull_area is not None and features.hull_area > 0

    data = features.to_dict()
    assert data["n_surfels"] == 24
    assert data["bbox_min"] == [0.25, 0.25, 0.25]
    assert "max_distance" not in data


def test_component_statistics():
    domain = Domain((0, 0, 0), (6, 3, 3))
    shape = DigitalSet(domain, [(1, 1, 1), (1, 1, 2), (1, 2, 1), (1, 2, 2), (5, 1, 1)])
    ks = KhalimskySpace(domain.lower_bound, domain.upper_bound)
    components = boundary_components(ks, SurfelAdjacency(3), shape)
    surfels = set().union(*components)

    features = extract_surface_features(ks, surfels, components=components,
                                        mask=shape.to_mask(), max_distance=3.0)
    assert features.n_components == 2
    assert features.largest_component_fraction == pytest.approx(16 / 22)
    assert features.fragmentation_index == pytest.approx(6 / 22)
    assert features.n_shape_components == 2
    assert features.max_distance == 3.0


def test_count_shape_components():
    mask = np.zeros((5, 5), dtype=bool)
    mask[0, 0] = True
    mask[1, 1] = True  # only diagonal to the first one
    mask[3:, 3:] = True
    assert count_shape_components(mask) == 3
    assert count_shape_components(np.zeros((3, 3, 3), dtype=bool)) == 0


def test_degenerate_inputs():
    assert compute_hull_area(np.array([[0.0, 0.0], [1.0, 0.0]])) is None
    # coplanar points in 3D
    flat = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0], [2, 3, 0]], dtype=float)
    assert compute_hull_area(flat) is None

    ks = KhalimskySpace((0, 0, 0), (2, 2, 2))
    with pytest.raises(ValueError):
        extract_surface_features(ks, [])


def test_print_summary(capsys):
    cube = create_cube(size=1)
    ks = KhalimskySpace(cube.domain.lower_bound, cube.domain.upper_bound)
    print_feature_summary(extract_surface_features(ks, make_boundary(ks, cube)))
    out = capsys.readouterr().out
    assert "Surfels: 6" in out
    assert "+z: 1" in out


def test_features_without_components(capsys):
    """Connectivity stays unset when no components are given."""
    cube = create_cube()
    ks = KhalimskySpace(cube.domain.lower_bound, cube.domain.upper_bound)
    features = extract_surface_features(ks, make_boundary(ks, cube))
    assert features.n_components is None
    assert features.largest_component_fraction is None
    assert features.fragmentation_index is None
    assert "n_components" not in features.to_dict()

    print_feature_summary(features)
    assert "Boundary components" not in capsys.readouterr().out


def run_all_tests():
    """Run all tests."""
    print("=" * 60)
    print("Surface Feature Tests")
    print("=" * 60)

    test_cube_features()
    test_component_statistics()
    test_count_shape_components()
    test_degenerate_inputs()

    print("\n" + "=" * 60)
    print("All tests passed!")
    print("=" * 60)


if __name__ == "__main__":
    run_all_tests()
