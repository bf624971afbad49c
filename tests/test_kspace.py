#!/usr/bin/env python3
"""
Tests for the Khalimsky space, cells, domains and surfel adjacency.
"""

import sys
import os

import numpy as np
import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from digisurf.domain import Domain
from digisurf.kspace import Cell, SCell, KhalimskySpace
from digisurf.adjacency import SurfelAdjacency


def test_init_bounds():
    """init accepts valid bounds and rejects the others without raising."""
    ks = KhalimskySpace()
    assert not ks.is_valid
    assert ks.init((0, 0, 0), (3, 4, 5))
    assert ks.is_valid
    assert ks.dimension == 3
    assert ks.size(1) == 5

    assert not KhalimskySpace().init((0, 0), (3, 3, 3)), "dimension mismatch"
    assert not KhalimskySpace().init((2, 0), (1, 3)), "inverted bounds"
    assert not KhalimskySpace().init((), ()), "dimension 0"
    assert not KhalimskySpace().init(None, (1, 1)), "missing bound"

    with pytest.raises(ValueError):
        KhalimskySpace((0, 0), (-1, 3))


def test_closed_and_open_extent():
    """A closed space also holds the cells bounding the outermost spels."""
    closed = KhalimskySpace((0, -2), (3, 2), closed=True)
    assert closed.min_kcoord(0) == -1 and closed.max_kcoord(0) == 7
    assert closed.min_kcoord(1) == -5 and closed.max_kcoord(1) == 5

    opened = KhalimskySpace((0, -2), (3, 2), closed=False)
    assert opened.min_kcoord(0) == 0 and opened.max_kcoord(0) == 6

    border = SCell((-1, 0))
    assert closed.s_is_inside(border)
    assert not opened.s_is_inside(border)
    assert closed.domain == Domain((0, -2), (3, 2))


def test_cell_creation_and_reading():
    ks = KhalimskySpace((0, 0, 0), (3, 3, 3))
    spel = ks.s_spel((1, 2, 3))
    assert spel.coords == (2, 4, 6)
    assert spel.positive
    assert ks.u_is_spel(spel)
    assert ks.s_coords(spel) == (1, 2, 3)

    surfel = ks.s_cell((3, 4, 6))
    assert ks.s_is_surfel(surfel)
    assert ks.s_dim(surfel) == 2
    assert ks.s_orth_dir(surfel) == 0
    assert ks.s_dirs(surfel) == [1, 2]
    assert ks.s_coords(SCell((-1, 0, 0))) == (-1, 0, 0)

    with pytest.raises(ValueError):
        ks.s_orth_dir(spel)
    with pytest.raises(ValueError):
        ks.u_cell((20, 0, 0))

    assert ks.unsigns(surfel) == Cell((3, 4, 6))
    assert ks.s_opp(surfel) == SCell((3, 4, 6), False)


def test_sign_rule():
    """Direct orientation flips with each open axis met before k."""
    ks = KhalimskySpace((0, 0, 0), (3, 3, 3))
    spel = SCell((2, 2, 2), True)
    assert ks.s_direct(spel, 0)
    assert not ks.s_direct(spel, 1)
    assert ks.s_direct(spel, 2)
    assert not ks.s_direct(ks.s_opp(spel), 0)

    surfel = SCell((3, 2, 2), True)  # axis 0 is closed, so it does not flip
    assert ks.s_direct(surfel, 1)

    direct = ks.s_direct_incident(spel, 0)
    indirect = ks.s_indirect_incident(spel, 0)
    assert direct.coords == (3, 2, 2) and direct.positive
    assert indirect.coords == (1, 2, 2) and not indirect.positive


def test_bel_orientation():
    """s_bel puts the direct incident spel on the requested side."""
    ks = KhalimskySpace((0, 0, 0), (3, 3, 3))
    for coords in [(1, 2, 4), (2, 3, 4), (2, 4, 5), (6, 0, 3)]:
        k = [i for i, x in enumerate(coords) if x % 2][0]
        for inner_positive in (True, False):
            bel = ks.s_bel(coords, inner_positive)
            inner, outer = ks.spels_of_surfel(bel)
            expected = coords[k] + (1 if inner_positive else -1)
            assert inner.coords[k] == expected, \
                f"{bel}: inside spel {inner.coords} should sit at {expected} along {k}"
            assert inner.positive and not outer.positive


def test_adjacent_cells():
    ks = KhalimskySpace((0, 0), (2, 2))
    cell = ks.u_spel((0, 1))
    neighbors = ks.u_proper_neighborhood(cell)
    assert sorted(n.coords for n in neighbors) == [(0, 0), (0, 4), (2, 2)]
    assert ks.s_adjacent(SCell((0, 2), False), 1, True) == SCell((0, 4), False)


def test_incidence_arithmetic_is_unchecked():
    """Cells from user coordinates are checked; arithmetic results are not."""
    ks = KhalimskySpace((0, 0), (2, 2), closed=False)

    past_border = ks.s_adjacent(SCell((4, 1)), 0, True)
    assert past_border.coords == (6, 1)
    assert not ks.s_is_inside(past_border)
    assert not ks.u_is_inside(ks.u_incident(ks.unsigns(SCell((4, 1))), 0, True))

    bel = ks.s_bel((5, 2), False)
    assert not ks.s_is_inside(bel)
    with pytest.raises(ValueError):
        ks.s_cell((5, 2))
    with pytest.raises(ValueError):
        ks.u_spel((3, 0))


def test_domain():
    domain = Domain((1, -1), (2, 1))
    assert domain.shape == (2, 3)
    assert domain.size == 6
    assert list(domain.points())[:3] == [(1, -1), (1, 0), (1, 1)]
    assert domain.index_of((2, 0)) == (1, 1)
    assert (3, 0) not in domain
    assert np.allclose(domain.center, [1.5, 0.0])
    assert Domain.from_shape((4, 5), (1, 1)).upper_bound == (4, 5)
    assert Domain((0, 0), (-1, 3)).is_empty


def test_surfel_adjacency_table():
    adj = SurfelAdjacency(3, interior=True)
    assert all(adj.get_adjacency(i, j) for i in range(3) for j in range(3))

    adj.set_adjacency(0, 2, False)
    assert not adj.get_adjacency(0, 2)
    assert adj.get_adjacency(2, 0)

    reversed_adj = adj.reverse()
    assert reversed_adj.get_adjacency(0, 2)
    assert not reversed_adj.get_adjacency(2, 0)
    assert reversed_adj.reverse() == adj

    with pytest.raises(ValueError):
        adj.set_adjacency(1, 1, True)
    with pytest.raises(ValueError):
        SurfelAdjacency(0)


def run_all_tests():
    """Run all tests."""
    print("=" * 60)
    print("Khalimsky Space Tests")
    print("=" * 60)

    test_init_bounds()
    test_closed_and_open_extent()
    test_cell_creation_and_reading()
    test_sign_rule()
    test_bel_orientation()
    test_adjacent_cells()
    test_incidence_arithmetic_is_unchecked()
    test_domain()
    test_surfel_adjacency_table()

    print("\n" + "=" * 60)
    print("All tests passed!")
    print("=" * 60)


if __name__ == "__main__":
    run_all_tests()
