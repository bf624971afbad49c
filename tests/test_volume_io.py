#!/usr/bin/env python3
"""
Tests for volume I/O, thresholded predicates and run configuration.
"""

import sys
import os
import tempfile

import numpy as np
import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from digisurf.config import TrackingConfig, DEFAULT_CONFIG, load_config
from digisurf.digital_set import DigitalSet, ImagePredicate, sample_predicate
from digisurf.domain import Domain
from digisurf.volume_io import load_vol, save_vol, load_volume, load_predicate


def create_test_volume() -> np.ndarray:
    """Non-cubic volume with distinct values, to catch axis mix-ups."""
    image = np.zeros((4, 3, 2), dtype=np.uint8)
    image[1:3, 1, :] = 100
    image[3, 2, 1] = 250
    return image


def test_vol_file_layout():
    image = create_test_volume()
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "shape.vol")
        save_vol(path, image)

        with open(path, "rb") as f:
            content = f.read()
        header, data = content.split(b"\n.\n", 1)
        assert b"X: 4" in header and b"Y: 3" in header and b"Z: 2" in header
        assert b"Version: 2" in header
        assert len(data) == image.size
        # x varies fastest
        assert data[3 + 2 * 4 + 1 * 12] == 250

        loaded = load_vol(path)
        assert loaded.shape == (4, 3, 2)
        assert np.array_equal(loaded, image)


def test_invalid_vol_files():
    with tempfile.TemporaryDirectory() as tmp:
        truncated = os.path.join(tmp, "truncated.vol")
        with open(truncated, "wb") as f:
            f.write(b"X: 4\nY: 4\nZ: 4\n.\n" + bytes(10))
        with pytest.raises(ValueError):
            load_vol(truncated)

        missing = os.path.join(tmp, "missing.vol")
        with open(missing, "wb") as f:
            f.write(b"X: 2\nY: 2\n.\n" + bytes(8))
        with pytest.raises(ValueError):
            load_vol(missing)

        with pytest.raises(ValueError):
            save_vol(os.path.join(tmp, "flat.vol"), np.zeros((3, 3)))
        with pytest.raises(ValueError):
            save_vol(os.path.join(tmp, "big.vol"), np.full((2, 2, 2), 300))
        with pytest.raises(ValueError):
            load_volume(os.path.join(tmp, "shape.raw"))


def test_load_predicate():
    image = create_test_volume()
    with tempfile.TemporaryDirectory() as tmp:
        vol_path = os.path.join(tmp, "shape.vol")
        npy_path = os.path.join(tmp, "shape.npy")
        save_vol(vol_path, image)
        np.save(npy_path, image)

        for path in (vol_path, npy_path):
            predicate = load_predicate(path, 50, 200)
            assert predicate.domain == Domain((0, 0, 0), (3, 2, 1))
            assert predicate.n_points == 4
            assert predicate((1, 1, 0))
            assert not predicate((3, 2, 1)), "250 lies above the window"
            assert not predicate((9, 0, 0))


def test_image_predicate_and_digital_set_agree():
    image = np.arange(24).reshape(4, 6)
    predicate = ImagePredicate(image, 5, 12, lower=(-2, 0))
    shape = DigitalSet.from_image(image, 5, 12, lower=(-2, 0))

    assert len(shape) == predicate.n_points == 8
    assert np.array_equal(shape.to_mask(), predicate.to_mask())
    assert np.array_equal(sample_predicate(predicate.domain, shape), predicate.to_mask())
    assert shape((-2, 5)) and predicate((-2, 5))
    assert not predicate((2, 0))

    with pytest.raises(ValueError):
        shape.insert((5, 5))


def test_tracking_config():
    config = TrackingConfig(max_trials=500, interior=False, seed=7)
    assert TrackingConfig.from_dict(config.to_dict()) == config
    assert DEFAULT_CONFIG.max_trials == 100000
    assert DEFAULT_CONFIG.interior and DEFAULT_CONFIG.closed

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "runs", "config.json")
        config.save(path)
        assert TrackingConfig.from_json(path) == config


def test_load_config_overrides():
    assert load_config() == DEFAULT_CONFIG
    assert load_config(seed=None, closed=None) == DEFAULT_CONFIG
    assert load_config(closed=False).closed is False

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "config.json")
        TrackingConfig(max_trials=50, closed=False, grid_step=0.5).save(path)

        # unset flags keep the file values
        config = load_config(path, max_trials=None, seed=3)
        assert config == TrackingConfig(max_trials=50, closed=False, seed=3, grid_step=0.5)

        config = load_config(path, max_trials=10, interior=False)
        assert config.max_trials == 10 and not config.interior
        assert config.grid_step == 0.5


def run_all_tests():
    """Run all tests."""
    print("=" * 60)
    print("Volume I/O Tests")
    print("=" * 60)

    test_vol_file_layout()
    test_invalid_vol_files()
    test_load_predicate()
    test_image_predicate_and_digital_set_agree()
    test_tracking_config()
    test_load_config_overrides()

    print("\n" + "=" * 60)
    print("All tests passed!")
    print("=" * 60)


if __name__ == "__main__":
    run_all_tests()
