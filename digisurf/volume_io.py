"""
Volume I/O for digital images.

Supports the ``.vol`` format (ASCII header of ``Key: value`` lines ended by a
line holding a single dot, followed by X*Y*Z unsigned bytes, x varying
fastest) and numpy ``.npy`` arrays.

Images are returned as numpy arrays indexed ``[x, y, z]``.
"""

import os
from typing import Dict

import numpy as np

from .digital_set import ImagePredicate

REQUIRED_VOL_KEYS = ("X", "Y", "Z")


def _read_vol_header(f) -> Dict[str, str]:
    header = {}
    while True:
        line = f.readline()
        if not line:
            raise ValueError("Unexpected end of file in vol header")
        line = line.decode("ascii", errors="replace").strip()
        if line == ".":
            break
        if ":" not in line:
            raise ValueError(f"Malformed vol header line: {line!r}")
        key, value = line.split(":", 1)
        header[key.strip()] = value.strip()
    return header


def load_vol(filename: str) -> np.ndarray:
    """
    Load a .vol file.

    Returns:
        uint8 array of shape (X, Y, Z)
    """
    with open(filename, "rb") as f:
        header = _read_vol_header(f)
        missing = [k for k in REQUIRED_VOL_KEYS if k not in header]
        if missing:
            raise ValueError(f"Missing vol header keys: {', '.join(missing)}")

        nx, ny, nz = (int(header[k]) for k in REQUIRED_VOL_KEYS)
        n_voxels = nx * ny * nz
        data = np.frombuffer(f.read(n_voxels), dtype=np.uint8)

    if data.size != n_voxels:
        raise ValueError(f"Truncated vol data: expected {n_voxels} voxels, got {data.size}")

    # Stored with x fastest, i.e. as a C-ordered (Z, Y, X) block
    return data.reshape(nz, ny, nx).transpose(2, 1, 0).copy()


def save_vol(filename: str, image: np.ndarray) -> None:
    """Save a 3D array indexed [x, y, z] as a .vol file (values cast to uint8)."""
    image = np.asarray(image)
    if image.ndim != 3:
        raise ValueError(f"vol files hold 3D images, got {image.ndim}D")
    if image.min(initial=0) < 0 or image.max(initial=0) > 255:
        raise ValueError("vol files hold values in 0..255")

    nx, ny, nz = image.shape
    header = (
        f"Center-X: {nx // 2}\nCenter-Y: {ny // 2}\nCenter-Z: {nz // 2}\n"
        f"X: {nx}\nY: {ny}\nZ: {nz}\n"
        "Voxel-Size: 1\nAlpha-Color: 0\nVoxel-Endian: 0\nInt-Endian: 0123\n"
        "Version: 2\n.\n"
    )
    with open(filename, "wb") as f:
        f.write(header.encode("ascii"))
        f.write(image.astype(np.uint8).transpose(2, 1, 0).tobytes(order="C"))


def load_volume(filename: str) -> np.ndarray:
    """
    Load a volume from file (auto-detect format).

    Supported formats:
        - .vol (DGtal-style volume)
        - .npy (numpy array, any dimension)
    """
    ext = os.path.splitext(filename)[1].lower()

    if ext == ".vol":
        return load_vol(filename)
    elif ext == ".npy":
        return np.load(filename)
    else:
        raise ValueError(f"Unsupported file format: {ext}")


def load_predicate(filename: str, min_t: float, max_t: float) -> ImagePredicate:
    """Load a volume and threshold it: voxel v is inside iff min_t <= I(v) <= max_t."""
    return ImagePredicate(load_volume(filename), min_t, max_t)
