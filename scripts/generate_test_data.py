#!/usr/bin/env python3
"""Generate synthetic scalar volumes for testing.

Creates an HDF5 file holding a smoothed random field: a handful of
Gaussian blobs plus low-amplitude noise. Its level sets are full of the
ambiguous cube configurations that separate Marching Cubes 33 from the
classic table.
"""

from __future__ import annotations

import argparse
from pathlib import Path

import h5py
import numpy as np
from scipy import ndimage


def generate_blobs(
    shape: tuple[int, int, int] = (48, 48, 48),
    num_blobs: int = 6,
    seed: int = 42,
) -> np.ndarray:
    """Sum of Gaussian blobs at random centres.

    Args:
        shape: Volume dimensions (x, y, z).
        num_blobs: Number of blobs.
        seed: Random seed.

    Returns:
        float32 volume with values in roughly [0, 1].
    """
    rng = np.random.RandomState(seed)
    grid = np.indices(shape).astype(np.float32)
    volume = np.zeros(shape, dtype=np.float32)

    for _ in range(num_blobs):
        center = rng.rand(3) * np.array(shape) * 0.8 + np.array(shape) * 0.1
        radius = rng.uniform(3.0, 8.0)
        dist2 = sum((grid[a] - center[a]) ** 2 for a in range(3))
        volume += np.exp(-dist2 / (2 * radius**2))

    return volume


def add_noise(volume: np.ndarray, amplitude: float = 0.15, sigma: float = 1.0, seed: int = 42) -> np.ndarray:
    """Add smoothed noise so the level sets develop saddles.

    Args:
        volume: Input volume.
        amplitude: Noise amplitude after smoothing.
        sigma: Gaussian smoothing width in voxels.
        seed: Random seed.
    """
    rng = np.random.RandomState(seed + 100)
    noise = ndimage.gaussian_filter(rng.randn(*volume.shape), sigma=sigma)
    noise *= amplitude / max(float(np.abs(noise).max()), 1e-12)
    return (volume + noise).astype(np.float32)


def main():
    parser = argparse.ArgumentParser(description="Generate synthetic test data")
    parser.add_argument("--output", type=str, default="test_data/synthetic.h5")
    parser.add_argument("--shape", type=int, nargs=3, default=[48, 48, 48])
    parser.add_argument("--num-blobs", type=int, default=6)
    parser.add_argument("--noise", type=float, default=0.15)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    print(f"Generating synthetic volume: shape={args.shape}, blobs={args.num_blobs}")
    volume = generate_blobs(tuple(args.shape), args.num_blobs, args.seed)
    volume = add_noise(volume, args.noise, seed=args.seed)
    print(f"Value range: [{volume.min():.3f}, {volume.max():.3f}]")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with h5py.File(output_path, "w") as f:
        f.create_dataset("volume", data=volume, compression="gzip")
        f.attrs["description"] = "Synthetic scalar volume for testing"

    print(f"Saved to {output_path}")


if __name__ == "__main__":
    main()
