#!/usr/bin/env python3
"""
Extract the boundary of a shape stored in a volume file by tracking.

Voxel v belongs to the shape iff its value I(v) follows minT <= I(v) <= maxT.
A bel is searched at random, then the whole connected boundary component
containing it is tracked.

Usage:
    # Track the boundary and print a summary
    python vol_track_boundary.py shape.vol 1 255

    # Use exterior adjacency and save surfels to CSV
    python vol_track_boundary.py shape.vol 1 255 --exterior --output surfels.csv

    # Numpy volumes work too
    python vol_track_boundary.py shape.npy 1 1 --quiet
"""

import argparse
import csv
import os
import sys
import time
from typing import Iterable, List, Optional

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from digisurf import (
    BelNotFoundError,
    KhalimskySpace,
    SCell,
    SurfelAdjacency,
    boundary_components,
    extract_surface_features,
    find_a_bel,
    load_config,
    load_predicate,
    print_feature_summary,
    track_boundary,
)


def usage(prog: str) -> None:
    print(f"Usage: {prog} <fileName.vol> <minT> <maxT>", file=sys.stderr)
    print("\t - extracts the boundary of the shape stored in vol file <fileName.vol>.",
          file=sys.stderr)
    print("\t - voxel v belongs to the shape iff its value I(v) follows minT <= I(v) <= maxT.",
          file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Extract the boundary of a thresholded volume by tracking.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('path', help='Volume file (.vol or .npy)')
    parser.add_argument('min_t', type=float, help='Lowest value inside the shape')
    parser.add_argument('max_t', type=float, help='Highest value inside the shape')
    parser.add_argument('--config', '-c', type=str, default=None,
                        help='JSON run configuration; flags given here override it')
    parser.add_argument('--max-trials', type=int, default=None,
                        help='Random draws allowed to find a bel (default: 100000)')
    parser.add_argument('--exterior', action='store_true',
                        help='Use exterior surfel adjacency (default: interior)')
    parser.add_argument('--open', action='store_true',
                        help='Use an open Khalimsky space (drops faces on the domain border)')
    parser.add_argument('--grid-step', type=float, default=None,
                        help='Size of a voxel when embedding surfels (default: 1.0)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for the bel search')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Output CSV file for the surfels')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Reduce output verbosity')
    return parser


def save_surfels_csv(surfels: Iterable[SCell], output_path: str) -> None:
    """Save surfels (Khalimsky coordinates and sign) to a CSV file."""
    surfels = sorted(surfels)
    if not surfels:
        return
    dim = len(surfels[0].coords)
    columns = [f"k{i}" for i in range(dim)] + ["positive"]

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(columns)
        for s in surfels:
            writer.writerow(list(s.coords) + [int(s.positive)])

    print(f"Surfels saved to {output_path}")


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) < 3:
        usage(os.path.basename(sys.argv[0]))
        return 1

    args = build_parser().parse_args(argv)
    config = load_config(args.config,
                         max_trials=args.max_trials,
                         interior=False if args.exterior else None,
                         closed=False if args.open else None,
                         seed=args.seed,
                         grid_step=args.grid_step)
    verbose = not args.quiet

    if verbose:
        print(f"Reading volume {args.path}...", end=" ", flush=True)
    t0 = time.time()
    predicate = load_predicate(args.path, args.min_t, args.max_t)
    if verbose:
        print(f"{predicate.n_points:,} voxels in [{args.min_t}, {args.max_t}] "
              f"({time.time() - t0:.1f}s)")

    ks = KhalimskySpace()
    if not ks.init(predicate.domain.lower_bound, predicate.domain.upper_bound,
                   config.closed):
        print("Error in the Khalimsky space construction.", file=sys.stderr)
        return 2

    adjacency = SurfelAdjacency(ks.dimension, config.interior)

    if verbose:
        print("Extracting boundary by tracking from an initial bel...", end=" ", flush=True)
    t0 = time.time()
    try:
        bel = find_a_bel(ks, predicate, config.max_trials, rng=config.seed)
    except BelNotFoundError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 3
    boundary = track_boundary(ks, adjacency, predicate, bel)
    if verbose:
        print(f"({time.time() - t0:.1f}s)")

    print(f"nb surfels = {len(boundary)}")

    if verbose:
        # the summary reports every component of the shape, not only the tracked one
        components = boundary_components(ks, adjacency, predicate)
        features = extract_surface_features(ks, boundary, h=config.grid_step,
                                            components=components,
                                            mask=predicate.to_mask())
        print_feature_summary(features)

    if args.output:
        save_surfels_csv(boundary, args.output)

    return 0


if __name__ == '__main__':
    sys.exit(main())
