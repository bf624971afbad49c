#!/usr/bin/env python3
"""
Traverse the boundary of a shape stored in a volume file by distance.

Voxel v belongs to the shape iff its value I(v) follows minT <= I(v) <= maxT.
Starting from a bel found at random, surfels are visited by increasing
Euclidean distance to that bel. A first traversal measures the largest
distance; a second one emits every surfel with its distance normalized by it,
ready to be mapped to colors.

Usage:
    # Print the number of surfels and the largest distance
    python vol_distance_traversal.py shape.vol 1 255

    # Save (surfel, distance) rows and a distance histogram
    python vol_distance_traversal.py shape.vol 1 255 --output dist.csv --plot hist.png
"""

import argparse
import csv
import os
import sys
import time
from typing import List, Optional

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from digisurf import (
    BelNotFoundError,
    DistanceVisitor,
    ImplicitDigitalSurface,
    KhalimskySpace,
    Node,
    SurfelAdjacency,
    extract_surface_features,
    find_a_bel,
    load_config,
    load_predicate,
    make_distance_functor,
    print_feature_summary,
)


def usage(prog: str) -> None:
    print(f"Usage: {prog} <fileName.vol> <minT> <maxT>", file=sys.stderr)
    print("\t - traverses the boundary of the shape stored in vol file <fileName.vol>.",
          file=sys.stderr)
    print("\t - voxel v belongs to the shape iff its value I(v) follows minT <= I(v) <= maxT.",
          file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Traverse the boundary of a thresholded volume by distance.',
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
                        help='Output CSV file for (surfel, distance) rows')
    parser.add_argument('--plot', '-p', type=str, default=None,
                        help='Output histogram of distances (PNG)')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Reduce output verbosity')
    return parser


def save_nodes_csv(nodes: List[Node], max_dist: float, output_path: str) -> None:
    """Save visited nodes, in visiting order, to a CSV file."""
    if not nodes:
        return
    dim = len(nodes[0].surfel.coords)
    columns = [f"k{i}" for i in range(dim)] + ["positive", "distance", "normalized"]

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(columns)
        for surfel, distance in nodes:
            normalized = distance / max_dist if max_dist > 0 else 0.0
            writer.writerow(list(surfel.coords) +
                            [int(surfel.positive), f"{distance:.6f}", f"{normalized:.6f}"])

    print(f"Distances saved to {output_path}")


def plot_distances(nodes: List[Node], output_path: str) -> None:
    """Generate a histogram of surfel distances."""
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        print("matplotlib not available, skipping plot")
        return

    distances = [node.distance for node in nodes]

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.hist(distances, bins=50, color='tab:blue', alpha=0.8)
    ax.set_xlabel('Distance to seed', fontsize=12)
    ax.set_ylabel('Surfels', fontsize=12)
    ax.set_title('Boundary distance distribution', fontsize=14)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    plt.close()

    print(f"Plot saved to {output_path}")


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
    try:
        bel = find_a_bel(ks, predicate, config.max_trials, rng=config.seed)
    except BelNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 3
    surface = ImplicitDigitalSurface(ks, predicate, adjacency, bel)
    functor = make_distance_functor(ks, bel, config.grid_step)

    if verbose:
        print("Extracting boundary by distance tracking from an initial bel...",
              end=" ", flush=True)
    t0 = time.time()
    n_surfels = 0
    max_dist = 0.0
    for node in DistanceVisitor(surface, functor, bel):
        n_surfels += 1
        max_dist = max(max_dist, node.distance)
    if verbose:
        print(f"({time.time() - t0:.1f}s)")

    # Second pass over the same surface, as a display loop would do
    nodes = list(DistanceVisitor(surface, functor, bel))

    print(f"nb surfels = {n_surfels}")
    print(f"max distance = {max_dist:.4f}")

    if verbose:
        features = extract_surface_features(ks, [node.surfel for node in nodes],
                                            h=config.grid_step,
                                            max_distance=max_dist)
        print_feature_summary(features)

    if args.output:
        save_nodes_csv(nodes, max_dist, args.output)

    if args.plot:
        plot_distances(nodes, args.plot)

    return 0


if __name__ == '__main__':
    sys.exit(main())
