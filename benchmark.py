#!/usr/bin/env python3
"""
Performance benchmark for keytree.
Times bulk structural edits (build, find, move, copy, erase) on randomly
shaped trees.
"""

# ruff: noqa: BLE001
from __future__ import annotations

import argparse
import os
import random
import sys
import time

from keytree import CyclicMoveError, Direction, Tree

try:
    import psutil

    _PSUTIL_AVAILABLE = True
except Exception:
    psutil = None
    _PSUTIL_AVAILABLE = False


def rss_mb() -> float | None:
    if not _PSUTIL_AVAILABLE:
        return None
    return psutil.Process(os.getpid()).memory_info().rss / (1024 * 1024)


def build_tree(size: int, rng: random.Random) -> Tree:
    tree = Tree()
    cursors = [tree.insert(tree.end(), "n0")]
    for i in range(1, size):
        pos = rng.choice(cursors)
        if rng.random() < 0.6:
            cursors.append(tree.add_child(pos, f"n{i}"))
        else:
            cursors.append(tree.insert(pos, f"n{i}"))
    return tree


def bench_build(size: int, rng: random.Random, _tree: Tree) -> Tree:
    return build_tree(size, rng)


def bench_find(size: int, rng: random.Random, tree: Tree) -> Tree:
    for _ in range(size):
        tree.find(f"n{rng.randrange(size)}")
    return tree


def bench_walk(size: int, rng: random.Random, tree: Tree) -> Tree:
    for _ in tree.walk():
        pass
    return tree


def bench_move(size: int, rng: random.Random, tree: Tree) -> Tree:
    directions = list(Direction)
    for _ in range(size):
        dst = tree.find(f"n{rng.randrange(size)}")
        src = tree.find(f"n{rng.randrange(size)}")
        try:
            tree.move(dst, src, rng.choice(directions))
        except CyclicMoveError:
            pass
    return tree


def bench_copy(size: int, rng: random.Random, tree: Tree) -> Tree:
    tree.copy()
    return tree


def bench_erase(size: int, rng: random.Random, tree: Tree) -> Tree:
    keys = tree.keys()
    rng.shuffle(keys)
    for key in keys:
        pos = tree.find(key)
        if not pos.is_end:
            tree.erase(pos)
    return tree


BENCHMARKS = {
    "build": bench_build,
    "find": bench_find,
    "walk": bench_walk,
    "move": bench_move,
    "copy": bench_copy,
    "erase": bench_erase,
}


def run_benchmarks(names: list[str], size: int, iterations: int, seed: int) -> dict:
    results = {}
    for name in names:
        times = []
        for i in range(iterations):
            rng = random.Random(seed + i)
            tree = build_tree(size, random.Random(seed + i))
            start = time.perf_counter()
            BENCHMARKS[name](size, rng, tree)
            times.append(time.perf_counter() - start)
        results[name] = {
            "total_time": sum(times),
            "mean_time": sum(times) / len(times),
            "min_time": min(times),
            "max_time": max(times),
            "rss_mb": rss_mb(),
        }
    return results


def print_results(results: dict, size: int, iterations: int):
    """Pretty print benchmark results."""
    print("\n" + "=" * 72)
    print(f"BENCHMARK RESULTS ({size} nodes x {iterations} iterations)")
    print("=" * 72)
    print(f"\n{'Operation':<10} {'Total (s)':<10} {'Mean (ms)':<10} {'Min (ms)':<10} {'Max (ms)':<10} {'RSS (MB)':<10}")
    print("-" * 72)
    for name, result in results.items():
        rss = f"{result['rss_mb']:.1f}" if result["rss_mb"] is not None else "n/a"
        print(
            f"{name:<10} {result['total_time']:<10.3f} {result['mean_time'] * 1000:<10.3f} "
            f"{result['min_time'] * 1000:<10.3f} {result['max_time'] * 1000:<10.3f} {rss:<10}",
        )
    print()


def main():
    parser = argparse.ArgumentParser(description="Benchmark keytree structural edits")
    parser.add_argument("--size", type=int, default=10000, help="Nodes per tree (default: 10000)")
    parser.add_argument(
        "--iterations", type=int, default=5, help="Number of iterations to run for averaging (default: 5)",
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument(
        "--ops",
        nargs="+",
        choices=list(BENCHMARKS),
        default=list(BENCHMARKS),
        help="Operations to benchmark (default: all)",
    )
    args = parser.parse_args()

    if args.size < 1:
        print("ERROR: --size must be positive")
        sys.exit(1)
    if not _PSUTIL_AVAILABLE:
        print("psutil not installed; memory figures disabled (pip install keytree[bench])")

    results = run_benchmarks(args.ops, args.size, args.iterations, args.seed)
    print_results(results, args.size, args.iterations)


if __name__ == "__main__":
    main()
