#!/usr/bin/env python3
"""
Random fuzzer for keytree.
Generates random sequences of structural edits and checks the tree's
invariants after every step.
"""

import argparse
import random
import sys
import time
import traceback

from keytree import CyclicMoveError, Direction, Tree, TreeConfig

ATTRIBUTE_NAMES = ["author", "birth", "tags", "meta", "weight", "enabled", "note"]

OPERATIONS = ["insert", "insert_top", "add_child", "erase", "move", "move_edge", "copy", "attribute"]
WEIGHTS = [6, 1, 6, 2, 5, 1, 1, 2]


def random_value(depth=0):
    kind = random.randint(0, 6 if depth < 2 else 3)
    if kind == 0:
        return "".join(random.choice("abcxyz ") for _ in range(random.randint(0, 8)))
    if kind == 1:
        return random.randint(-1000, 1000)
    if kind == 2:
        return random.random() * 100
    if kind == 3:
        return random.choice([True, False, None])
    if kind == 4:
        return [random_value(depth + 1) for _ in range(random.randint(0, 3))]
    return {random.choice(ATTRIBUTE_NAMES): random_value(depth + 1) for _ in range(random.randint(0, 3))}


def fuzz_step(tree, counter):
    """Apply one random edit. Returns a short description."""
    keys = tree.keys()
    op = random.choices(OPERATIONS, WEIGHTS)[0] if keys else "insert_top"

    if op in ("insert", "add_child"):
        key = f"n{counter}"
        pos = tree.find(random.choice(keys))
        getattr(tree, op)(pos, key)
        return f"{op} {key} at {pos.key}"
    if op == "insert_top":
        key = f"n{counter}"
        tree.insert(random.choice([tree.end(), tree.before_begin()]), key)
        return f"insert {key} at top"
    if op == "erase":
        victim = tree.find(random.choice(keys))
        size = sum(1 for _ in tree.subtree(victim))
        before = len(tree)
        key = victim.key
        tree.erase(victim)
        if len(tree) != before - size:
            msg = f"erase {key} removed {before - len(tree)} nodes, expected {size}"
            raise AssertionError(msg)
        return f"erase {key} ({size})"
    if op in ("move", "move_edge"):
        src = tree.find(random.choice(keys))
        if op == "move":
            dst = tree.find(random.choice(keys))
            direction = random.choice(list(Direction))
        else:
            dst, direction = random.choice(
                [(tree.before_begin(), Direction.AFTER), (tree.end(), Direction.BEFORE)],
            )
        before = len(tree)
        try:
            tree.move(dst, src, direction)
        except CyclicMoveError:
            return f"move {src.key} {direction.value} {dst!r} rejected"
        if len(tree) != before:
            msg = "move changed the node count"
            raise AssertionError(msg)
        return f"move {src.key} {direction.value} {dst!r}"
    if op == "copy":
        clone = tree.copy()
        clone.check_invariants()
        if clone != tree:
            msg = "copy differs from source"
            raise AssertionError(msg)
        return "copy"
    pos = tree.find(random.choice(keys))
    tree.set_attribute(pos, random.choice(ATTRIBUTE_NAMES), random_value())
    return f"attribute on {pos.key}"


def sample_trees(count, steps, seed=None):
    """Build `count` trees from `steps` random edits each, without invariant checks."""
    if seed is not None:
        random.seed(seed)
    trees = []
    for _ in range(count):
        tree = Tree()
        for counter in range(steps):
            fuzz_step(tree, counter)
        trees.append(tree)
    return trees


def run_fuzzer(num_tests, steps, seed=None, verbose=False, save_failures=False):
    """Run `num_tests` random edit sequences of `steps` edits each."""
    if seed is not None:
        random.seed(seed)

    failures = []
    successes = 0

    print(f"Fuzzing keytree with {num_tests} sequences of {steps} edits...")
    start_time = time.time()

    for i in range(num_tests):
        if verbose and i % 100 == 0:
            print(f"  Sequence {i}/{num_tests}...")

        tree = Tree(config=TreeConfig(check_invariants=True))
        history = []
        try:
            for counter in range(steps):
                history.append(fuzz_step(tree, counter))
            successes += 1
        except Exception as e:  # noqa: BLE001
            failures.append({
                "test_num": i,
                "history": history,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  FAILURE: Sequence {i}: {e}")

    elapsed_total = time.time() - start_time

    print(f"\n{'=' * 60}")
    print("FUZZING RESULTS: keytree")
    print(f"{'=' * 60}")
    print(f"Total sequences: {num_tests}")
    print(f"Successes:       {successes}")
    print(f"Failures:        {len(failures)}")
    print(f"Total time:      {elapsed_total:.2f}s")
    print(f"Edits/second:    {num_tests * steps / elapsed_total:.1f}")

    if failures:
        print(f"\n{'=' * 60}")
        print("FAILURE DETAILS:")
        print(f"{'=' * 60}")
        for failure in failures[:10]:
            print(f"\nSequence #{failure['test_num']}:")
            print(f"  Last edits: {failure['history'][-5:]}")
            print(f"  Error: {failure['error']}")
        if len(failures) > 10:
            print(f"\n... and {len(failures) - 10} more failures")

    if save_failures and failures:
        filename = f"fuzz_failures_keytree_{int(time.time())}.txt"
        with open(filename, "w") as f:
            f.write("Fuzzing results for keytree\n")
            f.write(f"Seed: {seed}\n\n")
            for failure in failures:
                f.write(f"=== FAILURE #{failure['test_num']} ===\n")
                f.write("Edits:\n" + "\n".join(failure["history"]) + "\n")
                f.write(f"Error: {failure['error']}\n")
                f.write(f"Traceback:\n{failure['traceback']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not failures


def main():
    parser = argparse.ArgumentParser(description="Fuzz keytree with random structural edits")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=200,
        help="Number of edit sequences to run (default: 200)",
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=200,
        help="Edits per sequence (default: 200)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print the dump of N randomly built trees",
    )

    args = parser.parse_args()

    if args.sample:
        for i, tree in enumerate(sample_trees(args.sample, args.steps, seed=args.seed)):
            print(f"=== Sample {i + 1} ===")
            tree.dump(header=False)
            print()
        return

    success = run_fuzzer(
        args.num_tests,
        args.steps,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
