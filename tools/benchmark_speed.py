"""
Performance Benchmark
=====================

Measures headless tick throughput for performance tuning.

Usage:
    python -m tools.benchmark_speed [--steps S] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from egg_catcher.catcher_core.config_loader import load_config
from egg_catcher.catcher_core.events import Intent
from egg_catcher.catcher_core.game import CoreGame
from egg_catcher.catcher_core.env_gym import CatcherEnv

_MOVES = [(), (Intent.MOVE_LEFT,), (Intent.MOVE_RIGHT,)]


def benchmark_single_env(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """
    Benchmark Gymnasium environment performance.

    Args:
        num_steps: Number of steps to run.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = CatcherEnv()
    rng = np.random.default_rng(seed)

    obs, _ = env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        action = int(rng.integers(0, 3))
        obs, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            obs, _ = env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_core_game(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """
    Benchmark raw CoreGame without Gym overhead.

    Args:
        num_steps: Number of ticks.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = CoreGame(config=config, seed=seed)
    rng = np.random.default_rng(seed)

    game.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        result = game.tick(_MOVES[int(rng.integers(0, 3))])
        if result.terminated:
            game.reset()

    elapsed = time.perf_counter() - start

    return {
        "mode": "core_game",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def run_all_benchmarks(steps: int = 5000) -> list:
    """Run both benchmarks and print a summary."""
    results = []

    print("=" * 60)
    print("EGG CATCHER PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    print("Benchmarking CoreGame (raw)...")
    results.append(benchmark_core_game(num_steps=steps))
    print()

    print("Benchmarking CatcherEnv...")
    results.append(benchmark_single_env(num_steps=steps))
    print()

    print(f"{'Mode':<20} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 44)
    for r in results:
        print(f"{r['mode']:<20} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.4f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark egg catcher simulation speed")
    parser.add_argument("--steps", type=int, default=5000, help="Ticks per benchmark")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer ticks)")

    args = parser.parse_args()

    steps = 500 if args.quick else args.steps
    run_all_benchmarks(steps=steps)

    return 0


if __name__ == "__main__":
    sys.exit(main())
