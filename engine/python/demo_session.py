#!/usr/bin/env python3
"""Demo script to run headless upside-down Tetris sessions."""

import logging
import sys

from upside_core.drivers import RandomInputDriver
from upside_core.runner import Runner


def main():
    """Run session demos."""
    logging.basicConfig(level=logging.INFO)

    print("Upside-Down Tetris Headless Demo")
    print("=" * 60)

    driver = RandomInputDriver(seed=42, action_probability=0.3)
    runner = Runner(frame_ms=16.0, verbose=True)

    if len(sys.argv) > 1 and sys.argv[1] == "benchmark":
        print("\nBenchmarking random input (5 episodes)...")
        logging.getLogger("upside_core").setLevel(logging.WARNING)
        results = runner.run_benchmark(driver=driver, num_episodes=5, max_frames=20_000)
        summary = results.get_summary()
        print(f"Random input summary (5 episodes, 20000 frames max):")
        print(f"  Avg lines cleared: {summary['avg_lines']:.1f}")
        print(f"  Max score: {summary['max_score']}")
    else:
        print("\nRunning random input (1 episode, 5000 frames)...")
        runner.run_episode(driver, seed=42, max_frames=5000)

        print("\nTry:")
        print("  python demo_session.py benchmark  - Run several episodes")


if __name__ == "__main__":
    main()
