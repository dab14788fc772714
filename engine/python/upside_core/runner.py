"""Headless runner: drives sessions frame by frame and collects statistics."""

from dataclasses import dataclass, field
from typing import List, Optional
import time

from upside_core.driver import InputDriver
from upside_core.line_clear import LineClearEngine
from upside_core.session import GameSession


@dataclass
class EpisodeStats:
    """Statistics for a single episode."""

    seed: int
    score: int
    lines_cleared: int
    level: int
    pieces_locked: int
    frames: int
    elapsed_ms: float
    duration_seconds: float
    final_grid_state: List[int]  # Flat array of grid cells
    game_over: bool

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "seed": self.seed,
            "score": self.score,
            "lines_cleared": self.lines_cleared,
            "level": self.level,
            "pieces_locked": self.pieces_locked,
            "frames": self.frames,
            "elapsed_ms": self.elapsed_ms,
            "duration_seconds": self.duration_seconds,
            "game_over": self.game_over,
        }


@dataclass
class BenchmarkResults:
    """Results from running a benchmark."""

    driver_name: str
    num_episodes: int
    episodes: List[EpisodeStats] = field(default_factory=list)

    def get_summary(self) -> dict:
        """Get summary statistics across all episodes."""
        if not self.episodes:
            return {}

        n = len(self.episodes)
        return {
            "driver_name": self.driver_name,
            "num_episodes": self.num_episodes,
            "avg_score": sum(e.score for e in self.episodes) / n,
            "avg_lines": sum(e.lines_cleared for e in self.episodes) / n,
            "avg_pieces": sum(e.pieces_locked for e in self.episodes) / n,
            "max_score": max(e.score for e in self.episodes),
            "max_lines": max(e.lines_cleared for e in self.episodes),
            "min_score": min(e.score for e in self.episodes),
            "game_overs": sum(1 for e in self.episodes if e.game_over),
            "total_duration": sum(e.duration_seconds for e in self.episodes),
        }


class Runner:
    """Framework for running input drivers against headless sessions."""

    def __init__(
        self,
        frame_ms: float = 16.0,
        animation_duration_ms: float = LineClearEngine.DURATION_MS,
        glow_duration_ms: float = LineClearEngine.GLOW_DURATION_MS,
        verbose: bool = True,
    ):
        """Initialize runner.

        Args:
            frame_ms: Simulated time per frame
            animation_duration_ms: Line clear animation length for sessions
            glow_duration_ms: Glow subphase length for sessions
            verbose: Print progress messages
        """
        self.frame_ms = frame_ms
        self.animation_duration_ms = animation_duration_ms
        self.glow_duration_ms = glow_duration_ms
        self.verbose = verbose

    def run_episode(
        self, driver: InputDriver, seed: int, max_frames: Optional[int] = None
    ) -> EpisodeStats:
        """Run a single episode.

        The session is created with auto_reset off so the final grid can be
        captured after game over.

        Args:
            driver: Input driver to run
            seed: Random seed for episode
            max_frames: Maximum frames to simulate (None = until game over)

        Returns:
            Episode statistics
        """
        session = GameSession(
            seed=seed,
            animation_duration_ms=self.animation_duration_ms,
            glow_duration_ms=self.glow_duration_ms,
            auto_reset=False,
        )
        session.add_game_over_listener(driver.on_game_over)
        driver.on_episode_start(seed)
        session.start()

        frames = 0
        start_time = time.time()

        while not session.game_over:
            if max_frames is not None and frames >= max_frames:
                break

            action = driver.select_action(session.snapshot())
            if action is not None:
                session.handle_input(action)
            if not session.game_over:
                session.tick(self.frame_ms)
            frames += 1

        duration = time.time() - start_time

        stats = EpisodeStats(
            seed=seed,
            score=session.score,
            lines_cleared=session.lines,
            level=session.level,
            pieces_locked=session.pieces_locked,
            frames=frames,
            elapsed_ms=frames * self.frame_ms,
            duration_seconds=duration,
            final_grid_state=session.grid.to_list(),
            game_over=session.game_over,
        )

        if self.verbose:
            print(
                f"Episode {seed}: {stats.pieces_locked} pieces, "
                f"{stats.lines_cleared} lines, score {stats.score} "
                f"({frames} frames, {duration:.2f}s)"
            )

        return stats

    def run_benchmark(
        self,
        driver: InputDriver,
        num_episodes: int,
        seeds: Optional[List[int]] = None,
        max_frames: Optional[int] = None,
    ) -> BenchmarkResults:
        """Run a benchmark with multiple episodes.

        Args:
            driver: Driver to benchmark
            num_episodes: Number of episodes to run
            seeds: List of seeds (if None, use 0, 1, 2, ...)
            max_frames: Maximum frames per episode (None = no limit)

        Returns:
            Benchmark results
        """
        if seeds is None:
            seeds = list(range(num_episodes))
        elif len(seeds) < num_episodes:
            raise ValueError(f"Need {num_episodes} seeds, got {len(seeds)}")

        if self.verbose:
            print(f"\n{'='*60}")
            print(f"Running benchmark: {driver.name}")
            print(f"Episodes: {num_episodes}")
            print(f"{'='*60}\n")

        results = BenchmarkResults(driver_name=driver.name, num_episodes=num_episodes)

        for i, seed in enumerate(seeds[:num_episodes]):
            if self.verbose:
                print(f"[{i+1}/{num_episodes}] ", end="", flush=True)
            results.episodes.append(self.run_episode(driver, seed, max_frames))

        if self.verbose:
            summary = results.get_summary()
            print(f"\n{'='*60}")
            print(f"Benchmark complete: {driver.name}")
            print(f"{'='*60}")
            print(f"Avg score: {summary['avg_score']:.1f}")
            print(f"Avg lines: {summary['avg_lines']:.1f}")
            print(f"Avg pieces: {summary['avg_pieces']:.1f}")
            print(f"Game overs: {summary['game_overs']}/{num_episodes}")
            print(f"{'='*60}\n")

        return results
