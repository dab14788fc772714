"""Scoring, level progression and drop speed."""

from dataclasses import dataclass

LINE_CLEAR_POINTS = 100   # Per line, multiplied by the current level
HARD_DROP_POINTS = 2      # Per cell travelled during a hard drop
LINES_PER_LEVEL = 10

BASE_DROP_INTERVAL_MS = 500
MIN_DROP_INTERVAL_MS = 50
DROP_INTERVAL_STEP_MS = 50


def calculate_score(lines_cleared: int, level: int = 1) -> int:
    """Calculate score from lines cleared.

    Args:
        lines_cleared: Number of lines cleared simultaneously
        level: Current level multiplier

    Returns:
        Score points
    """
    return lines_cleared * LINE_CLEAR_POINTS * level


def level_for_lines(total_lines: int) -> int:
    """Level reached after clearing total_lines (starts at 1)."""
    return total_lines // LINES_PER_LEVEL + 1


def drop_interval_for_level(level: int) -> int:
    """Milliseconds between automatic steps toward the lock edge."""
    return max(MIN_DROP_INTERVAL_MS, BASE_DROP_INTERVAL_MS - (level - 1) * DROP_INTERVAL_STEP_MS)


@dataclass
class SessionStats:
    """Score, level and speed for one session."""

    score: int = 0
    level: int = 1
    lines: int = 0
    drop_interval_ms: int = BASE_DROP_INTERVAL_MS

    def add_hard_drop(self, steps: int) -> int:
        """Award hard drop points and return how many were added."""
        points = steps * HARD_DROP_POINTS
        self.score += points
        return points

    def apply_line_clear(self, cleared: int) -> int:
        """Commit a finished line clear.

        Score uses the level in effect before the clear; level and drop
        interval are recomputed afterward.

        Args:
            cleared: Number of rows removed

        Returns:
            Points awarded
        """
        points = calculate_score(cleared, self.level)
        self.lines += cleared
        self.score += points
        self.level = level_for_lines(self.lines)
        self.drop_interval_ms = drop_interval_for_level(self.level)
        return points

    def reset(self) -> None:
        self.score = 0
        self.level = 1
        self.lines = 0
        self.drop_interval_ms = BASE_DROP_INTERVAL_MS
