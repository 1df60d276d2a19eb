from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    reward_lines_threshold: int = 3
    reward_combo_threshold: int = 3

    def score_for_lines(self, lines: int) -> int:
        if 1 <= lines <= len(self.line_clear_scores):
            return self.line_clear_scores[lines - 1]
        return 0

    def is_reward(self, lines: int, combo: int) -> bool:
        return lines >= self.reward_lines_threshold or combo >= self.reward_combo_threshold


@dataclass
class SpeedRules:
    """Fall interval progression, in milliseconds per row."""

    initial_interval_ms: int = 700
    min_interval_ms: int = 100
    step_ms: int = 50
    lines_per_step: int = 10

    def interval_after(self, old_total: int, new_total: int, interval_ms: int) -> int:
        crossed = new_total // self.lines_per_step - old_total // self.lines_per_step
        if crossed <= 0:
            return interval_ms
        return max(self.min_interval_ms, interval_ms - crossed * self.step_ms)
