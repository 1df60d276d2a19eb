from __future__ import annotations

import pytest

from blockfall.game import ScoringRules, SpeedRules


@pytest.mark.parametrize("lines, points", [(0, 0), (1, 100), (2, 300), (3, 500), (4, 800), (5, 0), (-1, 0)])
def test_score_for_lines(lines, points):
    assert ScoringRules().score_for_lines(lines) == points


def test_reward_on_big_clear_or_long_combo():
    rules = ScoringRules()
    assert rules.is_reward(3, 1)
    assert rules.is_reward(0, 3)
    assert rules.is_reward(1, 4)
    assert not rules.is_reward(2, 2)
    assert not rules.is_reward(0, 0)


def test_speed_steps_once_per_threshold_crossed():
    speed = SpeedRules()
    assert speed.interval_after(0, 9, 700) == 700
    assert speed.interval_after(9, 13, 700) == 650
    assert speed.interval_after(10, 13, 650) == 650
    # Two multiples in one jump
    assert speed.interval_after(8, 21, 700) == 600


def test_speed_progression_is_floored():
    speed = SpeedRules()
    interval = speed.initial_interval_ms
    total = 0
    history = {}
    while total < 200:
        interval = speed.interval_after(total, total + 1, interval)
        total += 1
        history[total] = interval
    assert history[10] == 650
    assert history[100] == 200
    assert history[120] == 100
    assert history[200] == 100
