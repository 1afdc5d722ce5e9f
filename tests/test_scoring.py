from __future__ import annotations

import pytest

from termtris.scoring import LINE_COEFFICIENTS, PERIODS, ScoreKeeper, clear_score, period_for
from termtris.settings import GameMode


@pytest.mark.parametrize("count", range(5))
@pytest.mark.parametrize("level", [0, 3, 9])
def test_clear_score_uses_coefficient_table(count: int, level: int) -> None:
    assert clear_score(count, level) == [0, 40, 100, 300, 1200][count] * (level + 1)


def test_coefficients() -> None:
    assert LINE_COEFFICIENTS == (0, 40, 100, 300, 1200)


def test_period_table_is_decreasing_and_clamped() -> None:
    assert len(PERIODS) >= 10
    assert all(a > b for a, b in zip(PERIODS, PERIODS[1:]))
    assert period_for(-4) == PERIODS[0]
    assert period_for(500) == PERIODS[-1]


def test_ten_single_clears_reach_level_one() -> None:
    keeper = ScoreKeeper()
    assert keeper.period == PERIODS[0]
    for _ in range(9):
        keeper.record_clear(1)
    assert keeper.level == 0
    keeper.record_clear(1)
    assert keeper.lines == 10
    assert keeper.level == 1
    assert keeper.period == PERIODS[1]
    assert keeper.score == 9 * 40 + 40 * 2


def test_level_never_drops_below_starting_level() -> None:
    keeper = ScoreKeeper(level=5)
    keeper.record_clear(4)
    keeper.record_clear(4)
    keeper.record_clear(2)
    assert keeper.lines == 10
    assert keeper.level == 5
    assert keeper.period == PERIODS[5]


def test_level_climbs_monotonically() -> None:
    keeper = ScoreKeeper()
    levels = []
    for _ in range(30):
        keeper.record_clear(1)
        levels.append(keeper.level)
    assert levels == sorted(levels)
    assert keeper.level == 3


def test_target_mode_counts_down_and_clamps() -> None:
    keeper = ScoreKeeper(mode=GameMode.TARGET, lines=3)
    keeper.record_clear(2)
    assert keeper.lines == 1
    assert not keeper.target_reached
    keeper.record_clear(4)
    assert keeper.lines == 0
    assert keeper.target_reached
    assert keeper.level == 0


def test_zero_clear_awards_nothing() -> None:
    keeper = ScoreKeeper(level=2)
    assert keeper.record_clear(0) == 0
    assert keeper.score == 0
