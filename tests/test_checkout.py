"""
Tests for checkout suggestions.
"""
import pytest

from dartmaster.core import BULL, BULLSEYE, FinishMode
from dartmaster.game.checkout import (
    DOUBLE_OUT_CHECKOUTS,
    MAX_DOUBLE_OUT,
    find_simple_finish,
    parse_combination,
    suggest,
    suggest_darts,
)

# Scores between 2 and 170 with no three-dart double-out finish
BOGEY_NUMBERS = [159, 162, 163, 165, 166, 168, 169]


def test_double_out_suggestions_are_valid_finishes():
    """Test every double-out suggestion sums to the score and ends on a double."""
    for score in range(2, MAX_DOUBLE_OUT + 1):
        darts = suggest_darts(score, FinishMode.DOUBLE)
        if score in BOGEY_NUMBERS:
            assert darts is None, f"{score} should have no checkout"
            continue

        assert darts is not None, f"Missing checkout for {score}"
        assert 1 <= len(darts) <= 3
        assert sum(d.score for d in darts) == score
        assert darts[-1].is_double_finish, f"{score}: {suggest(score, FinishMode.DOUBLE)}"


def test_double_out_known_checkouts():
    """Test a few standard checkouts."""
    assert suggest(170, FinishMode.DOUBLE) == "T20 T20 Bullseye"
    assert suggest(40, FinishMode.DOUBLE) == "D20"
    # Set-up shot onto D20 is preferred over a bullseye finish
    assert suggest(50, FinishMode.DOUBLE) == "S10 D20"
    assert suggest(3, FinishMode.DOUBLE) == "S1 D1"
    assert suggest(2, FinishMode.DOUBLE) == "D1"


@pytest.mark.parametrize("score", [-10, 0, 1, 171, 180, 501])
def test_double_out_outside_range(score):
    """Test no suggestion outside 2-170."""
    assert suggest(score, FinishMode.DOUBLE) is None


def test_double_out_table_size():
    """Test the table covers exactly the finishable scores."""
    expected = set(range(2, MAX_DOUBLE_OUT + 1)) - set(BOGEY_NUMBERS)
    assert set(DOUBLE_OUT_CHECKOUTS) == expected


@pytest.mark.parametrize("score,expected", [
    (1, "S1"),
    (5, "S5"),
    (20, "S20"),
    (21, "S20 S1"),
    (25, "Bull"),
    (40, "S20 S20"),
    (41, "S16 Bull"),
    (45, "S20 Bull"),
    (46, "S20 S20 S6"),
    (50, "Bullseye"),
    (60, "S10 Bullseye"),
    (61, "S11 Bullseye"),
    (70, "S20 Bullseye"),
    (75, "Bullseye Bull"),
    (80, "S20 S10 Bullseye"),
    (90, "S20 S20 Bullseye"),
    (95, "S20 Bull Bullseye"),
    (100, "Bullseye Bullseye"),
    (110, "S10 Bullseye Bullseye"),
    (125, "Bullseye Bullseye Bull"),
    (150, "Bullseye Bullseye Bullseye"),
])
def test_simple_known_finishes(score, expected):
    """Test preferred simple-mode finishes."""
    assert suggest(score, FinishMode.SIMPLE) == expected


@pytest.mark.parametrize("score", [96, 97, 98, 99, 121, 124, 126, 140, 149])
def test_simple_unreachable(score):
    """Test scores with no single/bull combination in three darts."""
    assert find_simple_finish(score) is None
    assert suggest(score, FinishMode.SIMPLE) is None


@pytest.mark.parametrize("score", [-5, 0, 151, 301])
def test_simple_outside_range(score):
    """Test no suggestion outside 1-150."""
    assert suggest(score, FinishMode.SIMPLE) is None


def test_simple_suggestions_are_valid_finishes():
    """Test simple suggestions only use singles and bulls."""
    allowed = set(range(1, 21)) | {BULL, BULLSEYE}
    for score in range(1, 151):
        values = find_simple_finish(score)
        if values is None:
            continue
        assert 1 <= len(values) <= 3
        assert sum(values) == score
        assert set(values) <= allowed

        darts = suggest_darts(score, FinishMode.SIMPLE)
        assert [d.score for d in darts] == values
        assert all(d.multiplier == 1 for d in darts)


def test_parse_combination():
    """Test combination strings become dart throws."""
    darts = parse_combination("T20 S19 D12")
    assert [d.score for d in darts] == [60, 19, 24]

    with pytest.raises(ValueError):
        parse_combination("T20 T20 T20 D20")

    with pytest.raises(ValueError):
        parse_combination("T20 X5")
