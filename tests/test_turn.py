"""
Tests for turn resolution (bust and win rules).
"""
import dataclasses
import pytest

from dartmaster.core import DartThrow, FinishMode
from dartmaster.game.turn import (
    can_submit,
    is_projected_bust,
    last_scoring_dart,
    resolve_turn,
)


def darts(*labels):
    """Build a turn from dart labels."""
    return [DartThrow.parse(label) for label in labels]


def test_normal_turn():
    """Test a regular scoring turn."""
    outcome = resolve_turn(501, FinishMode.DOUBLE, darts("T20", "T20", "T20"))

    assert outcome.new_score == 321
    assert not outcome.is_bust
    assert not outcome.is_win
    assert outcome.record.total == 180
    assert outcome.record.score_after == 321
    assert outcome.record.darts_thrown == 3


@pytest.mark.parametrize("prior,labels", [
    (60, ("T20",)),
    (57, ("S20", "S20", "S17")),
    (25, ("Bull",)),
    (1, ("S1",)),
    (101, ("T20", "S16", "Bull")),
])
def test_simple_exact_finish_wins(prior, labels):
    """Test reaching exactly zero wins in simple mode, whatever the last dart."""
    outcome = resolve_turn(prior, FinishMode.SIMPLE, darts(*labels))
    assert outcome.is_win
    assert not outcome.is_bust
    assert outcome.new_score == 0


def test_simple_overshoot_busts():
    """Test going below zero busts in simple mode."""
    outcome = resolve_turn(10, FinishMode.SIMPLE, darts("S11"))
    assert outcome.is_bust
    assert not outcome.is_win
    assert outcome.new_score == 10
    assert outcome.record.score_after == 10
    assert outcome.record.total == 11


def test_simple_one_left_is_fine():
    """Test leaving 1 is allowed in simple mode."""
    outcome = resolve_turn(21, FinishMode.SIMPLE, darts("S20", "Miss", "Miss"))
    assert not outcome.is_bust
    assert outcome.new_score == 1


def test_double_out_one_left_busts():
    """Test leaving 1 busts in double-out mode."""
    outcome = resolve_turn(21, FinishMode.DOUBLE, darts("S20", "Miss", "Miss"))
    assert outcome.is_bust
    assert outcome.new_score == 21


def test_double_out_finish_on_double():
    """Test finishing on a double wins."""
    outcome = resolve_turn(40, FinishMode.DOUBLE, darts("D20"))
    assert outcome.is_win
    assert outcome.new_score == 0
    assert outcome.record.darts_thrown == 1


def test_double_out_finish_on_single_busts():
    """Test reaching zero on a single busts."""
    outcome = resolve_turn(40, FinishMode.DOUBLE, darts("S20", "S20"))
    assert outcome.is_bust
    assert not outcome.is_win
    assert outcome.new_score == 40


@pytest.mark.parametrize("prior,labels", [
    (50, ("Bullseye",)),
    (50, ("DBull",)),
    (40, ("D20", "Miss", "Miss")),
    (40, ("S20", "D10")),
    (170, ("T20", "T20", "Bullseye")),
])
def test_double_out_valid_finishes(prior, labels):
    """Test doubles and the bullseye finish, trailing misses ignored."""
    outcome = resolve_turn(prior, FinishMode.DOUBLE, darts(*labels))
    assert outcome.is_win
    assert outcome.new_score == 0


@pytest.mark.parametrize("prior,labels", [
    (25, ("Bull",)),
    (40, ("D10", "S20")),
    (60, ("T20",)),
    (30, ("T20",)),
])
def test_double_out_busts(prior, labels):
    """Test overshooting or zero without a double finish busts."""
    outcome = resolve_turn(prior, FinishMode.DOUBLE, darts(*labels))
    assert outcome.is_bust
    assert not outcome.is_win
    assert outcome.new_score == prior


def test_record_keeps_darts_and_leg():
    """Test the turn record is padded and carries the leg number."""
    outcome = resolve_turn(301, FinishMode.DOUBLE, darts("T19"), leg_number=3)
    record = outcome.record

    assert len(record.darts) == 3
    assert record.darts[0] == DartThrow.triple(19)
    assert not record.darts[1].is_thrown
    assert record.darts_thrown == 1
    assert record.leg_number == 3

    with pytest.raises(dataclasses.FrozenInstanceError):
        record.total = 0


def test_too_many_darts():
    """Test a turn with four darts is rejected."""
    with pytest.raises(ValueError):
        resolve_turn(501, FinishMode.DOUBLE, darts("S1", "S1", "S1", "S1"))


def test_last_scoring_dart():
    """Test misses and empty slots are skipped."""
    assert last_scoring_dart(darts("D20", "Miss", "-")) == DartThrow.double(20)
    assert last_scoring_dart(darts("Miss", "Miss")) is None


def test_can_submit():
    """Test turn completeness."""
    # Three darts always complete
    assert can_submit(darts("S1", "Miss", "S5"), 501)
    # Checkout before the third dart
    assert can_submit(darts("D20"), 40)
    assert can_submit(darts("S20", "D10"), 40)
    # Incomplete
    assert not can_submit(darts("S20"), 40)
    assert not can_submit([], 501)


def test_is_projected_bust():
    """Test live bust preview."""
    assert is_projected_bust(40, darts("T20"), FinishMode.DOUBLE)
    assert is_projected_bust(21, darts("S20"), FinishMode.DOUBLE)
    assert not is_projected_bust(21, darts("S20"), FinishMode.SIMPLE)
    assert is_projected_bust(10, darts("S11"), FinishMode.SIMPLE)
    assert not is_projected_bust(40, darts("S20"), FinishMode.DOUBLE)
