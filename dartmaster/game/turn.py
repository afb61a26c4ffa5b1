"""
Turn resolution rules for countdown games (301/501).

Rules:
- Subtract the turn total from the remaining score
- Must finish exactly on 0
- Simple: bust only when the score would go below 0
- Double-out: also bust on 1, and on 0 unless the last scoring dart
  is a double or the bullseye
- A bust reverts the score to its pre-turn value
"""
from dataclasses import dataclass
from typing import Optional, Sequence
import logging

from dartmaster.core.types import DartThrow, FinishMode, TurnRecord, pad_turn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnOutcome:
    """Result of resolving one turn."""
    new_score: int
    is_bust: bool
    is_win: bool
    record: TurnRecord


def turn_total(darts: Sequence[DartThrow]) -> int:
    """Sum of the scoring contributions of the darts."""
    return sum(dart.score for dart in darts)


def last_scoring_dart(darts: Sequence[DartThrow]) -> Optional[DartThrow]:
    """Last dart with a nonzero score, scanning from the final slot backwards."""
    for dart in reversed(darts):
        if dart.score > 0:
            return dart
    return None


def projected_score(current_score: int, darts: Sequence[DartThrow]) -> int:
    """Remaining score if the darts entered so far were submitted."""
    return current_score - turn_total(darts)


def is_projected_bust(
        current_score: int,
        darts: Sequence[DartThrow],
        finish_mode: FinishMode
) -> bool:
    """
    Live bust preview for partially entered turns.

    Does not judge the finishing dart; a double-out turn that reaches 0 on a
    single is only detected as a bust once resolved.
    """
    remaining = projected_score(current_score, darts)
    if finish_mode == FinishMode.SIMPLE:
        return remaining < 0
    return remaining < 0 or remaining == 1


def can_submit(darts: Sequence[DartThrow], current_score: int) -> bool:
    """
    Check whether an entered turn is complete.

    A turn is complete when all three slots are filled, or earlier when the
    darts entered so far bring the score to exactly zero.
    """
    padded = pad_turn(darts)
    if all(dart.is_thrown for dart in padded):
        return True
    return projected_score(current_score, padded) == 0


def resolve_turn(
        prior_score: int,
        finish_mode: FinishMode,
        darts: Sequence[DartThrow],
        leg_number: int = 1
) -> TurnOutcome:
    """
    Resolve a submitted turn.

    Args:
        prior_score: Player's remaining score before the turn
        finish_mode: Active finish mode
        darts: Up to three darts (missing slots count as empty)
        leg_number: Leg the turn belongs to

    Returns:
        TurnOutcome with the new score, bust/win flags and the turn record
    """
    slots = pad_turn(darts)
    total = turn_total(slots)
    candidate = prior_score - total

    is_win = False
    if finish_mode == FinishMode.SIMPLE:
        is_bust = candidate < 0
        is_win = candidate == 0
    elif candidate < 0 or candidate == 1:
        is_bust = True
    elif candidate == 0:
        finisher = last_scoring_dart(slots)
        is_win = finisher is not None and finisher.is_double_finish
        # Zero without a double finish counts as overshooting
        is_bust = not is_win
    else:
        is_bust = False

    new_score = prior_score if is_bust else candidate

    record = TurnRecord(
        darts=slots,
        total=total,
        score_after=new_score,
        was_bust=is_bust,
        is_win=is_win,
        darts_thrown=sum(1 for dart in slots if dart.is_thrown),
        leg_number=leg_number,
    )

    logger.debug(
        f"Turn {' '.join(d.label for d in slots)}: {prior_score} -> {new_score} "
        f"(total={total}, bust={is_bust}, win={is_win})"
    )

    return TurnOutcome(new_score=new_score, is_bust=is_bust, is_win=is_win, record=record)
