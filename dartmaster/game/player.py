"""
Player data structure and statistics.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import uuid

from dartmaster.core.types import TurnRecord, TURN_SLOTS

# Highest score that can still be finished in one turn
CHECKOUT_RANGE_MAX = 170
CHECKOUT_RANGE_MIN = 2


def _new_player_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass
class Player:
    """Represents a player in the match."""
    name: str
    starting_score: int = 501
    id: str = field(default_factory=_new_player_id)

    # Current state
    current_score: int = field(init=False)
    legs_won: int = 0

    # Turn history (chronological, across all legs)
    history: List[TurnRecord] = field(default_factory=list)

    def __post_init__(self):
        """Initialize current score."""
        self.current_score = self.starting_score

    def record_turn(self, record: TurnRecord) -> None:
        """
        Append a resolved turn and take over its score.

        Args:
            record: Resolved turn
        """
        self.history.append(record)
        self.current_score = record.score_after

    def reset_for_leg(self) -> None:
        """Back to the starting score; history and legs won are kept."""
        self.current_score = self.starting_score

    def reset(self) -> None:
        """Reset player to starting state."""
        self.current_score = self.starting_score
        self.history.clear()
        self.legs_won = 0

    def turns_in_leg(self, leg_number: int) -> List[TurnRecord]:
        """Get turns played in a given leg."""
        return [turn for turn in self.history if turn.leg_number == leg_number]

    @property
    def rounds(self) -> int:
        return len(self.history)

    @property
    def total_darts(self) -> int:
        """Darts thrown; a turn recorded without thrown darts counts as a full turn."""
        return sum(turn.darts_thrown or TURN_SLOTS for turn in self.history)

    @property
    def points_scored(self) -> int:
        """Points that counted (busted turns excluded)."""
        return sum(turn.points for turn in self.history)

    @property
    def busts(self) -> int:
        return sum(1 for turn in self.history if turn.was_bust)

    @property
    def highest_turn(self) -> int:
        return max((turn.points for turn in self.history), default=0)

    @property
    def average_per_three_darts(self) -> float:
        """Calculate average score per three darts."""
        darts = self.total_darts
        if darts == 0:
            return 0.0
        return self.points_scored / darts * TURN_SLOTS

    def _checkout_counts(self) -> tuple:
        attempts = 0
        successes = 0
        running_score = self.starting_score
        leg = None

        for turn in self.history:
            if turn.leg_number != leg:
                leg = turn.leg_number
                running_score = self.starting_score

            if CHECKOUT_RANGE_MIN <= running_score <= CHECKOUT_RANGE_MAX:
                attempts += 1
                if not turn.was_bust and turn.score_after == 0:
                    successes += 1
            running_score = turn.score_after

        return attempts, successes

    @property
    def checkout_attempts(self) -> int:
        """Turns started on a finishable score (2-170)."""
        return self._checkout_counts()[0]

    @property
    def checkouts(self) -> int:
        return self._checkout_counts()[1]

    @property
    def checkout_percentage(self) -> Optional[float]:
        """Checkout success rate in percent, None without attempts."""
        attempts, successes = self._checkout_counts()
        if attempts == 0:
            return None
        return successes / attempts * 100.0


def standings(players: Sequence[Player]) -> List[Player]:
    """
    Order players for a results table.

    Most legs won first, then lowest remaining score, then best average.
    """
    return sorted(
        players,
        key=lambda p: (-p.legs_won, p.current_score, -p.average_per_three_darts)
    )
