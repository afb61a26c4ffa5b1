"""
Elo rating computation over a match history.

Every match is scored as the winner beating each opponent pairwise. The
winner's pre-match rating is used against all opponents and the winner's
gains are applied once after the opponent loop. An opponent loses the same
amount the winner gains from that pairing: K * (1 - E), where E is the
winner's expected score.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
import logging

from dartmaster.core.config_loader import Config
from dartmaster.core.math_utils import round_to_int

logger = logging.getLogger(__name__)

INITIAL_RATING = 1500.0
K_FACTOR = 32.0


@dataclass(frozen=True)
class RatingDelta:
    """Rating change of one player from one pairing."""
    player: str
    against: str
    delta: float

    @property
    def rounded(self) -> int:
        return round_to_int(self.delta)


def expected_score(rating: float, opponent_rating: float) -> float:
    """
    Probability that a player beats an opponent.

    E = 1 / (1 + 10^((R_opponent - R_player) / 400))
    """
    return 1.0 / (1.0 + 10 ** ((opponent_rating - rating) / 400.0))


def _match_entry(record: Any) -> Tuple[float, Optional[str], List[str]]:
    """
    Extract (timestamp, winner, player names) from a history record.

    Accepts objects exposing winner/player_names/timestamp (SavedMatchSummary)
    and mappings with winner/players/timestamp, where players holds names or
    dicts with a name.
    """
    if isinstance(record, Mapping):
        winner = record.get("winner")
        timestamp = record.get("timestamp")
        names = []
        for entry in record.get("players") or []:
            name = entry.get("name") if isinstance(entry, Mapping) else entry
            if name:
                names.append(str(name))
    else:
        winner = getattr(record, "winner", None)
        timestamp = getattr(record, "timestamp", None)
        names = [str(name) for name in getattr(record, "player_names", ()) if name]

    try:
        sort_key = float(timestamp) if timestamp is not None else 0.0
    except (TypeError, ValueError):
        logger.debug(f"Unusable timestamp {timestamp!r}, sorting first")
        sort_key = 0.0

    return sort_key, (str(winner) if winner else None), names


class RatingEngine:
    """
    Elo rating engine.

    Usage:
        engine = RatingEngine()
        ratings = engine.compute_ratings(history)
        preview = engine.compute_match_deltas(["Ann", "Bob"], "Ann", ratings)
    """

    def __init__(
            self,
            k_factor: float = K_FACTOR,
            initial_rating: float = INITIAL_RATING
    ):
        self.k_factor = k_factor
        self.initial_rating = initial_rating

    @classmethod
    def from_config(cls, config: Config) -> "RatingEngine":
        return cls(k_factor=config.k_factor, initial_rating=config.initial_rating)

    def compute_ratings(self, matches: Iterable[Any]) -> Dict[str, float]:
        """
        Compute ratings from a match history.

        Records are sorted by timestamp first (stable, missing timestamps
        first); results depend on this order.

        Args:
            matches: History records

        Returns:
            Mapping player name -> rating (unrounded)
        """
        entries = sorted((_match_entry(m) for m in matches), key=lambda e: e[0])
        ratings: Dict[str, float] = {}

        for _, winner, names in entries:
            for name in names:
                ratings.setdefault(name, self.initial_rating)

            if not winner:
                logger.debug(f"Skipping match without winner: {names}")
                continue
            if not names:
                continue

            ratings.setdefault(winner, self.initial_rating)
            winner_rating = ratings[winner]
            winner_gain = 0.0

            for opponent in names:
                if opponent == winner:
                    continue
                delta = self._pairing_delta(winner_rating, ratings[opponent])
                winner_gain += delta
                ratings[opponent] -= delta

            ratings[winner] = winner_rating + winner_gain

        logger.debug(f"Ratings computed for {len(ratings)} players from {len(entries)} matches")
        return ratings

    def rounded_ratings(self, matches: Iterable[Any]) -> Dict[str, int]:
        """Ratings rounded for presentation."""
        return {name: round_to_int(r) for name, r in self.compute_ratings(matches).items()}

    def compute_match_deltas(
            self,
            player_names: Sequence[str],
            winner_name: str,
            ratings: Optional[Mapping[str, float]] = None
    ) -> List[RatingDelta]:
        """
        Preview rating changes of a single match.

        Args:
            player_names: Names of everyone in the match
            winner_name: Match winner
            ratings: Current ratings (unknown names use the initial rating)

        Returns:
            Two deltas per opponent: winner's gain and opponent's loss
        """
        ratings = ratings or {}
        winner_rating = ratings.get(winner_name, self.initial_rating)
        deltas = []

        for opponent in player_names:
            if opponent == winner_name:
                continue
            delta = self._pairing_delta(winner_rating, ratings.get(opponent, self.initial_rating))
            deltas.append(RatingDelta(player=winner_name, against=opponent, delta=delta))
            deltas.append(RatingDelta(player=opponent, against=winner_name, delta=-delta))

        return deltas

    def _pairing_delta(self, winner_rating: float, opponent_rating: float) -> float:
        return self.k_factor * (1.0 - expected_score(winner_rating, opponent_rating))


def total_deltas(deltas: Iterable[RatingDelta]) -> Dict[str, int]:
    """Sum of rounded pairing deltas per player."""
    totals: Dict[str, int] = {}
    for d in deltas:
        totals[d.player] = totals.get(d.player, 0) + d.rounded
    return totals


def compute_ratings(matches: Iterable[Any]) -> Dict[str, float]:
    """Ratings with the default K-factor and initial rating."""
    return RatingEngine().compute_ratings(matches)


def compute_match_deltas(
        player_names: Sequence[str],
        winner_name: str,
        ratings: Optional[Mapping[str, float]] = None
) -> List[RatingDelta]:
    """Match delta preview with the default K-factor and initial rating."""
    return RatingEngine().compute_match_deltas(player_names, winner_name, ratings)
