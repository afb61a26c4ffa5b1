"""
Finished-match summaries handed to rating and persistence.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, TYPE_CHECKING
import time
import uuid

from dartmaster.core.math_utils import round_half_up
from .player import Player, standings

if TYPE_CHECKING:
    from .match import MatchState


@dataclass(frozen=True)
class SavedPlayerStats:
    """Aggregate statistics of one player in a match."""
    name: str
    legs_won: int = 0
    average: float = 0.0  # Per three darts, 2 decimals
    total_darts: int = 0
    remaining: int = 0
    busts: int = 0
    checkout_pct: Optional[float] = None  # Percent, 1 decimal

    @classmethod
    def from_player(cls, player: Player) -> "SavedPlayerStats":
        checkout_pct = player.checkout_percentage
        return cls(
            name=player.name,
            legs_won=player.legs_won,
            average=round_half_up(player.average_per_three_darts, 2),
            total_darts=player.total_darts,
            remaining=player.current_score,
            busts=player.busts,
            checkout_pct=round_half_up(checkout_pct, 1) if checkout_pct is not None else None,
        )

    @property
    def points(self) -> float:
        """Points re-derived from the stored average."""
        return self.average * self.total_darts / 3

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "legs_won": self.legs_won,
            "average": self.average,
            "total_darts": self.total_darts,
            "remaining": self.remaining,
            "busts": self.busts,
            "checkout_pct": self.checkout_pct,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SavedPlayerStats":
        checkout_pct = data.get("checkout_pct")
        return cls(
            name=str(data.get("name", "")),
            legs_won=int(data.get("legs_won", 0)),
            average=float(data.get("average", 0.0)),
            total_darts=int(data.get("total_darts", 0)),
            remaining=int(data.get("remaining", 0)),
            busts=int(data.get("busts", 0)),
            checkout_pct=float(checkout_pct) if checkout_pct is not None else None,
        )


@dataclass(frozen=True)
class SavedMatchSummary:
    """
    Read-only projection of a finished match.

    The timestamp (epoch seconds) is the ordering key for rating computation.
    """
    winner: str
    players: Tuple[SavedPlayerStats, ...]
    timestamp: Optional[float] = None
    game_mode: str = "501"
    finish_mode: str = "double"
    legs_played: int = 1
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def player_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.players)

    def stats_for(self, name: str) -> Optional[SavedPlayerStats]:
        for stats in self.players:
            if stats.name == name:
                return stats
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "game_mode": self.game_mode,
            "finish_mode": self.finish_mode,
            "legs_played": self.legs_played,
            "winner": self.winner,
            "players": [p.to_dict() for p in self.players],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SavedMatchSummary":
        timestamp = data.get("timestamp")
        kwargs = {}
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return cls(
            winner=str(data.get("winner") or ""),
            players=tuple(SavedPlayerStats.from_dict(p) for p in data.get("players") or []),
            timestamp=float(timestamp) if timestamp is not None else None,
            game_mode=str(data.get("game_mode", "501")),
            finish_mode=str(data.get("finish_mode", "double")),
            legs_played=int(data.get("legs_played", 1)),
            **kwargs,
        )


def pick_winner(players: Sequence[Player]) -> Optional[Player]:
    """Most legs won, then lowest remaining score."""
    if not players:
        return None
    return min(players, key=lambda p: (-p.legs_won, p.current_score))


def summarize_match(state: "MatchState", timestamp: Optional[float] = None) -> SavedMatchSummary:
    """
    Build the summary of a match.

    Args:
        state: Match state (normally in the finished phase)
        timestamp: Completion time (default: now)

    Returns:
        SavedMatchSummary

    Raises:
        ValueError: If the match has no players
    """
    if not state.players:
        raise ValueError("Cannot summarize a match without players")

    winner = state.winner or pick_winner(state.players)

    return SavedMatchSummary(
        winner=winner.name,
        players=tuple(SavedPlayerStats.from_player(p) for p in state.players),
        timestamp=time.time() if timestamp is None else timestamp,
        game_mode=str(state.game_type.value),
        finish_mode=state.finish_mode.value,
        legs_played=state.total_legs,
    )


def results_table(players: Sequence[Player]) -> str:
    """Plain-text end-of-match table (position, legs, remaining, average, busts)."""
    lines = [f"{'#':>2}  {'Player':<16}{'Legs':>5}{'Left':>6}{'Avg/3':>8}{'Busts':>7}"]
    for position, player in enumerate(standings(players), start=1):
        lines.append(
            f"{position:>2}  {player.name[:16]:<16}{player.legs_won:>5}"
            f"{player.current_score:>6}{player.average_per_three_darts:>8.1f}{player.busts:>7}"
        )
    return "\n".join(lines)
