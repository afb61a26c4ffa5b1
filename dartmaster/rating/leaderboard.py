"""
Cross-match player rankings built from saved match summaries.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from dartmaster.core.math_utils import round_half_up
from dartmaster.game.summary import SavedMatchSummary
from .elo import RatingEngine


@dataclass
class _Totals:
    games: int = 0
    wins: int = 0
    points: float = 0.0
    darts: int = 0
    checkout_sum: float = 0.0
    checkout_games: int = 0


@dataclass(frozen=True)
class PlayerRanking:
    """One leaderboard row."""
    name: str
    games_played: int
    wins: int
    win_pct: float
    avg_per_three: float
    checkout_pct: Optional[float]
    rating: Optional[int] = None


def _aggregate(matches: Iterable[SavedMatchSummary]) -> Dict[str, _Totals]:
    totals: Dict[str, _Totals] = {}
    for match in matches:
        for stats in match.players:
            entry = totals.setdefault(stats.name, _Totals())
            entry.games += 1
            if stats.name == match.winner:
                entry.wins += 1
            entry.points += stats.points
            entry.darts += stats.total_darts
            # Each game with a checkout rate weighs the same
            if stats.checkout_pct is not None:
                entry.checkout_sum += stats.checkout_pct
                entry.checkout_games += 1
    return totals


def _to_row(name: str, t: _Totals, rating: Optional[int] = None) -> PlayerRanking:
    return PlayerRanking(
        name=name,
        games_played=t.games,
        wins=t.wins,
        win_pct=round_half_up(t.wins / t.games * 100, 1) if t.games else 0.0,
        avg_per_three=round_half_up(t.points / t.darts * 3, 1) if t.darts else 0.0,
        checkout_pct=(
            round_half_up(t.checkout_sum / t.checkout_games, 1) if t.checkout_games else None
        ),
        rating=rating,
    )


def _checkout_key(row: PlayerRanking) -> float:
    return row.checkout_pct if row.checkout_pct is not None else -1.0


def rank_players(matches: Sequence[SavedMatchSummary]) -> List[PlayerRanking]:
    """
    Rank players by win percentage, then average, then checkout rate, then name.
    """
    rows = [_to_row(name, t) for name, t in _aggregate(matches).items()]
    rows.sort(key=lambda r: (-r.win_pct, -r.avg_per_three, -_checkout_key(r), r.name))
    return rows


def rank_players_by_rating(
        matches: Sequence[SavedMatchSummary],
        engine: Optional[RatingEngine] = None
) -> List[PlayerRanking]:
    """
    Rank players by Elo, then win percentage, then average, then name.
    """
    engine = engine or RatingEngine()
    ratings = engine.rounded_ratings(matches)
    rows = [
        _to_row(name, t, ratings.get(name, round(engine.initial_rating)))
        for name, t in _aggregate(matches).items()
    ]
    rows.sort(key=lambda r: (-r.rating, -r.win_pct, -r.avg_per_three, r.name))
    return rows


def format_leaderboard(rows: Sequence[PlayerRanking]) -> str:
    """Render rankings as a plain-text table."""
    show_rating = any(r.rating is not None for r in rows)
    header = f"{'#':>2}  {'Player':<16}{'Games':>6}{'Wins':>6}{'Win%':>7}{'Avg/3':>7}{'CO%':>7}"
    if show_rating:
        header += f"{'Elo':>7}"

    lines = [header]
    for position, r in enumerate(rows, start=1):
        checkout = f"{r.checkout_pct:.1f}" if r.checkout_pct is not None else "-"
        line = (
            f"{position:>2}  {r.name[:16]:<16}{r.games_played:>6}{r.wins:>6}"
            f"{r.win_pct:>7.1f}{r.avg_per_three:>7.1f}{checkout:>7}"
        )
        if show_rating:
            line += f"{r.rating if r.rating is not None else '-':>7}"
        lines.append(line)

    return "\n".join(lines)
