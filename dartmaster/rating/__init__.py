"""
Rating module - Elo ratings and leaderboards over match history.
"""
from .elo import (
    RatingDelta,
    RatingEngine,
    compute_match_deltas,
    compute_ratings,
    expected_score,
    total_deltas,
)
from .leaderboard import (
    PlayerRanking,
    format_leaderboard,
    rank_players,
    rank_players_by_rating,
)

__all__ = [
    "RatingDelta",
    "RatingEngine",
    "compute_match_deltas",
    "compute_ratings",
    "expected_score",
    "total_deltas",
    "PlayerRanking",
    "format_leaderboard",
    "rank_players",
    "rank_players_by_rating",
]
