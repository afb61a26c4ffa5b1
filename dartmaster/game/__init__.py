"""
Game module - turn rules, checkouts, players and the match state machine.
"""
from .checkout import suggest, suggest_darts, parse_combination
from .turn import TurnOutcome, resolve_turn, can_submit
from .player import Player, standings
from .undo import UndoLog
from .summary import SavedMatchSummary, SavedPlayerStats, summarize_match
from .match import Match, MatchState, legs_to_win

__all__ = [
    "suggest",
    "suggest_darts",
    "parse_combination",
    "TurnOutcome",
    "resolve_turn",
    "can_submit",
    "Player",
    "standings",
    "UndoLog",
    "SavedMatchSummary",
    "SavedPlayerStats",
    "summarize_match",
    "Match",
    "MatchState",
    "legs_to_win",
]
