"""
History module - snapshot migration and the local match history store.
"""
from .migration import state_from_dict, state_to_dict
from .store import MatchHistoryStore, PlayerNameCache

__all__ = [
    "state_from_dict",
    "state_to_dict",
    "MatchHistoryStore",
    "PlayerNameCache",
]
