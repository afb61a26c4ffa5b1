"""
Conversion of match snapshots to and from plain data.

Snapshots written by older versions may lack fields added later (finish mode,
leg settings, start time, legs won). Decoding patches them with defaults so
the game engine only ever sees a fully populated MatchState.
"""
from typing import Any, Dict, List, Mapping, Optional
import logging
import time

from dartmaster.core.types import (
    DartThrow,
    FinishMode,
    GameType,
    MatchPhase,
    TurnRecord,
    pad_turn,
)
from dartmaster.game.match import MatchState
from dartmaster.game.player import Player

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 2

# Defaults for fields missing from older snapshots
LEGACY_DEFAULTS = {
    "finish_mode": FinishMode.DOUBLE.value,
    "total_legs": 1,
    "current_leg": 1,
}


def _dart_to_dict(dart: DartThrow) -> Dict[str, Any]:
    return {"value": dart.value, "multiplier": dart.multiplier, "state": dart.state.value}


def _dart_from_dict(data: Mapping[str, Any]) -> DartThrow:
    value = data.get("value")
    if data.get("state") == "empty":
        value = None
    return DartThrow(value, int(data.get("multiplier", 1)))


def _turn_to_dict(turn: TurnRecord) -> Dict[str, Any]:
    return {
        "darts": [_dart_to_dict(d) for d in turn.darts],
        "total": turn.total,
        "score_after": turn.score_after,
        "was_bust": turn.was_bust,
        "is_win": turn.is_win,
        "darts_thrown": turn.darts_thrown,
        "leg_number": turn.leg_number,
    }


def _turn_from_dict(data: Mapping[str, Any]) -> TurnRecord:
    darts = pad_turn([_dart_from_dict(d) for d in data.get("darts") or []])
    thrown = data.get("darts_thrown")
    return TurnRecord(
        darts=darts,
        total=int(data.get("total", sum(d.score for d in darts))),
        score_after=int(data["score_after"]),
        was_bust=bool(data.get("was_bust", False)),
        is_win=bool(data.get("is_win", False)),
        darts_thrown=int(thrown) if thrown is not None else sum(1 for d in darts if d.is_thrown),
        leg_number=int(data.get("leg_number", 1)),
    )


def _player_to_dict(player: Player) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "starting_score": player.starting_score,
        "current_score": player.current_score,
        "legs_won": player.legs_won,
        "history": [_turn_to_dict(t) for t in player.history],
    }


def _player_from_dict(data: Mapping[str, Any], starting_score: int) -> Player:
    kwargs = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])

    player = Player(
        name=str(data["name"]),
        starting_score=int(data.get("starting_score", starting_score)),
        **kwargs,
    )
    player.current_score = int(data.get("current_score", player.starting_score))
    player.legs_won = int(data.get("legs_won", 0))
    player.history = [_turn_from_dict(t) for t in data.get("history") or []]
    return player


def state_to_dict(state: MatchState) -> Dict[str, Any]:
    """Encode a match state as plain data."""
    return {
        "version": SNAPSHOT_VERSION,
        "phase": state.phase.value,
        "game_type": state.game_type.value,
        "finish_mode": state.finish_mode.value,
        "total_legs": state.total_legs,
        "current_leg": state.current_leg,
        "players": [_player_to_dict(p) for p in state.players],
        "active_player_index": state.active_player_index,
        "winner_index": state.winner_index,
        "leg_winner_index": state.leg_winner_index,
        "start_time": state.start_time,
    }


def _migrate(data: Dict[str, Any]) -> Dict[str, Any]:
    """Fill in fields that older snapshots do not have."""
    patched = dict(data)
    for key, default in LEGACY_DEFAULTS.items():
        if patched.get(key) is None:
            logger.debug(f"Snapshot lacks {key}, using {default!r}")
            patched[key] = default
    if not patched.get("start_time"):
        patched["start_time"] = time.time()

    patched["players"] = [
        {**p, "legs_won": p.get("legs_won") or 0} for p in patched.get("players") or []
    ]
    patched["version"] = SNAPSHOT_VERSION
    return patched


def _index_or_none(value: Any, players: List[Player]) -> Optional[int]:
    if value is None:
        return None
    index = int(value)
    if not 0 <= index < len(players):
        raise ValueError(f"Player index out of range: {index}")
    return index


def state_from_dict(data: Mapping[str, Any]) -> MatchState:
    """
    Decode a match state, migrating older snapshots.

    Args:
        data: Plain data as produced by state_to_dict (any version)

    Returns:
        Fully populated MatchState

    Raises:
        ValueError: If the snapshot is inconsistent (bad phase, index, settings)
        KeyError: If required player fields are missing
    """
    if data.get("version", 1) < SNAPSHOT_VERSION:
        logger.info(f"Migrating snapshot from version {data.get('version', 1)}")
    patched = _migrate(dict(data))

    game_type = GameType(int(patched.get("game_type", GameType.GAME_501.value)))
    players = [_player_from_dict(p, game_type.starting_score) for p in patched["players"]]
    phase = MatchPhase(patched.get("phase", MatchPhase.SETUP.value))

    state = MatchState(
        phase=phase,
        game_type=game_type,
        finish_mode=FinishMode(patched["finish_mode"]),
        total_legs=int(patched["total_legs"]),
        current_leg=int(patched["current_leg"]),
        players=players,
        active_player_index=int(patched.get("active_player_index", 0)),
        winner_index=_index_or_none(patched.get("winner_index"), players),
        leg_winner_index=_index_or_none(patched.get("leg_winner_index"), players),
        start_time=float(patched["start_time"]),
    )

    if phase == MatchPhase.PLAYING and state.active_player is None:
        raise ValueError(f"Active player index out of range: {state.active_player_index}")
    if phase != MatchPhase.FINISHED:
        state.winner_index = None
    if phase != MatchPhase.LEG_FINISHED:
        state.leg_winner_index = None

    return state
