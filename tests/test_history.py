"""
Tests for snapshot migration and the match history store.
"""
from pathlib import Path
import pytest

from dartmaster.core import DartThrow, FinishMode, MatchPhase, atomic_write_yaml, load_yaml
from dartmaster.game import Match, SavedMatchSummary, SavedPlayerStats
from dartmaster.history import MatchHistoryStore, state_from_dict, state_to_dict
from dartmaster.history.migration import SNAPSHOT_VERSION


def darts(*labels):
    return [DartThrow.parse(label) for label in labels]


def played_match():
    """Match in progress with a few turns, including a bust."""
    match = Match()
    match.start_game(["Ann", "Bob"], 301, "double", 3)
    match.submit_turn(darts("T20", "T20", "T20"))
    match.submit_turn(darts("S5", "Miss"))
    match.submit_turn(darts("T20", "T20", "T20"))  # bust
    return match


def summary(winner, names, timestamp):
    return SavedMatchSummary(
        winner=winner,
        players=tuple(SavedPlayerStats(n, average=50.0, total_darts=30) for n in names),
        timestamp=timestamp,
    )


def test_snapshot_round_trip():
    """Test a match state survives conversion to plain data."""
    state = played_match().state

    data = state_to_dict(state)
    assert data["version"] == SNAPSHOT_VERSION
    assert data["players"][0]["history"][1]["was_bust"] is True

    restored = state_from_dict(data)
    assert restored == state


def test_snapshot_round_trip_through_yaml(tmp_path: Path):
    """Test snapshots survive a YAML file."""
    state = played_match().state
    path = tmp_path / "snapshot.yaml"

    atomic_write_yaml(path, state_to_dict(state))
    restored = state_from_dict(load_yaml(path))

    assert restored == state
    assert restored.players[1].history[0].darts[2] == DartThrow.empty()


def test_legacy_snapshot_defaults():
    """Test snapshots without newer fields get defaults."""
    legacy = {
        "phase": "playing",
        "game_type": 501,
        "players": [
            {"name": "Ann", "current_score": 441, "history": []},
            {"name": "Bob", "legs_won": None},
        ],
        "active_player_index": 1,
    }

    state = state_from_dict(legacy)

    assert state.finish_mode == FinishMode.DOUBLE
    assert state.total_legs == 1
    assert state.current_leg == 1
    assert state.start_time > 0
    assert [p.legs_won for p in state.players] == [0, 0]
    assert state.players[0].current_score == 441
    assert state.players[1].current_score == 501
    assert state.active_player.name == "Bob"


def test_snapshot_invalid_active_player():
    """Test a playing snapshot must have a valid active player."""
    data = state_to_dict(played_match().state)
    data["active_player_index"] = 5
    with pytest.raises(ValueError):
        state_from_dict(data)


def test_snapshot_drops_winner_outside_finished():
    """Test winner indices only survive in their phases."""
    data = state_to_dict(played_match().state)
    data["winner_index"] = 0
    data["leg_winner_index"] = 1

    state = state_from_dict(data)
    assert state.phase == MatchPhase.PLAYING
    assert state.winner_index is None
    assert state.leg_winner_index is None


def test_snapshot_invalid_values():
    """Test unknown enum values are rejected."""
    data = state_to_dict(played_match().state)
    data["finish_mode"] = "triple"
    with pytest.raises(ValueError):
        state_from_dict(data)


def test_store_missing_file(tmp_path: Path):
    """Test a missing history file is empty."""
    store = MatchHistoryStore(tmp_path / "history.yaml")
    assert store.load() == []
    assert store.player_names() == []
    assert store.ratings() == {}


def test_store_append_and_load(tmp_path: Path):
    """Test summaries are persisted and loaded oldest first."""
    store = MatchHistoryStore(tmp_path / "history.yaml")
    late = summary("Bob", ["Ann", "Bob"], 20.0)
    early = summary("Ann", ["Ann", "Bob"], 10.0)

    store.append(late)
    store.append(early)

    loaded = store.load()
    assert [m.id for m in loaded] == [early.id, late.id]
    assert loaded[0] == early

    # New store instance reads the same file
    assert MatchHistoryStore(store.path).load() == loaded


def test_store_ratings(tmp_path: Path):
    """Test ratings are computed over the stored history."""
    store = MatchHistoryStore(tmp_path / "history.yaml")
    store.append(summary("Ann", ["Ann", "Bob"], 1.0))

    ratings = store.ratings()
    assert ratings["Ann"] == pytest.approx(1516.0)
    assert ratings["Bob"] == pytest.approx(1484.0)


def test_player_name_cache(tmp_path: Path):
    """Test names are cached until the next write."""
    store = MatchHistoryStore(tmp_path / "history.yaml")
    store.append(summary("bob", ["bob", "Ann"], 1.0))

    assert store.player_names() == ["Ann", "bob"]
    assert store.name_cache.is_valid

    store.append(summary("Cid", ["Cid", "Ann"], 2.0))
    assert not store.name_cache.is_valid
    assert store.player_names() == ["Ann", "bob", "Cid"]

    store.clear()
    assert store.player_names() == []


def test_store_replace_all(tmp_path: Path):
    """Test restoring a history from backup."""
    store = MatchHistoryStore(tmp_path / "history.yaml")
    store.append(summary("Ann", ["Ann", "Bob"], 1.0))

    backup = [summary("Cid", ["Cid", "Dee"], 5.0), summary("Dee", ["Cid", "Dee"], 6.0)]
    assert store.replace_all(backup) == 2
    assert [m.winner for m in store.load()] == ["Cid", "Dee"]
    assert store.player_names() == ["Cid", "Dee"]


def test_store_skips_malformed_entries(tmp_path: Path):
    """Test broken entries are skipped instead of failing the load."""
    path = tmp_path / "history.yaml"
    good = summary("Ann", ["Ann", "Bob"], 1.0)
    atomic_write_yaml(path, {"matches": ["garbage", good.to_dict(), {"players": "x"}]})

    loaded = MatchHistoryStore(path).load()
    assert loaded == [good]
