"""
Match state management.

Phase flow:
- SETUP: No match configured
- PLAYING: Turns are submitted for the active player
- LEG_FINISHED: A leg was won, match continues after next_leg()
- FINISHED: A player won the majority of legs

Out-of-phase calls are no-ops.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple, Union
import logging
import math
import time

from dartmaster.core.config_loader import Config
from dartmaster.core.types import DartThrow, FinishMode, GameType, MatchPhase, pad_turn
from .checkout import suggest
from .player import Player
from .summary import SavedMatchSummary, summarize_match
from .turn import TurnOutcome, resolve_turn
from .undo import UndoLog

logger = logging.getLogger(__name__)

VALID_LEG_COUNTS = (1, 3, 5, 7, 9)


def legs_to_win(total_legs: int) -> int:
    """Legs needed to take the match (first to majority)."""
    return math.ceil(total_legs / 2)


@dataclass
class MatchState:
    """Complete, snapshot-able state of a match."""
    phase: MatchPhase = MatchPhase.SETUP
    game_type: GameType = GameType.GAME_501
    finish_mode: FinishMode = FinishMode.DOUBLE
    total_legs: int = 1
    current_leg: int = 1
    players: List[Player] = field(default_factory=list)
    active_player_index: int = 0
    winner_index: Optional[int] = None  # Only in FINISHED
    leg_winner_index: Optional[int] = None  # Only in LEG_FINISHED
    start_time: float = field(default_factory=time.time)

    @property
    def active_player(self) -> Optional[Player]:
        if 0 <= self.active_player_index < len(self.players):
            return self.players[self.active_player_index]
        return None

    @property
    def winner(self) -> Optional[Player]:
        if self.winner_index is None:
            return None
        return self.players[self.winner_index]

    @property
    def leg_winner(self) -> Optional[Player]:
        if self.leg_winner_index is None:
            return None
        return self.players[self.leg_winner_index]


def validate_setup(
        game_type: Union[GameType, int],
        finish_mode: Union[FinishMode, str],
        total_legs: int
) -> Tuple[GameType, FinishMode, int]:
    """
    Validate match settings, accepting raw values (501, "double").

    Returns:
        (game_type, finish_mode, total_legs) as enums/int

    Raises:
        ValueError: On unknown game type, finish mode or an unsupported leg count
    """
    game_type = GameType(game_type)
    finish_mode = FinishMode(finish_mode)
    if total_legs not in VALID_LEG_COUNTS:
        raise ValueError(f"Total legs must be one of {VALID_LEG_COUNTS}, got {total_legs}")
    return game_type, finish_mode, int(total_legs)


class Match:
    """
    Match state machine.

    Owns the match state and its undo log. Every submitted turn pushes a
    snapshot; undo restores the full previous state.
    """

    def __init__(
            self,
            config: Optional[Config] = None,
            on_finished: Optional[Callable[[SavedMatchSummary], None]] = None
    ):
        """
        Initialize match in setup phase.

        Args:
            config: Configuration (default: built-in defaults)
            on_finished: Called once with the summary when the match finishes
        """
        self.config = config or Config()
        self.on_finished = on_finished
        self.state = MatchState()
        self.undo_log: UndoLog[MatchState] = UndoLog(self.config.undo_depth)
        self._summary: Optional[SavedMatchSummary] = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def phase(self) -> MatchPhase:
        return self.state.phase

    @property
    def players(self) -> List[Player]:
        return self.state.players

    @property
    def active_player(self) -> Optional[Player]:
        if self.state.phase != MatchPhase.PLAYING:
            return None
        return self.state.active_player

    @property
    def winner(self) -> Optional[Player]:
        return self.state.winner

    @property
    def leg_winner(self) -> Optional[Player]:
        return self.state.leg_winner

    @property
    def legs_to_win(self) -> int:
        return legs_to_win(self.state.total_legs)

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_log)

    def checkout_suggestion(self) -> Optional[str]:
        """Checkout for the active player's remaining score."""
        player = self.active_player
        if not player:
            return None
        return suggest(player.current_score, self.state.finish_mode)

    def summary(self) -> Optional[SavedMatchSummary]:
        """Match summary, only available once finished (same object every call)."""
        if self.state.phase != MatchPhase.FINISHED:
            return None
        if self._summary is None:
            self._summary = summarize_match(self.state)
        return self._summary

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_game(
            self,
            players: Sequence[Union[str, Player]],
            game_type: Optional[Union[GameType, int]] = None,
            finish_mode: Optional[Union[FinishMode, str]] = None,
            total_legs: Optional[int] = None
    ) -> bool:
        """
        Start a new match.

        Args:
            players: Player names or Player objects (turn order)
            game_type: 301 or 501 (default from config)
            finish_mode: Simple or double-out (default from config)
            total_legs: 1, 3, 5, 7 or 9 (default from config)

        Returns:
            True if started, False if there are no players

        Raises:
            ValueError: On invalid settings
        """
        if game_type is None:
            game_type = self.config.game_type
        if finish_mode is None:
            finish_mode = self.config.finish_mode
        if total_legs is None:
            total_legs = self.config.total_legs
        game_type, finish_mode, total_legs = validate_setup(game_type, finish_mode, total_legs)

        if not players:
            logger.error("Cannot start game: No players")
            return False

        starting_score = game_type.starting_score
        fresh_players = []
        for entry in players:
            if isinstance(entry, Player):
                fresh_players.append(Player(name=entry.name, starting_score=starting_score, id=entry.id))
            else:
                fresh_players.append(Player(name=entry, starting_score=starting_score))

        self.state = MatchState(
            phase=MatchPhase.PLAYING,
            game_type=game_type,
            finish_mode=finish_mode,
            total_legs=total_legs,
            players=fresh_players,
        )
        self.undo_log.clear()
        self._summary = None

        logger.info(
            f"Game started: {starting_score} ({finish_mode.value} out), "
            f"{total_legs} leg(s), {len(fresh_players)} players"
        )
        return True

    def submit_turn(self, darts: Sequence[DartThrow]) -> Optional[TurnOutcome]:
        """
        Submit the active player's turn.

        Args:
            darts: Up to three darts

        Returns:
            TurnOutcome, or None if no match is being played

        Raises:
            ValueError: If more than three darts are given
        """
        state = self.state
        if state.phase != MatchPhase.PLAYING or not state.players:
            logger.warning(f"Turn ignored in phase {state.phase.value}")
            return None

        # Reject malformed turns before taking a snapshot
        slots = pad_turn(darts)
        self.undo_log.push(state)

        player = state.players[state.active_player_index]
        outcome = resolve_turn(
            player.current_score,
            state.finish_mode,
            slots,
            leg_number=state.current_leg,
        )
        player.record_turn(outcome.record)

        if outcome.is_bust:
            logger.info(f"{player.name} busted, score stays {player.current_score}")

        if outcome.is_win:
            self._win_leg(state.active_player_index)
        else:
            state.active_player_index = (state.active_player_index + 1) % len(state.players)

        return outcome

    def _win_leg(self, index: int) -> None:
        """Credit the leg to a player and decide whether the match is over."""
        state = self.state
        player = state.players[index]
        player.legs_won += 1

        if state.total_legs == 1 or player.legs_won >= legs_to_win(state.total_legs):
            state.phase = MatchPhase.FINISHED
            state.winner_index = index
            state.leg_winner_index = None
            logger.info(f"Game finished! Winner: {player.name} ({player.legs_won} leg(s))")

            self._summary = summarize_match(state)
            if self.on_finished:
                self.on_finished(self._summary)
        else:
            state.phase = MatchPhase.LEG_FINISHED
            state.leg_winner_index = index
            logger.info(
                f"Leg {state.current_leg} won by {player.name} "
                f"({player.legs_won}/{legs_to_win(state.total_legs)})"
            )

    def next_leg(self) -> bool:
        """
        Start the next leg.

        Returns:
            True if a new leg started, False if not in LEG_FINISHED
        """
        state = self.state
        if state.phase != MatchPhase.LEG_FINISHED:
            logger.debug(f"next_leg ignored in phase {state.phase.value}")
            return False

        state.current_leg += 1
        for player in state.players:
            player.reset_for_leg()
        state.active_player_index = 0
        state.leg_winner_index = None
        state.phase = MatchPhase.PLAYING
        self.undo_log.clear()

        logger.info(f"Leg {state.current_leg} of {state.total_legs} started")
        return True

    def undo(self) -> bool:
        """
        Restore the state before the last submitted turn.

        Not available once the match is finished.

        Returns:
            True if a snapshot was restored
        """
        if self.state.phase == MatchPhase.FINISHED:
            logger.debug("undo ignored, match is finished")
            return False

        previous = self.undo_log.pop()
        if previous is None:
            return False

        self.state = previous
        logger.info("Last turn undone")
        return True

    def reset_game(self) -> bool:
        """
        Rematch with the same players and settings.

        Returns:
            True if reset, False when there is no match to reset
        """
        state = self.state
        if state.phase == MatchPhase.SETUP:
            logger.debug("reset_game ignored in setup")
            return False

        for player in state.players:
            player.reset()

        state.phase = MatchPhase.PLAYING
        state.current_leg = 1
        state.active_player_index = 0
        state.winner_index = None
        state.leg_winner_index = None
        state.start_time = time.time()
        self.undo_log.clear()
        self._summary = None

        logger.info("Game reset")
        return True

    def new_game(self) -> None:
        """Discard the match and go back to setup."""
        self.state = MatchState()
        self.undo_log.clear()
        self._summary = None
        logger.info("New game, back to setup")
