"""
Console darts scorer.

Enter each turn as up to three dart labels, e.g. "T20 T20 D20", "S5 Miss 19"
or "Bullseye". Special commands: undo, quit.

Usage:
    python scripts/play_match.py Ann Bob
    python scripts/play_match.py Ann Bob Cid --game-type 301 --finish simple --legs 3
    python scripts/play_match.py Ann Bob --history data/history.yaml
"""
import sys
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dartmaster.core import DartThrow, FinishMode, GameType, MatchPhase, load_config
from dartmaster.game import Match, can_submit
from dartmaster.game.summary import results_table
from dartmaster.game.turn import is_projected_bust
from dartmaster.history import MatchHistoryStore
from dartmaster.rating import (
    RatingEngine,
    format_leaderboard,
    rank_players_by_rating,
    total_deltas,
)
import logging

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class ConsoleScorer:
    """Reads turns from stdin and drives a Match."""

    def __init__(self, match: Match, store: MatchHistoryStore, engine: RatingEngine):
        self.match = match
        self.store = store
        self.engine = engine

    def _prompt(self) -> str:
        player = self.match.active_player
        state = self.match.state
        line = f"[Leg {state.current_leg}/{state.total_legs}] {player.name} ({player.current_score})"
        suggestion = self.match.checkout_suggestion()
        if suggestion:
            line += f"  checkout: {suggestion}"
        return line + " > "

    def _read_turn(self, text: str):
        """Parse a turn, returning None (and explaining why) if it is unusable."""
        try:
            darts = [DartThrow.parse(label) for label in text.split()]
        except ValueError as e:
            print(f"  {e}")
            return None

        if len(darts) > 3:
            print("  At most three darts per turn")
            return None

        player = self.match.active_player
        if not can_submit(darts, player.current_score):
            print("  Enter three darts (use Miss for a dart that scored nothing)")
            return None

        if is_projected_bust(player.current_score, darts, self.match.state.finish_mode):
            print("  BUST!")
        return darts

    def run(self) -> None:
        while self.match.phase != MatchPhase.FINISHED:
            if self.match.phase == MatchPhase.LEG_FINISHED:
                print(f"\nLeg won by {self.match.leg_winner.name}!\n")
                self.match.next_leg()
                continue

            try:
                text = input(self._prompt()).strip()
            except EOFError:
                print()
                return

            if text.lower() in ("quit", "exit"):
                return
            if text.lower() == "undo":
                if not self.match.undo():
                    print("  Nothing to undo")
                continue

            darts = self._read_turn(text)
            if darts is None:
                continue

            outcome = self.match.submit_turn(darts)
            if outcome.is_win:
                print("  CHECKOUT!")

        self._show_results()

    def _show_results(self) -> None:
        winner = self.match.winner
        print(f"\nWinner: {winner.name}\n")
        print(results_table(self.match.players))

        ratings = self.store.ratings()
        names = [p.name for p in self.match.players]
        deltas = total_deltas(self.engine.compute_match_deltas(names, winner.name, ratings))
        print("\nElo change:")
        for name in names:
            print(f"  {name:<16}{deltas.get(name, 0):+d}")

        summary = self.match.summary()
        self.store.append(summary)

        print()
        print(format_leaderboard(rank_players_by_rating(self.store.load(), self.engine)))


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Keep score of a 301/501 darts match"
    )

    parser.add_argument(
        "players",
        nargs="+",
        help="Player names in throwing order"
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Config file (default: config/default_config.yaml)"
    )

    parser.add_argument(
        "--game-type",
        type=int,
        choices=[g.value for g in GameType],
        default=None,
        help="Starting score"
    )

    parser.add_argument(
        "--finish",
        choices=[m.value for m in FinishMode],
        default=None,
        help="Finish mode"
    )

    parser.add_argument(
        "--legs",
        type=int,
        choices=[1, 3, 5, 7, 9],
        default=None,
        help="Legs to play (first to the majority wins)"
    )

    parser.add_argument(
        "--history",
        type=str,
        default=None,
        help="Match history file"
    )

    return parser.parse_args()


def main():
    """Run console scorer."""
    args = parse_args()
    config = load_config(args.config)

    engine = RatingEngine.from_config(config)
    store = MatchHistoryStore(Path(args.history) if args.history else config.history_path, engine)

    match = Match(config)
    try:
        match.start_game(args.players, args.game_type, args.finish, args.legs)
    except ValueError as e:
        logger.error(f"Invalid match settings: {e}")
        return

    ConsoleScorer(match, store, engine).run()


if __name__ == "__main__":
    main()
