"""
Print the leaderboard of a match history file.

Usage:
    python scripts/show_ratings.py
    python scripts/show_ratings.py --history data/history.yaml --by winrate
"""
import sys
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dartmaster.core import load_config
from dartmaster.history import MatchHistoryStore
from dartmaster.rating import RatingEngine, format_leaderboard, rank_players, rank_players_by_rating
import logging

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Show player rankings")
    parser.add_argument("--config", type=str, default=None, help="Config file")
    parser.add_argument("--history", type=str, default=None, help="Match history file")
    parser.add_argument(
        "--by",
        choices=["elo", "winrate"],
        default="elo",
        help="Ranking order"
    )
    return parser.parse_args()


def main():
    args = parse_args()
    config = load_config(args.config)
    engine = RatingEngine.from_config(config)
    store = MatchHistoryStore(Path(args.history) if args.history else config.history_path, engine)

    matches = store.load()
    if not matches:
        logger.info(f"No matches in {store.path}")
        return

    rows = rank_players_by_rating(matches, engine) if args.by == "elo" else rank_players(matches)
    print(format_leaderboard(rows))


if __name__ == "__main__":
    main()
