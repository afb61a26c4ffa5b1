"""
Local YAML-backed match history.

Stores finished-match summaries in a single YAML document and serves the
inputs the rating engine and leaderboard need. The set of known player names
is cached per store and invalidated by every write.
"""
from pathlib import Path
from typing import Dict, List, Optional
import logging

from dartmaster.core.io_utils import atomic_write_yaml, load_yaml
from dartmaster.game.summary import SavedMatchSummary
from dartmaster.rating.elo import RatingEngine

logger = logging.getLogger(__name__)


class PlayerNameCache:
    """Sorted player names seen in the history, computed on demand."""

    def __init__(self):
        self._names: Optional[List[str]] = None

    @property
    def is_valid(self) -> bool:
        return self._names is not None

    def get(self, matches_loader) -> List[str]:
        """
        Return cached names, loading matches only when invalid.

        Args:
            matches_loader: Callable returning the match summaries
        """
        if self._names is None:
            names = {name for match in matches_loader() for name in match.player_names if name}
            self._names = sorted(names, key=str.casefold)
            logger.debug(f"Player name cache filled ({len(self._names)} names)")
        return list(self._names)

    def invalidate(self) -> None:
        self._names = None


class MatchHistoryStore:
    """
    Match summaries persisted to a YAML file.

    Usage:
        store = MatchHistoryStore(Path("data/history.yaml"))
        store.append(match.summary())
        ratings = store.ratings()
    """

    def __init__(self, path: Path, engine: Optional[RatingEngine] = None):
        """
        Args:
            path: YAML file (created on first append)
            engine: Rating engine used by ratings() (default parameters if None)
        """
        self.path = Path(path)
        self.engine = engine or RatingEngine()
        self.name_cache = PlayerNameCache()

    def load(self) -> List[SavedMatchSummary]:
        """
        Load all summaries, oldest first.

        A missing file is an empty history. Malformed entries are skipped.
        """
        if not self.path.exists():
            return []

        data = load_yaml(self.path)
        raw_matches = data.get("matches") if isinstance(data, dict) else None

        matches = []
        for entry in raw_matches or []:
            try:
                matches.append(SavedMatchSummary.from_dict(entry))
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed history entry: {e}")

        matches.sort(key=lambda m: m.timestamp if m.timestamp is not None else 0.0)
        return matches

    def append(self, summary: SavedMatchSummary) -> None:
        """Add a summary and rewrite the file atomically."""
        matches = self.load()
        matches.append(summary)
        self._write(matches)
        self.name_cache.invalidate()
        logger.info(f"Match saved to {self.path} (winner: {summary.winner})")

    def replace_all(self, summaries: List[SavedMatchSummary]) -> int:
        """
        Overwrite the history (restore from backup).

        Returns:
            Number of summaries written
        """
        self._write(list(summaries))
        self.name_cache.invalidate()
        logger.info(f"History replaced with {len(summaries)} matches")
        return len(summaries)

    def clear(self) -> None:
        self._write([])
        self.name_cache.invalidate()

    def player_names(self) -> List[str]:
        """All player names in the history, case-insensitively sorted."""
        return self.name_cache.get(self.load)

    def ratings(self) -> Dict[str, float]:
        """Elo ratings over the whole history."""
        return self.engine.compute_ratings(self.load())

    def _write(self, matches: List[SavedMatchSummary]) -> None:
        atomic_write_yaml(self.path, {"matches": [m.to_dict() for m in matches]})
