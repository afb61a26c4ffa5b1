"""
Configuration loader with validation and defaults.
"""
import copy
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from .io_utils import load_yaml
from .types import FinishMode, GameType

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/default_config.yaml")


class Config:
    """
    Configuration container with standard darts defaults.
    """

    DEFAULTS = {
        # New match defaults
        "game": {
            "game_type": 501,
            "finish_mode": "double",
            "total_legs": 1,
        },

        "undo": {
            "max_depth": 10,
        },

        # Elo parameters
        "rating": {
            "initial_rating": 1500.0,
            "k_factor": 32.0,
        },

        "history": {
            "path": "data/history.yaml",
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Load configuration from file or use defaults.

        Args:
            config_path: Path to config YAML (None = use defaults)
        """
        self.data = copy.deepcopy(self.DEFAULTS)

        if config_path and Path(config_path).exists():
            try:
                user_config = load_yaml(config_path)
                self._merge_config(user_config)
                logger.info(f"Configuration loaded from {config_path}")
            except Exception as e:
                logger.warning(f"Failed to load config: {e}, using defaults")
        else:
            logger.info("Using default configuration")

    def _merge_config(self, user_config: Dict[str, Any]) -> None:
        """Merge user config with defaults."""
        if not isinstance(user_config, dict):
            raise ValueError("Config root must be a mapping")

        for section, values in user_config.items():
            if section in self.data and isinstance(values, dict):
                self.data[section].update(values)
            else:
                self.data[section] = values

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get config value."""
        return self.data.get(section, {}).get(key, default)

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire config section."""
        return self.data.get(section, {})

    @property
    def game_type(self) -> GameType:
        return GameType(int(self.get("game", "game_type")))

    @property
    def finish_mode(self) -> FinishMode:
        return FinishMode(self.get("game", "finish_mode"))

    @property
    def total_legs(self) -> int:
        return int(self.get("game", "total_legs"))

    @property
    def undo_depth(self) -> int:
        return int(self.get("undo", "max_depth"))

    @property
    def initial_rating(self) -> float:
        return float(self.get("rating", "initial_rating"))

    @property
    def k_factor(self) -> float:
        return float(self.get("rating", "k_factor"))

    @property
    def history_path(self) -> Path:
        return Path(self.get("history", "path"))


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Convenience wrapper, falls back to DEFAULT_CONFIG_PATH.
    """
    return Config(Path(config_path) if config_path else DEFAULT_CONFIG_PATH)
