"""
Core module - shared data types, utilities, and configuration.
"""
from .types import (
    BULL,
    BULLSEYE,
    DartState,
    DartThrow,
    FinishMode,
    GameType,
    MatchPhase,
    TurnRecord,
    pad_turn,
)
from .io_utils import (
    atomic_write_yaml,
    load_yaml,
)
from .math_utils import round_half_up, round_to_int
from .config_loader import Config, load_config

__all__ = [
    # Types
    "BULL",
    "BULLSEYE",
    "DartState",
    "DartThrow",
    "FinishMode",
    "GameType",
    "MatchPhase",
    "TurnRecord",
    "pad_turn",
    # I/O
    "atomic_write_yaml",
    "load_yaml",
    # Numeric
    "round_half_up",
    "round_to_int",
    # Config
    "Config",
    "load_config",
]
