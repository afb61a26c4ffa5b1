"""
Core data types for the darts scorekeeping engine.
Defines contracts between modules to ensure stable interfaces.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple

# Scoring constants
BULL = 25  # Outer bull
BULLSEYE = 50  # Inner bull (double bull)
MAX_SECTOR = 20
TURN_SLOTS = 3  # Darts per turn


class GameType(Enum):
    """Countdown variant, value is the starting score."""
    GAME_301 = 301
    GAME_501 = 501

    @property
    def starting_score(self) -> int:
        return self.value


class FinishMode(Enum):
    """How a leg has to be finished."""
    SIMPLE = "simple"  # Any dart reaching exactly zero wins
    DOUBLE = "double"  # Last scoring dart must be a double or the bullseye


class MatchPhase(Enum):
    """Match lifecycle phases."""
    SETUP = "setup"
    PLAYING = "playing"
    LEG_FINISHED = "legFinished"
    FINISHED = "finished"


class DartState(Enum):
    """State of a single dart slot in a turn."""
    EMPTY = "empty"  # Not thrown (turn ended early)
    MISS = "miss"  # Thrown, scored nothing
    SCORED = "scored"


@dataclass(frozen=True)
class DartThrow:
    """
    One of the three dart slots of a turn.

    The value/multiplier pair is normalized on construction:
    - None means the slot is empty
    - 0 is a miss (multiplier forced to 1)
    - 50 (bullseye) always carries multiplier 1
    - 25 (bull) carries 1 or 2; a triple bull is clamped to 2
    """
    value: Optional[int] = None  # 0-20, 25, 50 or None
    multiplier: int = 1  # 1=Single, 2=Double, 3=Triple
    state: DartState = field(init=False, default=DartState.EMPTY)

    def __post_init__(self):
        value = self.value
        multiplier = self.multiplier

        if multiplier not in (1, 2, 3):
            raise ValueError(f"Multiplier must be 1, 2 or 3, got {multiplier}")

        if value is None:
            state = DartState.EMPTY
            multiplier = 1
        elif value == 0:
            state = DartState.MISS
            multiplier = 1
        elif value == BULLSEYE:
            state = DartState.SCORED
            multiplier = 1
        elif value == BULL:
            state = DartState.SCORED
            multiplier = min(multiplier, 2)
        elif 1 <= value <= MAX_SECTOR:
            state = DartState.SCORED
        else:
            raise ValueError(f"Invalid dart value: {value}")

        object.__setattr__(self, "multiplier", multiplier)
        object.__setattr__(self, "state", state)

    @classmethod
    def empty(cls) -> "DartThrow":
        return cls()

    @classmethod
    def miss(cls) -> "DartThrow":
        return cls(0)

    @classmethod
    def single(cls, value: int) -> "DartThrow":
        return cls(value, 1)

    @classmethod
    def double(cls, value: int) -> "DartThrow":
        return cls(value, 2)

    @classmethod
    def triple(cls, value: int) -> "DartThrow":
        return cls(value, 3)

    @classmethod
    def parse(cls, label: str) -> "DartThrow":
        """
        Parse a dart label.

        Accepted forms (case-insensitive):
            S20, D16, T19, 20   - sector hits
            Bull, 25, SBull     - outer bull
            DBull, D25          - double bull (scores 50)
            Bullseye, 50        - bullseye
            Miss, M, 0          - miss
            -, empty string     - empty slot

        Args:
            label: Text label

        Returns:
            Parsed DartThrow

        Raises:
            ValueError: If the label cannot be parsed
        """
        text = label.strip().lower()

        if text in ("", "-"):
            return cls.empty()
        if text in ("miss", "m", "0"):
            return cls.miss()
        if text in ("bull", "sbull", "25", "s25"):
            return cls(BULL, 1)
        if text in ("dbull", "d25"):
            return cls(BULL, 2)
        if text in ("bullseye", "50"):
            return cls(BULLSEYE, 1)

        prefixes = {"s": 1, "d": 2, "t": 3}
        multiplier = 1
        if text[0] in prefixes:
            multiplier = prefixes[text[0]]
            text = text[1:]

        if not text.isdigit():
            raise ValueError(f"Cannot parse dart label: {label!r}")

        value = int(text)
        if not 1 <= value <= MAX_SECTOR:
            raise ValueError(f"Cannot parse dart label: {label!r}")

        return cls(value, multiplier)

    @property
    def score(self) -> int:
        """Points contributed by this dart."""
        if self.state != DartState.SCORED:
            return 0
        if self.value == BULLSEYE:
            return BULLSEYE
        return self.value * self.multiplier

    @property
    def is_thrown(self) -> bool:
        return self.state != DartState.EMPTY

    @property
    def is_double_finish(self) -> bool:
        """Whether this dart may end a leg in double-out mode."""
        return self.score > 0 and (self.multiplier == 2 or self.value == BULLSEYE)

    @property
    def label(self) -> str:
        """Short human-readable label (inverse of parse)."""
        if self.state == DartState.EMPTY:
            return "-"
        if self.state == DartState.MISS:
            return "Miss"
        if self.value == BULLSEYE:
            return "Bullseye"
        if self.value == BULL:
            return "DBull" if self.multiplier == 2 else "Bull"
        return f"{'SDT'[self.multiplier - 1]}{self.value}"


def pad_turn(darts: Sequence[DartThrow]) -> Tuple[DartThrow, DartThrow, DartThrow]:
    """
    Pad a turn to exactly three slots with empty darts.

    Raises:
        ValueError: If more than three darts are given
    """
    if len(darts) > TURN_SLOTS:
        raise ValueError(f"A turn has at most {TURN_SLOTS} darts, got {len(darts)}")
    padded = list(darts) + [DartThrow.empty()] * (TURN_SLOTS - len(darts))
    return tuple(padded)


@dataclass(frozen=True)
class TurnRecord:
    """
    Immutable snapshot of one completed turn.
    """
    darts: Tuple[DartThrow, DartThrow, DartThrow]
    total: int  # Sum of all dart scores, also when busted
    score_after: int  # Remaining score (pre-turn score on bust)
    was_bust: bool
    is_win: bool
    darts_thrown: int  # Non-empty slots
    leg_number: int

    @property
    def scores(self) -> Tuple[int, ...]:
        """Per-dart scores."""
        return tuple(dart.score for dart in self.darts)

    @property
    def points(self) -> int:
        """Points that counted towards the score (0 on bust)."""
        return 0 if self.was_bust else self.total
