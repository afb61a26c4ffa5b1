"""
Bounded undo history of match snapshots.
"""
from collections import deque
from typing import Deque, Generic, Optional, TypeVar
import copy
import logging

logger = logging.getLogger(__name__)

DEFAULT_UNDO_DEPTH = 10

T = TypeVar("T")


class UndoLog(Generic[T]):
    """
    Most-recent-last stack of deep-copied states.

    Pushing beyond max_depth silently drops the oldest snapshot.
    Popping an empty log returns None.
    """

    def __init__(self, max_depth: int = DEFAULT_UNDO_DEPTH):
        if max_depth < 1:
            raise ValueError("max_depth must be positive")
        self.max_depth = max_depth
        self._snapshots: Deque[T] = deque(maxlen=max_depth)

    def push(self, state: T) -> None:
        """Store a deep copy of state."""
        self._snapshots.append(copy.deepcopy(state))

    def pop(self) -> Optional[T]:
        """Remove and return the most recent snapshot."""
        if not self._snapshots:
            return None
        return self._snapshots.pop()

    def peek(self) -> Optional[T]:
        if not self._snapshots:
            return None
        return self._snapshots[-1]

    def clear(self) -> None:
        if self._snapshots:
            logger.debug(f"Undo log cleared ({len(self._snapshots)} snapshots)")
        self._snapshots.clear()

    def __len__(self) -> int:
        return len(self._snapshots)

    def __bool__(self) -> bool:
        return bool(self._snapshots)
