"""
Undo History
Full snapshots of the card list, pushed before every mutation.
"""
from __future__ import annotations

import copy
import logging
from collections import deque
from typing import Deque, List, Optional

from tronk.model.card import Card

logger = logging.getLogger(__name__)


class UndoHistory:
    """
    Stack of card-list snapshots.

    With a limit set, the oldest snapshot is discarded once the stack is full.
    A limit of None keeps every snapshot.
    """

    def __init__(self, limit: Optional[int] = None) -> None:
        if limit is not None and limit < 1:
            raise ValueError(f"Undo limit must be positive, got {limit}.")
        self.limit = limit
        self._snapshots: Deque[List[Card]] = deque(maxlen=limit)

    def __len__(self) -> int:
        return len(self._snapshots)

    def __bool__(self) -> bool:
        return bool(self._snapshots)

    @property
    def snapshots(self) -> List[List[Card]]:
        """Oldest first. Copies, so callers cannot rewrite history."""
        return [list(s) for s in self._snapshots]

    def push(self, cards: List[Card]) -> None:
        if self.limit is not None and len(self._snapshots) == self.limit:
            logger.debug(f"Undo history full ({self.limit}), dropping oldest snapshot.")
        self._snapshots.append(copy.deepcopy(cards))

    def pop(self) -> List[Card]:
        """
        Remove and return the most recent snapshot.

        Raises:
            IndexError: the history is empty.
        """
        if not self._snapshots:
            raise IndexError("Undo history is empty.")
        return self._snapshots.pop()

    def clear(self) -> None:
        self._snapshots.clear()
