"""
Grid Navigation
===============
Moves the highlighted-card cursor through the wrapped grid.

The grid is row-major with `columns` cards per row, so moving up or down is
a jump of `columns` indices. Moves that would leave the grid are ignored.
"""
from __future__ import annotations

import logging
from enum import IntEnum
from typing import Iterable, Optional

from tronk.model.state import AppState

logger = logging.getLogger(__name__)


class NavSignal(IntEnum):
    """Navigation inputs. The value is the precedence (lowest wins)."""
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    OPEN = 4


def pick_signal(pressed: Iterable[NavSignal]) -> Optional[NavSignal]:
    """Only one signal is handled per update: Up, Down, Left, Right, Open."""
    return min(pressed, default=None)


def move(index: int, count: int, columns: int, signal: NavSignal) -> int:
    """New cursor position after a directional signal (OPEN never moves)."""
    if columns < 1:
        raise ValueError(f"Column count must be at least 1, got {columns}.")

    if signal == NavSignal.UP:
        return index - columns if index >= columns else index
    if signal == NavSignal.DOWN:
        return index + columns if index + columns < count else index
    if signal == NavSignal.LEFT:
        return index - 1 if index > 0 else index
    if signal == NavSignal.RIGHT:
        return index + 1 if index + 1 < count else index
    return index


class Navigator:
    """Applies navigation signals to an AppState."""

    def __init__(self, state: AppState) -> None:
        self.state = state

    def ensure_cursor(self) -> bool:
        """
        Default the cursor to the first card when there is none.
        Returns True if the cursor was initialized by this call.
        """
        self.state.normalize_cursor()
        if self.state.cursor is None and self.state.cards:
            self.state.cursor = 0
            return True
        return False

    def update(self, pressed: Iterable[NavSignal], columns: int) -> Optional[NavSignal]:
        """
        One navigation step. Returns the signal that was consumed, if any.

        When the cursor had to be initialized, the step ends there and no
        signal is consumed.
        """
        if self.ensure_cursor() or self.state.cursor is None:
            return None

        signal = pick_signal(pressed)
        if signal is None:
            return None

        if signal == NavSignal.OPEN:
            self.open()
        else:
            old = self.state.cursor
            self.state.cursor = move(old, len(self.state.cards), columns, signal)
            logger.debug(f"Cursor {signal.name}: {old} -> {self.state.cursor}")
        return signal

    def open(self) -> None:
        card = self.state.highlighted_card
        if card is None:
            return
        self.state.detailed_card = card
        self.state.system_output = f"Selected card: {card.name}"

    def click(self, index: int) -> None:
        """A card tile was clicked: highlight it and show its details."""
        if not 0 <= index < len(self.state.cards):
            logger.warning(f"Click on card index {index} outside of {len(self.state.cards)} cards.")
            return
        card = self.state.cards[index]
        self.state.cursor = index
        self.state.detailed_card = card
        self.state.system_output = f"Clicked card: {card.name}"

    def close_details(self) -> None:
        self.state.detailed_card = None
