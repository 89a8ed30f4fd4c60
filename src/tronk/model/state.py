"""
Application State (Data Model)
==============================
This module defines the central data structure for the running application.

Why is this file needed?
------------------------
1. State Management: It holds the cards, undo history, grid cursor and the
   input station buffers in one place.
2. Ownership: The main window owns exactly one instance and hands it to the
   controllers; nothing in here is global.
3. Decoupling: Views read from this object; Controllers write to this object.

Classes:
    AppState: The main container class.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from tronk.model.card import Card
from tronk.model.history import UndoHistory

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """
    Holds the entire state of the running application.
    Pass this instance to your Controllers and Views.
    """
    cards: List[Card] = field(default_factory=list)
    history: UndoHistory = field(default_factory=UndoHistory)

    # Grid navigation
    cursor: Optional[int] = None
    detailed_card: Optional[Card] = None

    # Input station
    system_output: str = ""
    input_buffer: str = ""

    # Ticket of the inference request whose answer we are waiting for
    pending_request: Optional[int] = None
    _last_ticket: int = 0

    # Unsaved changes since the last load/save
    is_modified: bool = False

    def replace_cards(self, cards: List[Card]) -> None:
        """Swap the whole card list and keep the cursor in range."""
        self.cards = list(cards)
        self.normalize_cursor()

    def normalize_cursor(self) -> None:
        if self.cursor is None:
            return
        if not self.cards:
            self.cursor = None
        elif self.cursor >= len(self.cards):
            self.cursor = len(self.cards) - 1

    @property
    def highlighted_card(self) -> Optional[Card]:
        if self.cursor is None or not 0 <= self.cursor < len(self.cards):
            return None
        return self.cards[self.cursor]

    def issue_ticket(self) -> int:
        """Start a new inference request; any older request becomes stale."""
        self._last_ticket += 1
        self.pending_request = self._last_ticket
        return self._last_ticket

    def cancel_pending(self) -> None:
        if self.pending_request is not None:
            logger.debug(f"Dropping pending inference request #{self.pending_request}.")
        self.pending_request = None

    def reset(self) -> None:
        """Clear all data, e.g. before loading another file."""
        self.cards = []
        self.history.clear()
        self.cursor = None
        self.detailed_card = None
        self.system_output = ""
        self.input_buffer = ""
        self.pending_request = None
        self.is_modified = False
        logger.info("Application state has been reset.")
