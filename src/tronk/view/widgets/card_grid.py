"""
Card Grid
Wrapped grid of card tiles with a highlighted cursor.
Handles the grid's own key presses and reflows when the width changes.
"""
import html
from typing import List, Optional

from PySide6.QtWidgets import QWidget, QFrame, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QSizePolicy
from PySide6.QtCore import Qt, Signal

from tronk.config import CARD_WIDTH, CARD_HEIGHT, CARD_SPACING, GRID_MARGIN
from tronk.controller.navigation import NavSignal
from tronk.model.card import Card
from tronk.model.layout import Layout
from tronk.utils import truncate_name, format_tags

KEY_TO_SIGNAL = {
    Qt.Key_Up: NavSignal.UP,
    Qt.Key_Down: NavSignal.DOWN,
    Qt.Key_Left: NavSignal.LEFT,
    Qt.Key_Right: NavSignal.RIGHT,
    Qt.Key_O: NavSignal.OPEN,
}

TILE_STYLE = "QFrame#cardTile {{ border: {width}px solid {color}; border-radius: 4px; }}"


class CardTile(QFrame):
    clicked = Signal(int)

    def __init__(self, card: Card, index: int, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.card = card
        self.index = index
        self.setObjectName("cardTile")
        self.setFixedSize(int(CARD_WIDTH), int(CARD_HEIGHT))
        self.setCursor(Qt.PointingHandCursor)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(4)

        # Image placeholder
        img = QLabel("img")
        img.setAlignment(Qt.AlignCenter)
        img.setStyleSheet("color: gray;")
        img.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        layout.addWidget(img)

        line = QFrame()
        line.setFrameShape(QFrame.HLine)
        line.setFrameShadow(QFrame.Sunken)
        layout.addWidget(line)

        bottom = QHBoxLayout()
        bottom.setSpacing(6)
        # Card text is user input, never markup
        self.lbl_name = QLabel(truncate_name(card.name))
        self.lbl_name.setTextFormat(Qt.PlainText)
        self.lbl_name.setToolTip(f"<p>{html.escape(card.name)}</p>")
        bottom.addWidget(self.lbl_name)

        self.lbl_tags = QLabel(format_tags(card.tags))
        self.lbl_tags.setTextFormat(Qt.PlainText)
        self.lbl_tags.setStyleSheet("color: #4a6fa5;")
        bottom.addWidget(self.lbl_tags, 1)
        layout.addLayout(bottom)

        self.set_selected(False)

    def set_selected(self, selected: bool) -> None:
        if selected:
            self.setStyleSheet(TILE_STYLE.format(width=2, color="lightblue"))
        else:
            self.setStyleSheet(TILE_STYLE.format(width=1, color="darkblue"))

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            self.clicked.emit(self.index)
            event.accept()
            return
        super().mousePressEvent(event)


class CardGrid(QWidget):
    # Signals for the main window
    navigation_requested = Signal(object)  # NavSignal
    card_clicked = Signal(int)
    focus_input_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setFocusPolicy(Qt.StrongFocus)

        self._tiles: List[CardTile] = []
        self._columns: int = 1
        self._cursor: Optional[int] = None

        self.grid = QGridLayout(self)
        m = int(GRID_MARGIN)
        self.grid.setContentsMargins(m, m, m, m)
        self.grid.setSpacing(int(CARD_SPACING))
        self.grid.setAlignment(Qt.AlignTop | Qt.AlignLeft)

        self.lbl_empty = QLabel("No cards yet. Press '/' and type: /add cardname #tag1,tag2 @folder1,folder2")
        self.lbl_empty.setStyleSheet("color: gray;")
        self.grid.addWidget(self.lbl_empty, 0, 0)

    # --- PROPERTIES ---

    @property
    def columns(self) -> int:
        return self._columns

    def tile(self, index: int) -> Optional[CardTile]:
        if 0 <= index < len(self._tiles):
            return self._tiles[index]
        return None

    # --- CONTENT ---

    def set_cards(self, cards: List[Card], cursor: Optional[int] = None) -> None:
        """Rebuild every tile. Cheap enough for a personal collection."""
        for tile in self._tiles:
            self.grid.removeWidget(tile)
            tile.deleteLater()
        self._tiles = []

        for index, card in enumerate(cards):
            tile = CardTile(card, index, self)
            tile.clicked.connect(self.card_clicked)
            self._tiles.append(tile)

        self.lbl_empty.setVisible(not cards)
        self._columns = self._columns_for_width(self.width())
        self._reflow()
        self._cursor = None
        self.set_cursor(cursor)

    def set_cursor(self, cursor: Optional[int]) -> None:
        if self._cursor == cursor:
            return
        old = self.tile(self._cursor) if self._cursor is not None else None
        if old is not None:
            old.set_selected(False)
        self._cursor = cursor
        new = self.tile(cursor) if cursor is not None else None
        if new is not None:
            new.set_selected(True)

    # --- LAYOUT ---

    def _columns_for_width(self, width: int) -> int:
        return Layout.from_viewport(width, self.height()).columns

    def _reflow(self) -> None:
        for tile in self._tiles:
            self.grid.removeWidget(tile)
        for index, tile in enumerate(self._tiles):
            row, col = divmod(index, self._columns)
            self.grid.addWidget(tile, row, col)

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        columns = self._columns_for_width(event.size().width())
        if columns != self._columns:
            self._columns = columns
            self._reflow()

    # --- INPUT ---

    def keyPressEvent(self, event) -> None:
        key = event.key()
        if key in KEY_TO_SIGNAL:
            self.navigation_requested.emit(KEY_TO_SIGNAL[key])
            event.accept()
        elif key == Qt.Key_Slash:
            self.focus_input_requested.emit()
            event.accept()
        else:
            super().keyPressEvent(event)
