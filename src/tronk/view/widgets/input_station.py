"""
Input Station
Dock with the system output and the single-line command input.
"""
from typing import Optional

from PySide6.QtWidgets import QDockWidget, QWidget, QVBoxLayout, QLabel, QLineEdit, QProgressBar, QScrollArea
from PySide6.QtCore import Qt, Signal

from tronk.config import INPUT_STATION_WIDTH, INPUT_STATION_INPUT_HEIGHT, INPUT_STATION_OUTPUT_HEIGHT


class CommandLine(QLineEdit):
    escape_pressed = Signal()

    def keyPressEvent(self, event) -> None:
        if event.key() == Qt.Key_Escape:
            self.escape_pressed.emit()
            event.accept()
            return
        super().keyPressEvent(event)


class InputStation(QDockWidget):
    # Emitted with the raw text when the user presses Enter
    command_submitted = Signal(str)
    escape_pressed = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__("input station", parent)
        self.setObjectName("inputStation")
        self.setFeatures(
            QDockWidget.DockWidgetClosable | QDockWidget.DockWidgetMovable | QDockWidget.DockWidgetFloatable
        )

        content = QWidget()
        content.setMinimumWidth(int(INPUT_STATION_WIDTH))
        layout = QVBoxLayout(content)
        layout.setContentsMargins(8, 8, 8, 8)

        # --- System output ---
        self.lbl_output = QLabel("system output: ")
        self.lbl_output.setTextFormat(Qt.PlainText)
        self.lbl_output.setWordWrap(True)
        self.lbl_output.setAlignment(Qt.AlignTop | Qt.AlignLeft)
        self.lbl_output.setTextInteractionFlags(Qt.TextSelectableByMouse)

        scroller = QScrollArea()
        scroller.setWidget(self.lbl_output)
        scroller.setWidgetResizable(True)
        scroller.setMinimumHeight(int(INPUT_STATION_OUTPUT_HEIGHT))
        layout.addWidget(scroller, 1)

        # --- Busy indicator (pending inference) ---
        self.progress = QProgressBar()
        self.progress.setRange(0, 0)  # Indeterminate
        self.progress.setTextVisible(False)
        self.progress.setMaximumHeight(6)
        self.progress.setVisible(False)
        layout.addWidget(self.progress)

        # --- Input field ---
        self.edit = CommandLine()
        self.edit.setPlaceholderText("/add cardname #tag1,tag2 @folder1,folder2")
        self.edit.setMinimumHeight(int(INPUT_STATION_INPUT_HEIGHT) // 2)
        self.edit.returnPressed.connect(self._on_return_pressed)
        self.edit.escape_pressed.connect(self.escape_pressed)
        layout.addWidget(self.edit)

        self.setWidget(content)

    # --- PROPERTIES ---

    @property
    def input_text(self) -> str:
        return self.edit.text()

    @input_text.setter
    def input_text(self, text: str) -> None:
        if self.edit.text() != text:
            self.edit.setText(text)

    def set_output(self, text: str) -> None:
        self.lbl_output.setText(f"system output: {text}")

    def set_busy(self, busy: bool) -> None:
        self.progress.setVisible(busy)

    def focus_input(self) -> None:
        """Open the station if it was closed and move the keyboard focus into it."""
        if not self.isVisible():
            self.show()
        self.raise_()
        self.edit.setFocus(Qt.ShortcutFocusReason)
        if not self.edit.text():
            self.edit.setText("/")
        self.edit.end(False)

    # --- SLOTS ---

    def _on_return_pressed(self) -> None:
        self.command_submitted.emit(self.edit.text())
