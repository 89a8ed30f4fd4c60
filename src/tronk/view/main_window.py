"""
Main Application Window
=======================
The primary GUI container: the card grid, the input station dock, the card
details dialog and the File / Edit menus.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects key presses, commands and menu actions to the
   controllers, and pushes the resulting AppState back into the widgets.
"""
import logging
import os
from typing import Set

from PySide6.QtWidgets import QMainWindow, QScrollArea, QMessageBox
from PySide6.QtCore import Qt, QPoint
from PySide6.QtGui import QAction, QKeySequence

from tronk.config import Settings, VISIBLE_APP_NAME, CLOSE_WAIT_MS
from tronk.controller.commands import CommandProcessor, CommandKind, CommandResult, complete_inference, undo
from tronk.controller.inference import InferenceClient, InferenceResult
from tronk.controller.navigation import Navigator, NavSignal
from tronk.controller.workers import InferenceWorker
from tronk.model.io import IOManager, CardStoreError
from tronk.model.layout import Layout
from tronk.model.state import AppState
from tronk.view.dialogs.card_details import CardDetailsDialog
from tronk.view.widgets.card_grid import CardGrid
from tronk.view.widgets.input_station import InputStation

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, state: AppState, settings: Settings) -> None:
        super().__init__()
        self.state: AppState = state
        self.settings: Settings = settings

        self.processor = CommandProcessor()
        self.navigator = Navigator(self.state)
        self.inference = InferenceClient.from_settings(settings)
        self._workers: Set[InferenceWorker] = set()

        self.update_window_title()
        self.resize(1200, 800)

        # --- CENTRAL: Card grid inside a scroll area ---
        self.grid = CardGrid()
        self.scroll = QScrollArea()
        self.scroll.setWidget(self.grid)
        self.scroll.setWidgetResizable(True)
        self.scroll.setFocusPolicy(Qt.NoFocus)
        self.setCentralWidget(self.scroll)

        # --- DOCK: Input station (bottom right) ---
        self.input_station = InputStation(self)
        self.addDockWidget(Qt.RightDockWidgetArea, self.input_station)
        layout = self.current_layout()
        self.resizeDocks([self.input_station], [int(layout.input_station_width)], Qt.Horizontal)

        # --- DIALOG: Card details ---
        self.details = CardDetailsDialog(self)

        # --- SIGNAL CONNECTIONS ---
        self.grid.navigation_requested.connect(self.on_navigation)
        self.grid.card_clicked.connect(self.on_card_clicked)
        self.grid.focus_input_requested.connect(self.on_focus_input)
        self.input_station.command_submitted.connect(self.on_command_submitted)
        self.input_station.escape_pressed.connect(self.on_leave_input)
        self.input_station.topLevelChanged.connect(self.on_input_station_floating)
        self.details.finished.connect(self.on_details_closed)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        # Initial Render
        self.navigator.ensure_cursor()
        self.refresh_ui_from_state(cards_changed=True)
        self.grid.setFocus()

    def _create_actions(self) -> None:
        # File Actions
        self.act_save = QAction("Save", self)
        self.act_save.setShortcut(QKeySequence.Save)
        self.act_save.triggered.connect(self.on_file_save)

        self.act_reload = QAction("Reload", self)
        self.act_reload.triggered.connect(self.on_file_reload)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        # Edit Actions
        self.act_undo = QAction("Undo", self)
        self.act_undo.setShortcut(QKeySequence.Undo)
        self.act_undo.triggered.connect(self.on_undo)
        self.act_undo.setEnabled(bool(self.state.history))

        # View Actions
        self.act_input_station = self.input_station.toggleViewAction()

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_save)
        file_menu.addAction(self.act_reload)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        edit_menu = menu_bar.addMenu("&Edit")
        edit_menu.addAction(self.act_undo)

        view_menu = menu_bar.addMenu("&View")
        view_menu.addAction(self.act_input_station)

    # --- HELPER METHODS ---
    def update_window_title(self) -> None:
        """Updates the window title based on filename and dirty state."""
        title = f"{VISIBLE_APP_NAME} - [{os.path.basename(self.settings.cards_path)}"
        if self.state.is_modified:
            title += "*"
        title += "]"
        self.setWindowTitle(title)

    def current_layout(self) -> Layout:
        return Layout.from_viewport(self.width(), self.height())

    def refresh_ui_from_state(self, cards_changed: bool = False) -> None:
        """Push the AppState into the widgets."""
        if cards_changed:
            self.grid.set_cards(self.state.cards, self.state.cursor)
        else:
            self.grid.set_cursor(self.state.cursor)

        tile = self.grid.tile(self.state.cursor) if self.state.cursor is not None else None
        if tile is not None:
            self.scroll.ensureWidgetVisible(tile)

        self.input_station.set_output(self.state.system_output)
        self.input_station.input_text = self.state.input_buffer
        self.input_station.set_busy(self.state.pending_request is not None)
        self.act_undo.setEnabled(bool(self.state.history))

        if self.state.detailed_card is not None:
            if self.details.card != self.state.detailed_card or not self.details.isVisible():
                self._place_details()
                self.details.show_card(self.state.detailed_card)
        elif self.details.isVisible():
            self.details.hide()

        self.update_window_title()

    def _place_details(self) -> None:
        """Dock the details dialog to the right half of the window."""
        geo = self.geometry()
        self.details.resize(geo.width() // 2, geo.height())
        self.details.move(geo.x() + geo.width() // 2, geo.y())

    # --- SLOTS: GRID ---

    def on_navigation(self, signal: NavSignal) -> None:
        consumed = self.navigator.update([signal], self.grid.columns)
        logger.debug(f"Navigation {signal.name} -> consumed={consumed}, cursor={self.state.cursor}")
        self.refresh_ui_from_state()

    def on_card_clicked(self, index: int) -> None:
        self.navigator.click(index)
        self.refresh_ui_from_state()
        self.grid.setFocus()

    def on_details_closed(self, _result: int) -> None:
        self.navigator.close_details()

    # --- SLOTS: INPUT STATION ---

    def on_focus_input(self) -> None:
        self.input_station.focus_input()

    def on_leave_input(self) -> None:
        self.grid.setFocus()

    def on_input_station_floating(self, floating: bool) -> None:
        if not floating:
            return
        # Floating station goes to the bottom right corner of the window
        layout = self.current_layout()
        x, y = layout.input_station_origin()
        self.input_station.resize(int(layout.input_station_width), int(layout.input_station_height))
        self.input_station.move(self.mapToGlobal(QPoint(int(x), int(y))))

    def on_command_submitted(self, text: str) -> None:
        self.state.input_buffer = text
        result = self.processor.process(text, self.state)

        if result.kind == CommandKind.INFERENCE_PENDING:
            self._start_inference(result)
        elif result.kind == CommandKind.CREATED:
            self.navigator.ensure_cursor()

        self.refresh_ui_from_state(cards_changed=result.mutated)

    def _start_inference(self, result: CommandResult) -> None:
        worker = InferenceWorker(self.inference, result.prompt, result.ticket)
        worker.result_ready.connect(self.on_inference_ready)
        worker.error_occurred.connect(self.on_inference_error)
        worker.finished.connect(lambda w=worker: self._on_worker_finished(w))
        self._workers.add(worker)
        worker.start()

    def _on_worker_finished(self, worker: InferenceWorker) -> None:
        self._workers.discard(worker)
        worker.deleteLater()

    def on_inference_ready(self, ticket: int, result: InferenceResult) -> None:
        """
        THREAD SAFE: Handle the answer from the worker thread.
        This runs in the main thread via Qt's signal/slot mechanism.
        """
        if complete_inference(self.state, ticket, result) is not None:
            self.refresh_ui_from_state()

    def on_inference_error(self, ticket: int, msg: str) -> None:
        failed = InferenceResult(ok=False, text=msg)
        if complete_inference(self.state, ticket, failed) is not None:
            self.refresh_ui_from_state()

    # --- SLOTS: MENU ---

    def on_undo(self) -> None:
        undo(self.state)
        self.refresh_ui_from_state(cards_changed=True)

    def on_file_save(self) -> bool:
        try:
            IOManager.save_cards(self.state.cards, self.settings.cards_path)
        except CardStoreError as e:
            QMessageBox.critical(self, "Error", f"Could not save the cards:\n{e}")
            return False

        self.state.is_modified = False
        self.state.system_output = f"saved {len(self.state.cards)} cards"
        self.refresh_ui_from_state()
        return True

    def on_file_reload(self) -> None:
        if self.state.is_modified:
            reply = QMessageBox.question(
                self,
                "Discard changes?",
                "Reloading drops the unsaved cards. Continue?",
                QMessageBox.Yes | QMessageBox.No,
            )
            if reply != QMessageBox.Yes:
                return

        self.state.reset()
        self.state.replace_cards(IOManager.load_cards(self.settings.cards_path))
        self.navigator.ensure_cursor()
        self.refresh_ui_from_state(cards_changed=True)

    def closeEvent(self, event, /) -> None:
        """Handle window close event to prompt for saving if modified."""
        if self.state.is_modified:
            reply = QMessageBox.question(
                self,
                "Save changes?",
                "There are unsaved cards. Save them before quitting?",
                QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel
            )

            if reply == QMessageBox.Save:
                if not self.on_file_save():
                    event.ignore()
                    return
            elif reply == QMessageBox.Cancel:
                event.ignore()
                return

        self.stop_workers()
        event.accept()

    def stop_workers(self) -> None:
        """Cancel the requests still in flight and wait a bounded time for their threads."""
        self.state.cancel_pending()
        workers = list(self._workers)
        for worker in workers:
            worker.cancel()
        for worker in workers:
            if not worker.wait(CLOSE_WAIT_MS):
                logger.warning(f"Inference request #{worker.ticket} did not stop within {CLOSE_WAIT_MS} ms.")
