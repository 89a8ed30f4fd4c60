"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) pieces and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Reads the user's Settings (QSettings, INI format).
2. Instantiates the Data Model (AppState) and loads the cards file.
3. Instantiates the Main Window (View), passing the Model into it.
4. Prevents circular import errors by being the orchestrator.
"""
import logging
import os
import sys

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QCoreApplication, QSettings

from tronk.config import ORG_ID, APP_ID, VISIBLE_APP_NAME, Settings
from tronk.logging_config import setup_logging
from tronk.model.history import UndoHistory
from tronk.model.io import IOManager
from tronk.model.state import AppState
from tronk.view.main_window import MainWindow


def create_app() -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationDisplayName(VISIBLE_APP_NAME)
    return app


def create_state(settings: Settings) -> AppState:
    """Build the AppState and fill it from the cards file."""
    state = AppState(history=UndoHistory(limit=settings.history_limit))
    state.replace_cards(IOManager.load_cards(settings.cards_path))
    return state


def main() -> None:
    # 1. Setup Logging with defaults until the settings are known
    setup_logging()

    # 2. Create the Qt Application
    app = create_app()

    # 3. Read settings and re-apply the configured log level
    settings = Settings.from_qsettings(QSettings())
    if settings.logging_level != logging.INFO:
        setup_logging(level=settings.logging_level)

    # 4. Initialize the Data Model
    state = create_state(settings)

    # 5. Initialize the Main Window, passing the model
    window = MainWindow(state, settings)
    window.show()

    # 6. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
