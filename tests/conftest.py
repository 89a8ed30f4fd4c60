"""Shared test fixtures."""

import os

import pytest

from tronk.controller.commands import CommandProcessor
from tronk.model.card import Card
from tronk.model.history import UndoHistory
from tronk.model.state import AppState


@pytest.fixture
def state():
    """Empty AppState with an unbounded undo history."""
    return AppState()


@pytest.fixture
def processor():
    """Processor without a synchronous runner: /ollama comes back pending."""
    return CommandProcessor()


@pytest.fixture
def ten_cards_state():
    """AppState holding ten cards named card0..card9."""
    s = AppState(history=UndoHistory())
    s.replace_cards([Card(name=f"card{i}", tags=[f"t{i}"]) for i in range(10)])
    return s


@pytest.fixture
def cards_path(tmp_path):
    return str(tmp_path / "cards.json")


@pytest.fixture(scope="session")
def qapp():
    """Offscreen Qt application shared by the QThread and widget tests."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app
