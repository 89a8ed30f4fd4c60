"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It keeps layout sizes, file names and the inference command
   out of the widgets and controllers that use them.
2. Persistence of preferences: It maps the user's QSettings (INI file) onto a
   plain Settings dataclass, falling back to the defaults below.

Exports:
    DEFAULT_CARDS_PATH (str): Cards file used when no path is configured.
    Settings: Resolved user configuration.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

# Organisation / application identity (used by QSettings)
ORG_ID = "tronk"
APP_ID = "tronk"
VISIBLE_APP_NAME = "TRONK"

# Storage
DEFAULT_CARDS_PATH: str = os.path.join(os.getcwd(), "cards.json")

# Inference collaborator: <executable> <subcommand> <model> <prompt>
DEFAULT_INFERENCE_EXECUTABLE = "ollama"
DEFAULT_INFERENCE_SUBCOMMAND = "run"
DEFAULT_INFERENCE_MODEL = "tinyllama"

# Undo history
DEFAULT_HISTORY_LIMIT = 100

# Layout (pixels)
CARD_WIDTH = 180.0
CARD_HEIGHT = 120.0
CARD_SPACING = 10.0
GRID_MARGIN = 10.0
INPUT_STATION_WIDTH = 200.0
INPUT_STATION_RIGHT_MARGIN = 50.0
INPUT_STATION_INPUT_HEIGHT = 50.0
INPUT_STATION_OUTPUT_HEIGHT = 150.0
CARD_NAME_MAX_CHARS = 10

# Milliseconds the window waits for cancelled inference workers on close
CLOSE_WAIT_MS = 3000


def _read_number(qs: QSettings, key: str, kind: type) -> Optional[float]:
    """Numeric value of `key`, or None when it is missing or not a number."""
    raw = qs.value(key)
    if raw is None or raw == "":
        return None
    try:
        value = float(str(raw).strip())
    except ValueError:
        logger.warning(f"Ignoring setting '{key}': '{raw}' is not a number.")
        return None
    if kind is int:
        if not value.is_integer():
            logger.warning(f"Ignoring setting '{key}': '{raw}' is not a whole number.")
            return None
        return int(value)
    return value


@dataclass
class Settings:
    cards_path: str = DEFAULT_CARDS_PATH
    inference_executable: str = DEFAULT_INFERENCE_EXECUTABLE
    inference_subcommand: str = DEFAULT_INFERENCE_SUBCOMMAND
    inference_model: str = DEFAULT_INFERENCE_MODEL
    inference_timeout: Optional[float] = None
    history_limit: Optional[int] = DEFAULT_HISTORY_LIMIT
    log_level: str = "INFO"

    @classmethod
    def from_qsettings(cls, qs: QSettings) -> Settings:
        """Read settings, keeping the default for every missing or broken key."""
        defaults = cls()

        # An explicit 0 means "no timeout" / "unbounded"
        timeout = _read_number(qs, "inference/timeout", float)
        if timeout is None or timeout < 0:
            timeout = defaults.inference_timeout
        elif timeout == 0:
            timeout = None

        limit = _read_number(qs, "history/limit", int)
        if limit is None or limit < 0:
            limit = defaults.history_limit
        elif limit == 0:
            limit = None

        settings = cls(
            cards_path=qs.value("cards/path", defaults.cards_path, type=str) or defaults.cards_path,
            inference_executable=qs.value(
                "inference/executable", defaults.inference_executable, type=str
            ) or defaults.inference_executable,
            inference_subcommand=qs.value(
                "inference/subcommand", defaults.inference_subcommand, type=str
            ) or defaults.inference_subcommand,
            inference_model=qs.value(
                "inference/model", defaults.inference_model, type=str
            ) or defaults.inference_model,
            inference_timeout=timeout,
            history_limit=limit,
            log_level=(qs.value("logging/level", defaults.log_level, type=str) or defaults.log_level).upper(),
        )
        logger.debug(f"Loaded settings from {qs.fileName()}: {settings}")
        return settings

    @property
    def logging_level(self) -> int:
        level = logging.getLevelName(self.log_level)
        if isinstance(level, int):
            return level
        logger.warning(f"Unknown log level '{self.log_level}', falling back to INFO.")
        return logging.INFO
