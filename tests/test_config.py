"""Tests for tronk.config, tronk.utils and tronk.logging_config."""

import logging

from PySide6.QtCore import QSettings

from tronk.config import Settings, DEFAULT_CARDS_PATH, DEFAULT_HISTORY_LIMIT
from tronk.logging_config import setup_logging
from tronk.utils import truncate_name, format_tags


def _qsettings(tmp_path):
    return QSettings(str(tmp_path / "tronk.ini"), QSettings.Format.IniFormat)


def test_settings_defaults_for_empty_file(tmp_path):
    settings = Settings.from_qsettings(_qsettings(tmp_path))
    assert settings.cards_path == DEFAULT_CARDS_PATH
    assert settings.inference_executable == "ollama"
    assert settings.inference_subcommand == "run"
    assert settings.inference_model == "tinyllama"
    assert settings.inference_timeout is None
    assert settings.history_limit == DEFAULT_HISTORY_LIMIT
    assert settings.logging_level == logging.INFO


def test_settings_from_file(tmp_path):
    qs = _qsettings(tmp_path)
    qs.setValue("cards/path", str(tmp_path / "mine.json"))
    qs.setValue("inference/model", "llama3")
    qs.setValue("inference/timeout", 30.0)
    qs.setValue("history/limit", 0)
    qs.setValue("logging/level", "debug")
    qs.sync()

    settings = Settings.from_qsettings(_qsettings(tmp_path))
    assert settings.cards_path == str(tmp_path / "mine.json")
    assert settings.inference_model == "llama3"
    assert settings.inference_timeout == 30.0
    assert settings.history_limit is None
    assert settings.logging_level == logging.DEBUG


def test_broken_numbers_keep_the_defaults(tmp_path):
    qs = _qsettings(tmp_path)
    qs.setValue("history/limit", "abc")
    qs.setValue("inference/timeout", "soon")
    qs.sync()

    settings = Settings.from_qsettings(_qsettings(tmp_path))
    assert settings.history_limit == DEFAULT_HISTORY_LIMIT
    assert settings.inference_timeout is None


def test_negative_or_fractional_limit_keeps_the_default(tmp_path):
    qs = _qsettings(tmp_path)
    qs.setValue("history/limit", "-3")
    qs.sync()
    assert Settings.from_qsettings(_qsettings(tmp_path)).history_limit == DEFAULT_HISTORY_LIMIT

    qs.setValue("history/limit", "2.5")
    qs.sync()
    assert Settings.from_qsettings(_qsettings(tmp_path)).history_limit == DEFAULT_HISTORY_LIMIT


def test_explicit_zero_limit_is_unbounded(tmp_path):
    qs = _qsettings(tmp_path)
    qs.setValue("history/limit", "0")
    qs.sync()
    assert Settings.from_qsettings(_qsettings(tmp_path)).history_limit is None


def test_unknown_log_level_falls_back_to_info():
    assert Settings(log_level="LOUD").logging_level == logging.INFO


def test_truncate_name():
    assert truncate_name("short") == "short"
    assert truncate_name("exactly10!") == "exactly10!"
    assert truncate_name("much longer name") == "much longe..."


def test_format_tags():
    assert format_tags(["a", "b"]) == "#a #b"
    assert format_tags([]) == ""


def test_setup_logging_is_idempotent(tmp_path):
    log_file = tmp_path / "app.log"
    logger = setup_logging(level=logging.DEBUG, log_file=str(log_file))
    setup_logging(level=logging.DEBUG, log_file=str(log_file))
    assert logger.name == "tronk"
    assert len(logger.handlers) == 2
    logging.getLogger("tronk.test").debug("hello file")
    for handler in logger.handlers:
        handler.flush()
    assert "hello file" in log_file.read_text(encoding="utf-8")
    logger.handlers.clear()
