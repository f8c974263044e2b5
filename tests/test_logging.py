"""Tests for logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from csspipe.logging import configure_logging


def _cleanup(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_configure_logging_defaults_to_console_only():
    logger = configure_logging()

    try:
        assert logger.name == "csspipe"
        assert logger.level == logging.INFO
        assert not any(hasattr(h, "baseFilename") for h in logger.handlers)
        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
    finally:
        _cleanup(logger)


@pytest.mark.parametrize(
    "provided,expected",
    [
        (Path("custom.log"), "custom.log"),
        (Path("logs"), "logs/csspipe.log"),
    ],
)
def test_configure_logging_with_override(tmp_path, monkeypatch, provided, expected):
    monkeypatch.chdir(tmp_path)
    logger = configure_logging(log_path=provided, level="debug")

    try:
        handler = next(h for h in logger.handlers if hasattr(h, "baseFilename"))
        log_path = Path(handler.baseFilename)
        assert log_path == tmp_path / expected
        assert logger.level == logging.DEBUG
        logger.debug("test message")
        assert log_path.exists()
    finally:
        _cleanup(logger)


def test_configure_logging_accepts_warn_alias():
    logger = configure_logging(level="warn", mirror_to_console=False)

    try:
        assert logger.level == logging.WARNING
        assert logger.handlers == []
    finally:
        _cleanup(logger)


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError, match="Unsupported log level"):
        configure_logging(level="loud")
