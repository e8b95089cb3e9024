"""Tests for pi_launcher.logging_config."""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from pi_launcher.logging_config import debug_enabled, setup_logging


@pytest.mark.parametrize("value, expected", [("1", True), ("true", True), ("ON", True), ("0", False), ("", False)])
def test_debug_enabled(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv("PI_LAUNCHER_DEBUG", value)
    assert debug_enabled() is expected


def test_default_level_is_warning() -> None:
    logger = setup_logging()
    assert logger.level == logging.WARNING
    assert logger.propagate is False


def test_env_enables_debug(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PI_LAUNCHER_DEBUG", "1")
    assert setup_logging().level == logging.DEBUG


def test_repeated_setup_keeps_one_handler() -> None:
    setup_logging()
    logger = setup_logging(verbose=True)
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)
    assert logger.level == logging.DEBUG
