"""Shared pytest fixtures for envbind tests."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest
from click.testing import CliRunner

BOUND_VARIABLES = (
    "PORT",
    "HOST",
    "LEVEL",
    "APP_NAME",
    "WORKERS",
    "RATIO",
    "DEBUG",
    "DB_HOST",
    "DB_PORT",
    "TOKEN",
)

SETTINGS_VARIABLES = (
    "ENVBIND_JSON_OUTPUT",
    "ENVBIND_QUIET",
    "ENVBIND_VERBOSE",
    "ENVBIND_LOG_JSON",
)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None, None, None]:
    """Undo configure_logging() calls made by CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    envbind_logger = logging.getLogger("envbind")
    envbind_level = envbind_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    envbind_logger.setLevel(envbind_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every variable the sample records and the CLI settings read."""
    for name in (*BOUND_VARIABLES, *SETTINGS_VARIABLES):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
