"""
Shared test fixtures

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import logging

import pytest

from saleline.core.config import LOG_LEVEL_ENV_VAR, PRECISION_ENV_VAR, get_settings


class ListHandler(logging.Handler):
    """Collects log records in memory (engine loggers do not propagate)."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)

    def messages(self, level=None):
        return [r.getMessage() for r in self.records if level is None or r.levelno == level]


@pytest.fixture
def fresh_settings(monkeypatch):
    """Clear the cached settings before and after a test that edits the environment."""
    monkeypatch.delenv(PRECISION_ENV_VAR, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def capture_logger():
    """Attach a ListHandler to a named logger for the duration of a test."""
    attached = []

    def _attach(name):
        handler = ListHandler()
        logging.getLogger(name).addHandler(handler)
        attached.append((name, handler))
        return handler

    yield _attach

    for name, handler in attached:
        logging.getLogger(name).removeHandler(handler)
