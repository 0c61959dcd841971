"""Shared pytest fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from screenbounds.config import get_settings


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog keeps seeing screenbounds records."""
    yield
    package_logger = logging.getLogger("screenbounds")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Settings are cached per process; each test reads the environment afresh."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
