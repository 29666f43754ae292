# tests/conftest.py

"""Shared pytest fixtures for the listing_search test-suite."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from listing_search.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_logs_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Generator[Path, None, None]:
    """Point LOGS_DIR at a temp dir and detach handlers afterwards."""
    logs_dir = tmp_path / "logs"
    monkeypatch.setattr(Settings, "LOGS_DIR", logs_dir)
    yield logs_dir
    root_logger = logging.getLogger("listing_search")
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)
