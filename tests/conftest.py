from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.cookbook_builder import CookbookBuilder


@pytest.fixture(autouse=True)
def _isolate_process_state() -> Iterator[None]:
    """Undo CLI logging configuration."""
    yield
    logger = logging.getLogger("cookstack")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def cookbook_builder(tmp_path: Path) -> CookbookBuilder:
    """Provide a reusable cookbook builder rooted at the pytest tmp_path."""
    return CookbookBuilder(tmp_path)
