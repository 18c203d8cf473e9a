from __future__ import annotations

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers added during a test; they may point at captured streams."""
    yield
    logger.remove()
