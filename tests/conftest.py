"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from collections.abc import Callable, Iterator
from datetime import datetime

import pytest
from loguru import logger

from factories import DAY, build_config
from timeboxer.scheduling.types import SchedulingConfig


@pytest.fixture
def day() -> datetime:
    return DAY


@pytest.fixture
def make_config() -> Callable[..., SchedulingConfig]:
    return build_config


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Capture loguru output as 'LEVEL message' strings."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(f"{msg.record['level'].name} {msg.record['message']}"), level="DEBUG")
    yield messages
    logger.remove(handler_id)
