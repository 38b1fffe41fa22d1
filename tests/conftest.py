import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def reset_logger():
    # CLI and ProgressTracker install sinks bound to the captured streams.
    yield
    logger.remove()
