import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so they don't outlive the test."""
    yield
    logger = logging.getLogger("layoutrefine")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
