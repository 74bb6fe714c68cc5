import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_logging_levels():
    """Keep library logger levels from leaking between tests."""
    yield
    logging.getLogger("websockets").setLevel(logging.NOTSET)
    logging.getLogger("asyncio").setLevel(logging.NOTSET)
