"""Root pytest configuration for all tests."""

import logging

# atlassian-python-api logs failed requests at ERROR level; the unit tests
# provoke those failures on purpose through mocked REST clients.
logging.getLogger("atlassian").setLevel(logging.WARNING)
