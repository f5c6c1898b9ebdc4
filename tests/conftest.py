"""Root conftest: shared test configuration."""

import os

# Ensure tests never reach a real Actual server or write into the working tree
os.environ.setdefault("ACTUAL_DATA_DIR", "/tmp/budget-gateway-test-data")
os.environ.setdefault("ACTUAL_SERVER_URL", "")
os.environ.setdefault("BUDGET_ID", "")
os.environ.setdefault("LOG_FORMAT", "text")
