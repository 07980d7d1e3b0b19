"""Root conftest — shared test configuration."""

import os

# Never reach a real database from the test run
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")
