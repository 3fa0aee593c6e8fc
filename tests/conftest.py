"""
Shared test configuration.
The API app is built at import time, so required variables are also seeded at module level.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

TEST_ENV_DEFAULTS: dict[str, str] = {
    "PROJECT_NAME": "test-project",
    "ENV": "test",
    "LOG_LEVEL": "INFO",
    "DATABASE_URL": "sqlite+pysqlite:///:memory:",
}

for _key, _value in TEST_ENV_DEFAULTS.items():
    os.environ.setdefault(_key, _value)


@pytest.fixture(autouse=True)
def base_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure required environment variables are present during tests."""

    for key, value in TEST_ENV_DEFAULTS.items():
        if os.getenv(key) is None:
            monkeypatch.setenv(key, value)
