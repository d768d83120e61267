"""Pytest configuration.

The test configuration file must be selected before any application module
is imported, because the default context is loaded at import time.
"""

import os
from pathlib import Path

os.environ["APP_ENVIRONMENT"] = "test"
os.environ["APP_CONFIG_FILE"] = str(Path(__file__).parent / "config.test.yaml")

from tests.fixtures import *  # noqa: E402,F401,F403
