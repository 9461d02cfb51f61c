"""
Shared pytest fixtures for the corpus topics test suite.

This module provides common fixtures used across test modules:
- Project paths
- Configuration cache isolation

Usage:
    Fixtures are automatically discovered by pytest.
    Import them directly in test files - no explicit import needed.
"""

import sys
from pathlib import Path

import pytest

# Ensure corpus_topics is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from corpus_topics.config._loader import clear_config_cache


# ===========================
# Path Fixtures
# ===========================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


# ===========================
# Config Fixtures
# ===========================

@pytest.fixture
def fresh_config_cache():
    """Clear the YAML cache before and after a test that changes config sources."""
    clear_config_cache()
    yield
    clear_config_cache()
