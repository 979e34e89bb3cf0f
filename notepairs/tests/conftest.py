"""Shared fixtures for notebook tests."""

import pytest

from notepairs.config import NotebookConfig


@pytest.fixture
def config() -> NotebookConfig:
    """Default naming configuration."""
    return NotebookConfig()
