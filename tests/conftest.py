"""
Shared pytest configuration and fixtures for envset tests.

This file contains:
- Common test fixtures used across test modules
- Test configuration and setup
- Markers for different test categories
"""

from datetime import timedelta
import io
from pathlib import Path
import sys

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from envset import EnvSet, ErrorHandling, reset_for_testing  # noqa: E402


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Tests that touch files or the environment")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location and content."""
    for item in items:
        if any(keyword in item.name.lower() for keyword in ["file", "environ", "exit"]):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


@pytest.fixture()
def output():
    """Provide a buffer that collects usage and error output."""
    return io.StringIO()


@pytest.fixture()
def envs(output):
    """Provide an empty registry with the continue policy writing to ``output``."""
    envset = EnvSet("", ErrorHandling.CONTINUE)
    envset.set_output(output)
    return envset


@pytest.fixture()
def fresh_environ():
    """Swap in a fresh default registry for the duration of a test."""
    envset = reset_for_testing()
    yield envset
    reset_for_testing()


@pytest.fixture()
def sample_settings(envs):
    """Provide a registry declaring one setting of every primitive type."""
    return {
        "envs": envs,
        "bool": envs.boolean("bool", False, "bool value"),
        "int": envs.integer("int", 0, "int value"),
        "int64": envs.int64("int64", 0, "int64 value"),
        "uint": envs.uint("uint", 0, "uint value"),
        "uint64": envs.uint64("uint64", 0, "uint64 value"),
        "string": envs.string("string", "0", "string value"),
        "float64": envs.float64("float64", 0, "float64 value"),
        "duration": envs.duration("duration", timedelta(seconds=5), "duration value"),
    }
