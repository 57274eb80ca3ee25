"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from forne.core import Card, CardSet  # noqa: E402
from forne.methods import NativeMethod  # noqa: E402
from forne.resources import ResourceTable  # noqa: E402
from forne.scripting import ScriptEngine  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def rng():
    """Seeded randomness so draws are reproducible."""
    return random.Random(1234)


@pytest.fixture
def engine():
    """Script engine with the regex helpers registered."""
    return ScriptEngine.with_helpers()


@pytest.fixture(scope="session")
def resources():
    """The scripts bundled with the package."""
    return ResourceTable.bundled()


def _countdown_adjust(response, metadata, difficult):
    if response == "good":
        return {"left": max(0, metadata["left"] - 1)}, difficult
    return {"left": metadata["left"] + 1}, True


@pytest.fixture
def countdown_method():
    """
    A native method where every card must be answered 'good' `left` times.

    'bad' adds one more required answer and marks the card difficult.
    """
    return NativeMethod(
        "countdown",
        ["good", "bad"],
        {
            "get_weight": lambda metadata, difficult: metadata["left"],
            "adjust_card": _countdown_adjust,
            "get_default_metadata": lambda: {"left": 1},
        },
    )


@pytest.fixture
def make_set():
    """Factory for a set of numbered cards, all with the same metadata."""

    def _make(method="countdown", count=3, method_data=None):
        if method_data is None:
            method_data = {"left": 1}
        card_set = CardSet.empty(method)
        for number in range(1, count + 1):
            card_set.add_card(Card.fresh(f"Q{number}", f"A{number}", method_data))
        return card_set

    return _make


@pytest.fixture
def sample_qa_document():
    """Provide a sample document for the qa adapter."""
    return (
        "Q: What is the capital of France?\n"
        "A: Paris\n"
        "\n"
        "Q: What is 2 + 2?\n"
        "A: 4\n"
    )
