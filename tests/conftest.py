"""Shared fixtures for volscan tests."""

import pytest

from fakes import FakeClock, transfer_item


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scenario_a_script():
    """Two transfers pages worth $42 over 4 items."""
    return {
        "transfers_v2": [
            ([transfer_item(10, 20), transfer_item(), transfer_item(5)], True),
            ([transfer_item(7)], False),
        ],
    }
