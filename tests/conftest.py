"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import pytest

from kickabout.players import RosterRecord, RosterResolver, load_roster


ROSTER_ROWS = [
    {"name": "Mohamed (Mo / Hamo)", "rating": 85, "position": "attacking"},
    {"name": "Moe", "rating": 60, "position": "defensive"},
    {"name": "Negm", "aliases": ["Ne", "N"], "rating": 75, "position": "midfield"},
    {"name": "Abdelrahman", "aliases": ["Zizou"], "rating": 68, "position": "defensive"},
    {"name": "Jonathan", "rating": 72, "position": "everywhere"},
]


@pytest.fixture
def roster() -> list[RosterRecord]:
    """
    A small roster with aliases and a spread of positions.

    Built through load_roster so the catalog-name parsing is exercised
    the same way real imports are.
    """
    return load_roster(ROSTER_ROWS)


@pytest.fixture
def resolver(roster) -> RosterResolver:
    """Resolver over the sample roster with the default thresholds."""
    return RosterResolver(roster, threshold=0.4, alias_weight=0.8)
