"""
Unit tests for the team balancer.

Tests the greedy assignment to ensure:
- Every name lands on exactly one team
- Totals add up to the sum of resolved ratings
- Fixed positions are spread before flexible players
- Output is identical across runs, tie order included
- The more-than-two-squads overflow stays as it is
"""

import asyncio
import logging

import pytest

from kickabout.players.identity import RosterResolver
from kickabout.players.models import Position, RosterRecord
from kickabout.teams.balancer import (
    BalancedTeams,
    TeamBalancer,
    balance_teams,
    balance_teams_async,
    format_team_balance,
)


def _record(name: str, rating: int, position: str = "everywhere") -> RosterRecord:
    return RosterRecord(name=name, rating=rating, position=position)


def _lookup(records):
    """Exact-name lookup so these tests don't depend on fuzzy matching."""
    by_name = {record.name: record for record in records}
    return by_name.get


def _names(players) -> list[str]:
    return [player.query_name for player in players]


class TestWorkedExample:
    """The four-player walk-through of the assignment rules."""

    @pytest.fixture
    def teams(self):
        records = [_record("A", 90), _record("B", 80), _record("C", 70), _record("D", 60)]
        balancer = TeamBalancer(squad_size=6, default_rating=70)
        return balancer.balance(["A", "B", "C", "D"], _lookup(records))

    def test_assignment(self, teams):
        """
        A -> team A on the 0-0 total tie, B -> team B on position count,
        C -> team B on total (90 vs 80), D -> team A on position count.
        """
        assert _names(teams.team_a) == ["A", "D"]
        assert _names(teams.team_b) == ["B", "C"]

    def test_totals(self, teams):
        assert teams.total_a == 150
        assert teams.total_b == 150
        assert teams.difference == 0

    def test_position_counts(self, teams):
        assert teams.position_counts_a == {
            Position.DEFENSIVE: 0,
            Position.MIDFIELD: 0,
            Position.ATTACKING: 0,
            Position.EVERYWHERE: 2,
        }
        assert teams.position_counts_b[Position.EVERYWHERE] == 2


class TestProperties:
    """Conservation, totals and determinism over a mixed squad."""

    @pytest.fixture
    def records(self):
        return [
            _record("Def1", 88, "defensive"),
            _record("Def2", 71, "defensive"),
            _record("Def3", 64, "defensive"),
            _record("Mid1", 80, "midfield"),
            _record("Mid2", 80, "midfield"),
            _record("Att1", 92, "attacking"),
            _record("Att2", 66, "attacking"),
            _record("Any1", 75),
            _record("Any2", 58),
        ]

    @pytest.fixture
    def names(self, records):
        # Shuffled by hand, plus one name the roster doesn't know
        return ["Any1", "Att2", "Def2", "Mid1", "Stranger", "Def1", "Any2", "Mid2", "Att1", "Def3"]

    def test_conservation(self, records, names):
        teams = TeamBalancer(squad_size=6).balance(names, _lookup(records))

        assert len(teams.team_a) + len(teams.team_b) == len(names)
        assert sorted(_names(teams.team_a) + _names(teams.team_b)) == sorted(names)

    def test_total_consistency(self, records, names):
        teams = TeamBalancer(squad_size=6, default_rating=70).balance(names, _lookup(records))

        expected = sum(r.rating for r in records) + 70
        assert teams.total_a + teams.total_b == expected
        assert teams.total_a == sum(p.rating for p in teams.team_a)

    def test_position_counts_match_teams(self, records, names):
        teams = TeamBalancer(squad_size=6).balance(names, _lookup(records))

        for players, counts in (
            (teams.team_a, teams.position_counts_a),
            (teams.team_b, teams.position_counts_b),
        ):
            for position in Position:
                assert counts[position] == sum(1 for p in players if p.position == position)

    def test_fixed_positions_split_evenly(self, records, names):
        teams = TeamBalancer(squad_size=6).balance(names, _lookup(records))

        for position in (Position.DEFENSIVE, Position.MIDFIELD, Position.ATTACKING):
            diff = teams.position_counts_a[position] - teams.position_counts_b[position]
            assert abs(diff) <= 1

    def test_deterministic(self, records, names):
        balancer = TeamBalancer(squad_size=6, default_rating=70)
        first = balancer.balance(names, _lookup(records))
        second = balancer.balance(list(names), _lookup(records))

        assert first == second
        assert repr(first) == repr(second)


class TestAssignmentRules:
    """Tests for individual greedy rules."""

    def test_equal_ratings_keep_input_order(self):
        records = [_record(f"X{i}", 70) for i in range(1, 5)]
        teams = TeamBalancer(squad_size=6).balance(["X1", "X2", "X3", "X4"], _lookup(records))

        assert _names(teams.team_a) == ["X1", "X3"]
        assert _names(teams.team_b) == ["X2", "X4"]

    def test_tie_order_follows_input_not_roster(self):
        records = [_record(f"X{i}", 70) for i in range(1, 5)]
        teams = TeamBalancer(squad_size=6).balance(["X4", "X3", "X2", "X1"], _lookup(records))

        assert _names(teams.team_a) == ["X4", "X2"]
        assert _names(teams.team_b) == ["X3", "X1"]

    def test_fixed_positions_before_everywhere(self):
        """
        Defenders are placed first even though the flexible players were
        listed (and rated) ahead of one of them.
        """
        records = [
            _record("E1", 80),
            _record("D1", 90, "defensive"),
            _record("E2", 70),
            _record("D2", 60, "defensive"),
        ]
        teams = TeamBalancer(squad_size=6).balance(["E1", "D1", "E2", "D2"], _lookup(records))

        # D1 -> A (tie), D2 -> B (count), E1 -> B (60 < 90), E2 -> A (count)
        assert _names(teams.team_a) == ["D1", "E2"]
        assert _names(teams.team_b) == ["D2", "E1"]
        assert teams.total_a == 160
        assert teams.total_b == 140
        assert teams.position_counts_a[Position.DEFENSIVE] == 1
        assert teams.position_counts_b[Position.DEFENSIVE] == 1

    def test_squad_size_cap(self):
        records = [_record(f"P{i}", 70) for i in range(1, 6)]
        teams = TeamBalancer(squad_size=2).balance([r.name for r in records], _lookup(records))

        assert _names(teams.team_a) == ["P1", "P3"]
        assert _names(teams.team_b) == ["P2", "P4", "P5"]

    def test_fewer_than_twelve_unequal_sizes(self):
        records = [_record("A", 80), _record("B", 70), _record("C", 60)]
        teams = TeamBalancer(squad_size=6).balance(["A", "B", "C"], _lookup(records))

        assert len(teams.team_a) == 1
        assert len(teams.team_b) == 2

    def test_twelve_players_fill_both_squads(self):
        records = [_record(f"P{i}", 70) for i in range(1, 13)]
        teams = TeamBalancer(squad_size=6).balance([r.name for r in records], _lookup(records))

        assert len(teams.team_a) == 6
        assert len(teams.team_b) == 6

    def test_thirteen_players_overflow_to_team_b(self, caplog):
        """
        Regression lock for the overflow case: once team A holds six, every
        remaining player goes to team B, which ends up with seven.
        """
        caplog.set_level(logging.WARNING, logger="kickabout.teams.balancer")
        records = [_record(f"P{i}", 70) for i in range(1, 14)]
        teams = TeamBalancer(squad_size=6).balance([r.name for r in records], _lookup(records))

        assert len(teams.team_a) == 6
        assert len(teams.team_b) == 7
        assert _names(teams.team_b)[-1] == "P13"
        assert "two squads of 6" in caplog.text

    def test_empty_names(self):
        teams = balance_teams([], lambda name: None)
        assert teams.team_a == []
        assert teams.team_b == []
        assert teams.total_a == 0
        assert teams.total_b == 0


class TestUnmatchedNames:
    """Tests for names the resolver can't place."""

    def test_defaults_applied(self, caplog):
        caplog.set_level(logging.WARNING, logger="kickabout.teams.balancer")
        teams = TeamBalancer(squad_size=6, default_rating=70).balance(
            ["Nobody"], lambda name: None
        )

        player = teams.team_a[0]
        assert player.record is None
        assert player.matched is False
        assert player.rating == 70
        assert player.position == Position.EVERYWHERE
        assert teams.unmatched == ["Nobody"]
        assert "Nobody" in caplog.text

    def test_default_rating_override(self):
        teams = TeamBalancer(default_rating=55).balance(["Nobody"], lambda name: None)
        assert teams.total_a == 55

    def test_resolver_called_once_per_name_in_order(self):
        calls = []

        def tracking_resolver(name):
            calls.append(name)
            return None

        TeamBalancer().balance(["b", "a", "b"], tracking_resolver)
        assert calls == ["b", "a", "b"]

    def test_duplicate_names_both_placed(self):
        records = [_record("Sam", 70)]
        teams = TeamBalancer().balance(["Sam", "Sam"], _lookup(records))
        assert _names(teams.team_a) + _names(teams.team_b) == ["Sam", "Sam"]


class TestWithRosterResolver:
    """End-to-end through the identity resolver."""

    def test_noisy_names(self, roster):
        resolver = RosterResolver(roster, threshold=0.4)
        names = ["mo", "Jonathon", "captain negm", "ABDEL", "moe", "Stranger"]

        teams = balance_teams(names, resolver)

        placed = {p.query_name: p for p in teams.team_a + teams.team_b}
        assert placed["mo"].record.name == "Mohamed"
        assert placed["Jonathon"].record.name == "Jonathan"
        assert placed["captain negm"].record.name == "Negm"
        assert placed["ABDEL"].record.name == "Abdelrahman"
        assert placed["moe"].record.name == "Moe"
        assert placed["Stranger"].record is None
        assert len(placed) == len(names)


class TestAsync:
    """Tests for the awaited-resolver path."""

    def test_matches_sync_result(self):
        records = [_record("A", 90), _record("B", 80), _record("C", 70), _record("D", 60)]
        lookup = _lookup(records)

        async def async_lookup(name):
            await asyncio.sleep(0)
            return lookup(name)

        names = ["C", "A", "D", "Ghost", "B"]
        sync_teams = balance_teams(names, lookup)
        async_teams = asyncio.run(balance_teams_async(names, async_lookup))

        assert async_teams == sync_teams

    def test_awaits_in_input_order(self):
        calls = []

        async def async_lookup(name):
            calls.append(name)
            await asyncio.sleep(0)
            return None

        asyncio.run(TeamBalancer().balance_async(["z", "y", "x"], async_lookup))
        assert calls == ["z", "y", "x"]


class TestFormatTeamBalance:
    """Tests for the one-line summary."""

    def test_perfectly_balanced(self):
        teams = BalancedTeams(total_a=150, total_b=150)
        assert format_team_balance(teams, squad_size=6) == (
            "Team A: 150 pts | Team B: 150 pts (Perfectly balanced)"
        )

    def test_boundary_is_perfect(self):
        # 30 / 6 = 5.0 exactly
        teams = BalancedTeams(total_a=430, total_b=400)
        assert format_team_balance(teams, squad_size=6).endswith("(Perfectly balanced)")

    def test_slightly_uneven(self):
        teams = BalancedTeams(total_a=400, total_b=350)
        assert format_team_balance(teams, squad_size=6).endswith("(Slightly uneven)")

    def test_unbalanced(self):
        teams = BalancedTeams(total_a=400, total_b=300)
        assert format_team_balance(teams, squad_size=6).endswith("(Unbalanced)")
