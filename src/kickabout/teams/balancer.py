"""
Two-squad team balancer for five-a-side games.

Takes the names for one game and splits them into team A and team B so
that both skill totals and positional make-up come out even.

The algorithm is a single greedy pass with no randomness:
1. Resolve every name to a roster record. Unknown names get the
   default rating (70) and play "everywhere".
2. Group players by position.
3. Sort each group by rating, highest first. Equal ratings keep the
   order the names were given in.
4. Walk the groups defensive -> midfield -> attacking -> everywhere and
   give each player to a team, checking in order:
     a. team A is full  -> team B
     b. team B is full  -> team A
     c. A has fewer of this position -> team A
     d. B has fewer of this position -> team B
     e. otherwise the team with the lower (or equal) running total,
        ties going to team A
5. Total up ratings and position counts per team.

Rules (a)/(b) only look at one team at a time. With more names than two
full squads, team A stops at the squad size and every extra player lands
on team B. That overflow is kept as-is and logged as a warning.

Usage:
    from kickabout.players import RosterResolver
    from kickabout.teams import balance_teams

    teams = balance_teams(["Ahmed", "mo", "Negm", "Sam"], RosterResolver(roster))
    print(teams.total_a, teams.total_b)
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, Optional, Sequence

from kickabout.config import settings
from kickabout.players.models import Position, RosterRecord
from kickabout.teams.constants import (
    BALANCE_LABELS,
    DEFAULT_POSITION,
    POSITION_ORDER,
    UNBALANCED_LABEL,
)

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Optional[RosterRecord]]
AsyncResolver = Callable[[str], Awaitable[Optional[RosterRecord]]]


@dataclass(frozen=True)
class ResolvedPlayer:
    """
    One input name after roster lookup.

    rating and position are always set: they come from the record when
    there is one, otherwise from the defaults.
    """
    query_name: str
    record: Optional[RosterRecord]
    rating: int
    position: Position

    @property
    def matched(self) -> bool:
        """Whether the name was found on the roster."""
        return self.record is not None

    def __repr__(self) -> str:
        return (
            f"<ResolvedPlayer(name='{self.query_name}', rating={self.rating}, "
            f"position='{self.position.value}')>"
        )


def _empty_position_counts() -> dict[Position, int]:
    return {position: 0 for position in POSITION_ORDER}


@dataclass
class BalancedTeams:
    """
    Result of a balancing run.

    Every input name appears exactly once across team_a and team_b.
    """
    team_a: list[ResolvedPlayer] = field(default_factory=list)
    team_b: list[ResolvedPlayer] = field(default_factory=list)
    total_a: int = 0
    total_b: int = 0
    position_counts_a: dict[Position, int] = field(default_factory=_empty_position_counts)
    position_counts_b: dict[Position, int] = field(default_factory=_empty_position_counts)

    @property
    def difference(self) -> int:
        """Absolute gap between the two rating totals."""
        return abs(self.total_a - self.total_b)

    @property
    def unmatched(self) -> list[str]:
        """Names that fell back to default rating and position."""
        return [p.query_name for p in self.team_a + self.team_b if not p.matched]

    def __repr__(self) -> str:
        return (
            f"<BalancedTeams(A: {len(self.team_a)} players / {self.total_a}, "
            f"B: {len(self.team_b)} players / {self.total_b})>"
        )


class TeamBalancer:
    """
    Greedy two-team balancer.

    Usage:
        balancer = TeamBalancer()
        teams = balancer.balance(names, resolver)

        # For a resolver backed by an async store
        teams = await balancer.balance_async(names, async_resolver)
    """

    def __init__(
        self,
        squad_size: Optional[int] = None,
        default_rating: Optional[int] = None,
    ):
        """
        Initialize the balancer.

        Args:
            squad_size: Players per team before the other team takes
                everyone. Defaults to settings.squad_size.
            default_rating: Rating for names missing from the roster.
                Defaults to settings.default_player_rating.
        """
        self.squad_size = settings.squad_size if squad_size is None else squad_size
        self.default_rating = (
            settings.default_player_rating if default_rating is None else default_rating
        )

    def balance(self, names: Iterable[str], resolve: Resolver) -> BalancedTeams:
        """
        Resolve and split names into two balanced teams.

        Args:
            names: Player names in the order they were given
            resolve: Lookup returning a roster record or None. Called once
                per name, in order.

        Returns:
            BalancedTeams with both squads, totals and position counts
        """
        players = [self.resolve_player(name, resolve(name)) for name in names]
        return self.assign(players)

    async def balance_async(
        self, names: Iterable[str], resolve: AsyncResolver
    ) -> BalancedTeams:
        """
        Same as balance() for an async lookup.

        Lookups are awaited one at a time in input order; grouping only
        starts once every name has been resolved.
        """
        players = []
        for name in names:
            record = await resolve(name)
            players.append(self.resolve_player(name, record))
        return self.assign(players)

    def resolve_player(self, name: str, record: Optional[RosterRecord]) -> ResolvedPlayer:
        """
        Wrap a lookup result, applying defaults for unknown names.
        """
        if record is None:
            logger.warning(
                "Could not resolve player %r, using rating %d / %s",
                name, self.default_rating, DEFAULT_POSITION.value,
            )
            return ResolvedPlayer(
                query_name=name,
                record=None,
                rating=self.default_rating,
                position=DEFAULT_POSITION,
            )

        return ResolvedPlayer(
            query_name=name,
            record=record,
            rating=record.rating,
            position=Position(record.position),
        )

    def assign(self, players: Sequence[ResolvedPlayer]) -> BalancedTeams:
        """
        Split already-resolved players into two teams.

        Args:
            players: Resolved players in input order

        Returns:
            BalancedTeams
        """
        # Keep each player's input index so rating ties sort by it
        groups: dict[Position, list[tuple[int, ResolvedPlayer]]] = {
            position: [] for position in POSITION_ORDER
        }
        for index, player in enumerate(players):
            groups[player.position].append((index, player))

        team_a: list[ResolvedPlayer] = []
        team_b: list[ResolvedPlayer] = []
        counts_a: Counter = Counter()
        counts_b: Counter = Counter()
        total_a = 0
        total_b = 0

        for position in POSITION_ORDER:
            # Rating descending, then input order. The index in the key pins
            # tie order instead of leaving it to sort stability.
            group = sorted(groups[position], key=lambda item: (-item[1].rating, item[0]))

            for _, player in group:
                to_a = self._goes_to_team_a(
                    size_a=len(team_a),
                    size_b=len(team_b),
                    count_a=counts_a[position],
                    count_b=counts_b[position],
                    total_a=total_a,
                    total_b=total_b,
                )

                if to_a:
                    team_a.append(player)
                    counts_a[position] += 1
                    total_a += player.rating
                else:
                    team_b.append(player)
                    counts_b[position] += 1
                    total_b += player.rating

                logger.debug(
                    "%s (%d, %s) -> team %s",
                    player.query_name, player.rating, position.value, "A" if to_a else "B",
                )

        if len(team_a) > self.squad_size or len(team_b) > self.squad_size:
            logger.warning(
                "%d players for two squads of %d: teams are %d and %d",
                len(players), self.squad_size, len(team_a), len(team_b),
            )

        teams = BalancedTeams(
            team_a=team_a,
            team_b=team_b,
            total_a=int(round(total_a)),
            total_b=int(round(total_b)),
            position_counts_a={position: counts_a[position] for position in POSITION_ORDER},
            position_counts_b={position: counts_b[position] for position in POSITION_ORDER},
        )
        logger.info(
            "Balanced %d players: team A %d (%d pts), team B %d (%d pts)",
            len(players), len(team_a), teams.total_a, len(team_b), teams.total_b,
        )
        return teams

    def _goes_to_team_a(
        self,
        size_a: int,
        size_b: int,
        count_a: int,
        count_b: int,
        total_a: int,
        total_b: int,
    ) -> bool:
        """
        Decide one assignment. Rules are checked strictly in order.
        """
        if size_a >= self.squad_size:
            return False
        if size_b >= self.squad_size:
            return True
        if count_a < count_b:
            return True
        if count_b < count_a:
            return False
        return total_a <= total_b


# Convenience functions for simple usage

def balance_teams(names: Iterable[str], resolve: Resolver) -> BalancedTeams:
    """
    Split names into two balanced teams using the configured defaults.

    Args:
        names: Player names in the order they were given
        resolve: name -> RosterRecord or None

    Returns:
        BalancedTeams
    """
    return TeamBalancer().balance(names, resolve)


async def balance_teams_async(names: Iterable[str], resolve: AsyncResolver) -> BalancedTeams:
    """
    balance_teams() for a resolver that has to be awaited.
    """
    return await TeamBalancer().balance_async(names, resolve)


def format_team_balance(teams: BalancedTeams, squad_size: Optional[int] = None) -> str:
    """
    One-line summary of a split, e.g.
    "Team A: 412 pts | Team B: 405 pts (Perfectly balanced)".

    The label looks at the rating gap spread over a full squad.
    """
    if squad_size is None:
        squad_size = settings.squad_size

    per_player = teams.difference / squad_size
    label = UNBALANCED_LABEL
    for upper_bound, text in BALANCE_LABELS:
        if per_player <= upper_bound:
            label = text
            break

    return f"Team A: {teams.total_a} pts | Team B: {teams.total_b} pts ({label})"
