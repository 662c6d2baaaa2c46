"""
Team balancing module.

Splits the players for one game into two squads with even rating
totals and an even spread of positions.
"""

from kickabout.teams.balancer import (
    BalancedTeams,
    ResolvedPlayer,
    TeamBalancer,
    balance_teams,
    balance_teams_async,
    format_team_balance,
)

__all__ = [
    "BalancedTeams",
    "ResolvedPlayer",
    "TeamBalancer",
    "balance_teams",
    "balance_teams_async",
    "format_team_balance",
]
