#!/usr/bin/env python3
"""
Pick two balanced squads from a roster file and a list of names.

The roster can be JSON (a list of objects) or CSV with a header row.
Column names follow the roster table: name, aliases, rating or
overall_score, position or preferred_position, plus optional skills.
Names can be given as arguments or read from a text file, one per line
or comma-separated (as pasted from a group chat).

Usage:
    python scripts/balance_squads.py --roster roster.csv Ahmed Mo Negm Sam

    # Names pasted into a file
    python scripts/balance_squads.py --roster roster.json --names-file tonight.txt

    # Show which matching stage resolved each name
    LOG_LEVEL=DEBUG python scripts/balance_squads.py --roster roster.csv ...
"""

import argparse
import csv
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pydantic import ValidationError

from kickabout.config import settings
from kickabout.players import RosterResolver, extract_aliases, load_roster
from kickabout.teams import BalancedTeams, balance_teams, format_team_balance

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def read_roster_rows(path: Path) -> list[dict]:
    """
    Read raw roster rows from a JSON or CSV file.

    CSV alias cells may hold several aliases separated by "/ , ; |".
    """
    if path.suffix.lower() == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a list of players")
        return data

    rows = []
    with path.open(newline="", encoding="utf-8") as handle:
        for row in csv.DictReader(handle):
            row = {key.strip().lower(): value for key, value in row.items() if key}
            aliases = row.get("aliases")
            if aliases:
                # Reuse the catalog parser on "(a / b)" to split the cell
                row["aliases"] = extract_aliases(f"x ({aliases})").aliases
            for key, value in list(row.items()):
                if value == "":
                    row[key] = None
            rows.append(row)
    return rows


def parse_names(text: str) -> list[str]:
    """Split pasted text into names, one per line or comma-separated."""
    names = []
    for line in text.splitlines():
        for piece in line.split(","):
            piece = piece.strip()
            if piece:
                names.append(piece)
    return names


def print_teams(teams: BalancedTeams) -> None:
    for label, players, total in (
        ("Team A", teams.team_a, teams.total_a),
        ("Team B", teams.team_b, teams.total_b),
    ):
        print(f"\n{label} ({total} pts)")
        for player in players:
            shown = player.record.name if player.record is not None else f"{player.query_name} (?)"
            print(f"  {shown:<24} {player.rating:>3}  {player.position.value}")

    print()
    print(format_team_balance(teams))
    if teams.unmatched:
        print(f"Not on roster: {', '.join(teams.unmatched)}")


def main():
    parser = argparse.ArgumentParser(description="Pick two balanced five-a-side squads")
    parser.add_argument("--roster", type=Path, required=True, help="Roster JSON or CSV file")
    parser.add_argument("--names-file", type=Path, help="Text file with player names")
    parser.add_argument("names", nargs="*", help="Player names")
    args = parser.parse_args()

    try:
        roster = load_roster(read_roster_rows(args.roster))
    except (OSError, ValueError, ValidationError) as e:
        logger.error("Could not load roster %s: %s", args.roster, e)
        sys.exit(1)

    names = list(args.names)
    if args.names_file:
        try:
            names.extend(parse_names(args.names_file.read_text(encoding="utf-8")))
        except OSError as e:
            logger.error("Could not read names file %s: %s", args.names_file, e)
            sys.exit(1)

    if not names:
        logger.error("No player names given")
        sys.exit(1)

    logger.info("Loaded %d roster players, balancing %d names", len(roster), len(names))
    teams = balance_teams(names, RosterResolver(roster))
    print_teams(teams)


if __name__ == "__main__":
    main()
