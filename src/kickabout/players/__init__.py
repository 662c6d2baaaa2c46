"""
Player identity module.

Matches noisy display names to canonical roster records. Typed names,
nicknames and OCR output all go through the same resolver.

Key components:
- RosterRecord: Immutable roster snapshot entry
- RosterResolver: Name -> record lookup bound to one roster
- extract_aliases: Split "Name (alias1 / alias2)" catalog names

The matching strategy (in priority order):
1. Exact name match (case-insensitive)
2. Exact alias match (case-insensitive)
3. Substring containment
4. Fuzzy edit-distance match within the threshold (0.4)
"""

from kickabout.players.aliases import (
    ParsedName,
    calculate_similarity,
    extract_aliases,
    format_catalog_name,
    normalize_name,
)
from kickabout.players.identity import (
    MatchCandidate,
    RosterResolver,
    find_all_matches,
    find_best_match,
    match_players_to_roster,
    resolve,
)
from kickabout.players.models import (
    Position,
    RosterRecord,
    calculate_overall_score,
    load_roster,
)

__all__ = [
    "MatchCandidate",
    "ParsedName",
    "Position",
    "RosterRecord",
    "RosterResolver",
    "calculate_overall_score",
    "calculate_similarity",
    "extract_aliases",
    "find_all_matches",
    "find_best_match",
    "format_catalog_name",
    "load_roster",
    "match_players_to_roster",
    "normalize_name",
    "resolve",
]
