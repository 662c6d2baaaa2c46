"""
Player identity resolution against a roster snapshot.

This is the single point of contact for turning a free-text name
(typed, pasted, or OCR'd) into a roster record. The matching strategy
prioritizes reliability, and the first stage that finds anything wins:

1. Exact name match (case-insensitive)
2. Exact alias match (case-insensitive)
3. Substring containment - handles truncated or prefixed nicknames
4. Fuzzy match on normalized edit distance - names weigh 1.0,
   aliases 0.8 - accepted only at or below the threshold

An exact hit is never overridden by a looser stage, even if the looser
stage would score some other record higher. A miss returns None; callers
treat that as an unknown player, not an error.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from kickabout.config import settings
from kickabout.players.aliases import calculate_similarity, normalize_name
from kickabout.players.models import RosterRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchCandidate:
    """
    A roster record scored against a query.

    distance is 0.0 for an identical name and grows towards 1.0;
    alias hits can't score better than 1 - alias weight.
    """
    record: RosterRecord
    distance: float
    match_type: str  # 'exact_name', 'exact_alias', 'substring', 'fuzzy'
    matched_value: str  # The name or alias that produced the score

    def __repr__(self) -> str:
        return (
            f"<MatchCandidate(name='{self.record.name}', dist={self.distance:.3f}, "
            f"type='{self.match_type}')>"
        )


class RosterResolver:
    """
    Resolver bound to one roster snapshot.

    Instances are callable, so they can be handed straight to the team
    balancer as its name -> record lookup.

    Usage:
        resolver = RosterResolver(roster)

        record = resolver("mo")          # or resolver.find_best_match("mo")
        options = resolver.find_all_matches("moh", limit=3)

        teams = balance_teams(names, resolver)
    """

    def __init__(
        self,
        roster: Iterable[RosterRecord],
        threshold: Optional[float] = None,
        alias_weight: Optional[float] = None,
        include_aliases: bool = True,
    ):
        """
        Initialize the resolver.

        Args:
            roster: Records to match against; order breaks ties
            threshold: Highest fuzzy distance accepted as a best match.
                Defaults to settings.fuzzy_match_threshold.
            alias_weight: Weight of alias similarity relative to names.
                Defaults to settings.alias_match_weight.
            include_aliases: Whether the exact-alias stage runs
        """
        self.roster: tuple[RosterRecord, ...] = tuple(roster)
        self.threshold = (
            settings.fuzzy_match_threshold if threshold is None else threshold
        )
        self.alias_weight = (
            settings.alias_match_weight if alias_weight is None else alias_weight
        )
        self.include_aliases = include_aliases

    def __call__(self, name: str) -> Optional[RosterRecord]:
        return self.find_best_match(name)

    # =========================================================================
    # Main Public Methods
    # =========================================================================

    def find_best_match(self, query: str) -> Optional[RosterRecord]:
        """
        Find the single best roster record for a query.

        Args:
            query: Free-text player name

        Returns:
            The matching RosterRecord, or None if nothing is close enough
        """
        match = self.match(query)
        return match.record if match is not None else None

    def match(self, query: str) -> Optional[MatchCandidate]:
        """
        Same as find_best_match but reports how the match was made.
        """
        normalized = normalize_name(query)
        if not normalized:
            return None

        # Strategy 1: exact name
        record = self._find_by_exact_name(normalized)
        if record is not None:
            logger.debug("Resolved %r by exact name -> %s", query, record.name)
            return MatchCandidate(record, 0.0, "exact_name", record.name)

        # Strategy 2: exact alias
        if self.include_aliases:
            found = self._find_by_exact_alias(normalized)
            if found is not None:
                record, alias = found
                logger.debug("Resolved %r by exact alias %r -> %s", query, alias, record.name)
                return MatchCandidate(record, 0.0, "exact_alias", alias)

        # Strategy 3: substring either way round
        record = self._find_by_substring(normalized)
        if record is not None:
            logger.debug("Resolved %r by substring -> %s", query, record.name)
            return MatchCandidate(record, 0.0, "substring", record.name)

        # Strategy 4: fuzzy, best candidate only
        best: Optional[MatchCandidate] = None
        for record in self.roster:
            candidate = self._score(normalized, record)
            if best is None or candidate.distance < best.distance:
                best = candidate

        if best is not None and best.distance <= self.threshold:
            logger.debug(
                "Resolved %r by fuzzy match on %r (distance %.3f) -> %s",
                query, best.matched_value, best.distance, best.record.name,
            )
            return best

        logger.debug("No roster match for %r", query)
        return None

    def find_all_matches(
        self,
        query: str,
        limit: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> list[MatchCandidate]:
        """
        Rank roster records by fuzzy distance for disambiguation.

        Unlike find_best_match, this skips the exact stages and scores
        every record, so the caller can offer a pick list.

        Args:
            query: Free-text player name
            limit: Maximum candidates returned.
                Defaults to settings.fuzzy_suggestion_limit.
            threshold: Highest distance included.
                Defaults to settings.fuzzy_suggestion_threshold.

        Returns:
            Candidates sorted by distance (closest first), roster order
            breaking ties
        """
        if limit is None:
            limit = settings.fuzzy_suggestion_limit
        if threshold is None:
            threshold = settings.fuzzy_suggestion_threshold

        normalized = normalize_name(query)
        if not normalized or limit <= 0:
            return []

        candidates = [
            candidate
            for candidate in (self._score(normalized, record) for record in self.roster)
            if candidate.distance <= threshold
        ]
        # sorted() is stable, so equal distances keep roster order
        candidates = sorted(candidates, key=lambda c: c.distance)
        return candidates[:limit]

    def match_names(self, names: Iterable[str]) -> dict[str, Optional[RosterRecord]]:
        """
        Resolve several names at once.

        Returns:
            Dict of name -> record (or None), in first-seen order
        """
        results: dict[str, Optional[RosterRecord]] = {}
        for name in names:
            results[name] = self.find_best_match(name)
        return results

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _find_by_exact_name(self, normalized: str) -> Optional[RosterRecord]:
        for record in self.roster:
            if normalize_name(record.name) == normalized:
                return record
        return None

    def _find_by_exact_alias(
        self, normalized: str
    ) -> Optional[tuple[RosterRecord, str]]:
        for record in self.roster:
            for alias in record.aliases:
                if normalize_name(alias) == normalized:
                    return record, alias
        return None

    def _find_by_substring(self, normalized: str) -> Optional[RosterRecord]:
        for record in self.roster:
            name = normalize_name(record.name)
            if name and (normalized in name or name in normalized):
                return record
        return None

    def _score(self, normalized: str, record: RosterRecord) -> MatchCandidate:
        """
        Score one record: the closer of its name and weighted aliases.

        The name is scored first, so an alias only wins when strictly
        closer.
        """
        best = MatchCandidate(
            record=record,
            distance=1.0 - calculate_similarity(normalized, normalize_name(record.name)),
            match_type="fuzzy",
            matched_value=record.name,
        )
        for alias in record.aliases:
            similarity = calculate_similarity(normalized, normalize_name(alias))
            distance = 1.0 - self.alias_weight * similarity
            if distance < best.distance:
                best = MatchCandidate(record, distance, "fuzzy", alias)
        return best


# Convenience functions for one-off lookups

def find_best_match(
    query: str,
    roster: Sequence[RosterRecord],
    threshold: Optional[float] = None,
    include_aliases: bool = True,
) -> Optional[RosterRecord]:
    """
    Find the best roster record for a query, or None.

    See RosterResolver.find_best_match.
    """
    resolver = RosterResolver(roster, threshold=threshold, include_aliases=include_aliases)
    return resolver.find_best_match(query)


# The name the team balancer's contract uses
resolve = find_best_match


def find_all_matches(
    query: str,
    roster: Sequence[RosterRecord],
    limit: Optional[int] = None,
    threshold: Optional[float] = None,
) -> list[MatchCandidate]:
    """
    Ranked candidates for a query. See RosterResolver.find_all_matches.
    """
    return RosterResolver(roster).find_all_matches(query, limit=limit, threshold=threshold)


def match_players_to_roster(
    names: Iterable[str],
    roster: Sequence[RosterRecord],
) -> dict[str, Optional[RosterRecord]]:
    """
    Map each name to its best roster record (or None).
    """
    return RosterResolver(roster).match_names(names)
