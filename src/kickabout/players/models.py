"""
Roster record model and ingestion helpers.

The roster itself lives in the storage layer. What reaches the matching
and balancing code is an immutable snapshot of RosterRecord objects, built
once at this boundary. Loose source data (missing aliases, missing rating,
free-text positions, catalog names with embedded aliases) is cleaned up
here so nothing downstream has to guess.
"""

import math
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kickabout.config import settings
from kickabout.players.aliases import extract_aliases


SKILL_FIELDS = (
    "shooting",
    "passing",
    "ball_control",
    "playmaking",
    "defending",
    "fitness",
)

# Skills are scored 0-10; a missing skill counts as average
DEFAULT_SKILL = 5


class Position(str, Enum):
    """Preferred position on a five-a-side pitch."""

    ATTACKING = "attacking"
    MIDFIELD = "midfield"
    DEFENSIVE = "defensive"
    EVERYWHERE = "everywhere"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Position":
        """
        Map free text to a position.

        Keywords are checked in order (attacking, midfield, defensive);
        anything unrecognised plays everywhere.

        Examples:
            >>> Position.parse("Striker")
            <Position.ATTACKING: 'attacking'>
            >>> Position.parse("GK")
            <Position.DEFENSIVE: 'defensive'>
        """
        if not value:
            return cls.EVERYWHERE

        text = value.strip().lower()
        if any(word in text for word in ("attack", "forward", "striker")):
            return cls.ATTACKING
        if any(word in text for word in ("mid", "center")):
            return cls.MIDFIELD
        if any(word in text for word in ("defen", "back", "keeper", "gk")):
            return cls.DEFENSIVE
        return cls.EVERYWHERE


def _round_half_up(number: float) -> int:
    """Round halves upwards: 6.5 -> 7, 4.5 -> 5."""
    return math.floor(number + 0.5)


def _clamp_skill(value: Any) -> int:
    if value is None or value == "":
        return DEFAULT_SKILL
    try:
        number = float(value)
    except (TypeError, ValueError):
        return DEFAULT_SKILL
    if math.isnan(number):
        return DEFAULT_SKILL
    # Clamp first so "inf" lands on 10
    return _round_half_up(max(0.0, min(10.0, number)))


def _alias_text(alias: Any) -> Any:
    """Integer aliases (shirt numbers in JSON rosters) become text."""
    if isinstance(alias, int) and not isinstance(alias, bool):
        return str(alias)
    return alias


def _alias_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _parse_flag(value: Any) -> bool:
    """Linchpin flags arrive as booleans or as ticks/words from spreadsheets."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in {"\u2714\ufe0e", "\u2713", "yes", "true", "1"}


def calculate_overall_score(
    shooting: Any = None,
    passing: Any = None,
    ball_control: Any = None,
    playmaking: Any = None,
    defending: Any = None,
    fitness: Any = None,
) -> int:
    """
    Average the six 0-10 skills and scale to 0-100.

    Each skill is clamped to 0-10; missing or unreadable values count as 5.

    Examples:
        >>> calculate_overall_score(7, 7, 7, 7, 7, 7)
        70
        >>> calculate_overall_score()
        50
    """
    skills = [shooting, passing, ball_control, playmaking, defending, fitness]
    total = sum(_clamp_skill(skill) for skill in skills)
    return _round_half_up(total * 10 / 6)


class RosterRecord(BaseModel):
    """Immutable snapshot of one roster player."""

    name: str = Field(..., min_length=1)
    aliases: tuple[str, ...] = ()
    rating: int = Field(..., ge=0, le=100)
    position: Position = Position.EVERYWHERE
    id: Optional[str] = None
    is_linchpin: bool = False

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped

    @field_validator("aliases", mode="before")
    @classmethod
    def clean_aliases(cls, v: Any) -> tuple[str, ...]:
        cleaned = []
        for alias in _alias_list(v):
            alias = _alias_text(alias)
            if alias is None:
                continue
            if not isinstance(alias, str):
                raise ValueError(f"alias must be text, got {type(alias).__name__}")
            if alias.strip():
                cleaned.append(alias.strip())
        return tuple(cleaned)

    @classmethod
    def from_raw(
        cls,
        data: Mapping[str, Any],
        default_rating: Optional[int] = None,
    ) -> "RosterRecord":
        """
        Build a record from a loosely shaped mapping.

        Accepts the storage layer's column names (overall_score,
        preferred_position) as well as the short ones (rating, position).
        A catalog-style name like "Ne (Negm / N)" is split, and the parsed
        aliases come before any explicit ones.

        Args:
            data: Raw row from storage or import
            default_rating: Rating when neither a rating nor any skill is
                present. Defaults to settings.default_player_rating.

        Raises:
            pydantic.ValidationError: If the cleaned data is still invalid
        """
        parsed = extract_aliases(str(data.get("name") or ""))

        aliases: list[Any] = []
        seen: set[str] = set()
        for alias in [*parsed.aliases, *_alias_list(data.get("aliases"))]:
            alias = _alias_text(alias)
            if alias is None:
                continue
            if not isinstance(alias, str):
                # Left for the aliases validator to reject
                aliases.append(alias)
                continue
            if not alias.strip():
                continue
            key = alias.strip().lower()
            if key not in seen:
                seen.add(key)
                aliases.append(alias.strip())

        rating = data.get("rating")
        if rating is None:
            rating = data.get("overall_score")
        if rating is None:
            if any(data.get(skill) is not None for skill in SKILL_FIELDS):
                rating = calculate_overall_score(
                    **{skill: data.get(skill) for skill in SKILL_FIELDS}
                )
            elif default_rating is not None:
                rating = default_rating
            else:
                rating = settings.default_player_rating

        position = data.get("position")
        if position is None:
            position = data.get("preferred_position")
        if not isinstance(position, Position):
            try:
                position = Position(str(position).strip().lower())
            except ValueError:
                position = Position.parse(None if position is None else str(position))

        record_id = data.get("id")
        return cls(
            name=parsed.main_name,
            aliases=aliases,
            rating=rating,
            position=position,
            id=str(record_id) if record_id is not None else None,
            is_linchpin=_parse_flag(data.get("is_linchpin")),
        )


def load_roster(
    rows: Iterable[Mapping[str, Any]],
    default_rating: Optional[int] = None,
) -> list[RosterRecord]:
    """
    Convert raw roster rows into RosterRecord snapshots, keeping order.

    Roster order matters: the identity resolver breaks ties by it.
    """
    return [RosterRecord.from_raw(row, default_rating=default_rating) for row in rows]
