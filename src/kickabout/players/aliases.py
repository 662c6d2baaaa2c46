"""
Player name parsing and comparison utilities.

Player names arrive in many shapes:
- Roster catalog: "Ne (Negm / N / Nagm)"
- Typed by an organiser: "negm"
- Pasted from a group chat: "  Mohamed  "
- OCR'd from a screenshot: "Mohamd"

This module splits catalog names into a main name plus aliases, and
provides the normalisation and similarity scoring the identity resolver
builds on. Everything here is pure string handling.
"""

import re
from typing import NamedTuple, Sequence

from rapidfuzz.distance import Levenshtein


# Leading text up to the first "(", then an optional "( ... )" group.
# An unclosed or empty group simply doesn't match the optional part.
CATALOG_NAME_PATTERN = re.compile(r"^([^(]+)(?:\s*\(([^)]+)\))?")

# Separators allowed between aliases inside the parentheses
ALIAS_SEPARATOR_PATTERN = re.compile(r"[/,;|]")


class ParsedName(NamedTuple):
    """A catalog name split into its main name and aliases."""
    main_name: str
    aliases: list[str]


def extract_aliases(raw: str) -> ParsedName:
    """
    Split a catalog name of the form "Name (alias1 / alias2)".

    Aliases may be separated by any of "/ , ; |". Empty pieces are
    dropped. Input without a usable parenthesised group (including
    unbalanced parentheses) yields no aliases rather than an error.

    Args:
        raw: Name as stored in the roster catalog

    Returns:
        ParsedName with the trimmed main name and the alias list

    Examples:
        >>> extract_aliases("Ne (Negm / N)")
        ParsedName(main_name='Ne', aliases=['Negm', 'N'])
        >>> extract_aliases("Sam")
        ParsedName(main_name='Sam', aliases=[])
    """
    match = CATALOG_NAME_PATTERN.match(raw)
    if not match:
        return ParsedName(raw.strip(), [])

    main_name = match.group(1).strip()
    alias_string = match.group(2)
    if not alias_string:
        return ParsedName(main_name, [])

    aliases = [
        piece.strip()
        for piece in ALIAS_SEPARATOR_PATTERN.split(alias_string)
        if piece.strip()
    ]
    return ParsedName(main_name, aliases)


def format_catalog_name(name: str, aliases: Sequence[str] = ()) -> str:
    """
    Build the catalog form of a name, the inverse of extract_aliases.

    Examples:
        >>> format_catalog_name("Ne", ["Negm", "N"])
        'Ne (Negm / N)'
        >>> format_catalog_name("Sam")
        'Sam'
    """
    if not aliases:
        return name
    return f"{name} ({' / '.join(aliases)})"


def normalize_name(name: str) -> str:
    """
    Normalize a name for comparison.

    Lowercases, trims, and collapses runs of whitespace so that
    "  Mo   Salah " and "mo salah" compare equal.
    """
    if not name:
        return ""
    return " ".join(name.lower().split())


def calculate_similarity(str1: str, str2: str) -> float:
    """
    Compare two strings and return a similarity score.

    The score is one minus the Levenshtein distance divided by the
    length of the longer string, computed case-insensitively.

    Args:
        str1: First string
        str2: Second string

    Returns:
        1.0 for identical strings, 0.0 when exactly one is empty,
        otherwise a value in between (higher is more similar)

    Examples:
        >>> calculate_similarity("Mohamed", "mohamed")
        1.0
        >>> calculate_similarity("", "x")
        0.0
    """
    s1 = str1.lower()
    s2 = str2.lower()

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    distance = Levenshtein.distance(s1, s2)
    return 1.0 - distance / max(len(s1), len(s2))
