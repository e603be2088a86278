"""Team name normalisation between fixture providers and The Odds API."""

from __future__ import annotations

import re
from typing import FrozenSet

# Club-type tokens dropped before comparing names ("AC Milan" == "Milan").
CLUB_TOKENS: FrozenSet[str] = frozenset(
    {"fc", "ssc", "uc", "ac", "calcio", "football", "club"}
)

_TOKEN_SPLIT = re.compile(r"[\s\-_.]+")
_NON_ALPHA = re.compile(r"[^a-z]")


def normalize_team_name(name: str) -> str:
    """Lowercase, drop club-type tokens, keep letters only.

    Only whole tokens are removed, so "Inter" and "Internazionale" stay
    distinct and matching relies on the feed's naming conventions.
    """
    tokens = [
        token
        for token in _TOKEN_SPLIT.split(name.lower())
        if _NON_ALPHA.sub("", token) not in CLUB_TOKENS
    ]
    return _NON_ALPHA.sub("", "".join(tokens))
