"""Sport lookup used to bucket picks by sport"""

from typing import List, Tuple


# Checked in order; the first keyword found in the category label wins.
SPORT_KEYWORDS: List[Tuple[str, str]] = [
    ("nba", "NBA"),
    ("nfl", "NFL"),
    ("nhl", "NHL"),
    ("mlb", "MLB"),
    ("soccer", "Soccer"),
    ("football", "NFL"),
    ("basketball", "NBA"),
    ("hockey", "NHL"),
    ("baseball", "MLB"),
]

UNKNOWN_SPORT = "Other"


def extract_sport(category: str) -> str:
    """Map a free-text pick category (e.g. "nba_player_prop") to a sport name"""
    lowered = (category or "").lower()
    for keyword, sport in SPORT_KEYWORDS:
        if keyword in lowered:
            return sport
    return UNKNOWN_SPORT
