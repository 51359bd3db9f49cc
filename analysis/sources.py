"""
Pick Sources
============
The boundary between the analytics engine and wherever picks are stored.
The engine only ever talks to a PickSource; concrete sources live in
``analysis.data_loader`` (JSON files) and ``database.repository`` (SQL).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from analysis.picks import SETTLED_OUTCOMES, PickRecord, sort_newest_first
from analysis.summary import UserPickStats


class PickSourceError(RuntimeError):
    """The pick store could not be read."""


class PickSource(ABC):
    """Abstract provider of historical picks."""

    @abstractmethod
    def fetch_picks(
        self,
        start: datetime,
        end: datetime,
        owner_id: Optional[str] = None,
        sport_filter: Optional[str] = None,
        settled_only: bool = True,
        limit: Optional[int] = None,
        require_odds: bool = False,
    ) -> List[PickRecord]:
        """
        Picks created in ``[start, end]``, newest first.

        Args:
            owner_id: Only this owner's picks
            sport_filter: Case-insensitive substring match on the category label
            settled_only: Only graded picks with a recorded actual value
            limit: Maximum number of picks returned
            require_odds: Only picks with both odds and confidence recorded,
                applied before ``limit``
        """

    @abstractmethod
    def get_user_pick_stats(self, owner_id: str) -> UserPickStats:
        """Realized record for one owner across all their picks."""


def filter_picks(
    picks: Iterable[PickRecord],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    owner_id: Optional[str] = None,
    sport_filter: Optional[str] = None,
    settled_only: bool = True,
    limit: Optional[int] = None,
    require_odds: bool = False,
) -> List[PickRecord]:
    """In-memory equivalent of the repository query."""
    sport = sport_filter.lower() if sport_filter else None
    selected = []
    for pick in picks:
        if start is not None and pick.created_at < start:
            continue
        if end is not None and pick.created_at > end:
            continue
        if owner_id is not None and pick.discord_id != owner_id:
            continue
        if sport is not None and sport not in pick.pick_type.lower():
            continue
        if settled_only and (pick.result not in SETTLED_OUTCOMES or pick.actual_value is None):
            continue
        if require_odds and (pick.odds is None or pick.confidence is None):
            continue
        selected.append(pick)

    selected = sort_newest_first(selected)
    if limit is not None:
        selected = selected[:limit]
    return selected
