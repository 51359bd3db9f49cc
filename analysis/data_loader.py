"""
Data Loader
===========
File-backed pick source. Reads a JSON export of the picks table (a list of
row objects, or ``{"picks": [...]}``) and serves it through the PickSource
interface, so the engine can run against exported data without a database.
"""

import json
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from analysis.picks import PickRecord
from analysis.sources import PickSource, PickSourceError, filter_picks
from analysis.summary import UserPickStats, compute_user_pick_stats

logger = logging.getLogger(__name__)


class DataLoader(PickSource):
    """Load picks from a JSON file."""

    def __init__(self, picks_file: str = "data/picks.json"):
        """
        Args:
            picks_file: Path to the JSON export (default: "data/picks.json")
        """
        self.picks_file = Path(picks_file)
        self._picks: Optional[List[PickRecord]] = None

    def _read_rows(self) -> List[Dict[str, Any]]:
        if not self.picks_file.exists():
            raise PickSourceError(f"Picks file not found: {self.picks_file}")

        try:
            with open(self.picks_file, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PickSourceError(f"Error reading {self.picks_file}: {e}") from e

        if isinstance(data, dict):
            data = data.get("picks", [])
        if not isinstance(data, list):
            raise PickSourceError(f"Expected a list of picks in {self.picks_file}")
        return data

    def load_picks(self) -> List[PickRecord]:
        """Parse every row, skipping (and logging) rows that do not parse."""
        if self._picks is not None:
            return self._picks

        picks = []
        for row in self._read_rows():
            try:
                picks.append(PickRecord.from_dict(row))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed pick row: {e}")

        logger.info(f"Loaded {len(picks)} picks from {self.picks_file}")
        self._picks = picks
        return picks

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
        return filter_picks(
            self.load_picks(),
            start=start,
            end=end,
            owner_id=owner_id,
            sport_filter=sport_filter,
            settled_only=settled_only,
            limit=limit,
            require_odds=require_odds,
        )

    def get_user_pick_stats(self, owner_id: str) -> UserPickStats:
        return compute_user_pick_stats(p for p in self.load_picks() if p.discord_id == owner_id)

    def save_picks(self, picks: List[PickRecord]) -> bool:
        """
        Write picks back out as a JSON list.

        Returns:
            True if saved successfully
        """
        self.picks_file.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.picks_file, "w") as f:
                json.dump([p.to_dict() for p in picks], f, indent=2)
        except OSError as e:
            logger.error(f"Error saving picks to {self.picks_file}: {e}")
            return False

        self._picks = list(picks)
        return True
