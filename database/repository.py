"""SQL-backed pick source"""

from datetime import datetime
from typing import Iterable, List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from analysis.picks import SETTLED_OUTCOMES, PickRecord
from analysis.sources import PickSource, PickSourceError
from analysis.summary import UserPickStats, compute_user_pick_stats
from database.db import make_session_factory, session_scope
from database.models import FinalPick

# Matches the per-user history cap of the bot's stats command
USER_STATS_PICK_LIMIT = 1000


class PickRepository(PickSource):
    """Reads picks from the ``final_picks`` table"""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or make_session_factory()

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
        try:
            with session_scope(self.session_factory) as db:
                query = db.query(FinalPick).filter(
                    FinalPick.created_at >= start,
                    FinalPick.created_at <= end,
                )

                if owner_id:
                    query = query.filter(FinalPick.discord_id == owner_id)

                if sport_filter:
                    query = query.filter(FinalPick.pick_type.ilike(f"%{sport_filter}%"))

                if settled_only:
                    query = query.filter(
                        FinalPick.result.in_(SETTLED_OUTCOMES),
                        FinalPick.player_name.isnot(None),
                        FinalPick.stat_type.isnot(None),
                        FinalPick.line.isnot(None),
                        FinalPick.actual_value.isnot(None),
                    )

                if require_odds:
                    query = query.filter(
                        FinalPick.odds.isnot(None),
                        FinalPick.confidence.isnot(None),
                    )

                query = query.order_by(FinalPick.created_at.desc())
                if limit is not None:
                    query = query.limit(limit)

                records = [row.to_record() for row in query.all()]
        except SQLAlchemyError as e:
            raise PickSourceError(f"Error fetching picks: {e}") from e

        logger.debug(f"Fetched {len(records)} picks ({start:%Y-%m-%d} → {end:%Y-%m-%d})")
        return records

    def get_user_pick_stats(self, owner_id: str) -> UserPickStats:
        try:
            with session_scope(self.session_factory) as db:
                rows = (
                    db.query(FinalPick)
                    .filter(FinalPick.discord_id == owner_id)
                    .order_by(FinalPick.created_at.desc())
                    .limit(USER_STATS_PICK_LIMIT)
                    .all()
                )
                records = [row.to_record() for row in rows]
        except SQLAlchemyError as e:
            raise PickSourceError(f"Error loading stats for {owner_id}: {e}") from e

        return compute_user_pick_stats(records)

    def add_picks(self, picks: Iterable[PickRecord]) -> int:
        """Insert picks; returns the number written"""
        rows = [FinalPick.from_record(p) for p in picks]
        try:
            with session_scope(self.session_factory) as db:
                db.add_all(rows)
        except SQLAlchemyError as e:
            raise PickSourceError(f"Error saving picks: {e}") from e

        logger.info(f"Saved {len(rows)} picks")
        return len(rows)
