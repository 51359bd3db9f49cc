"""
EV REPORT SERVICE
=================
The per-pick reporting path: fetch picks for a window, rate each one with
the EV calculator, and roll the ratings up for leaderboards and reports.
Unlike the trend engine this path does not group picks and includes
ungraded (pending) picks, since EV is a pre-result measure.

Usage:
    from engine.ev_report import EVReportService
    service = EVReportService(repository)
    top = service.get_top_ev_picks("today", limit=5, min_ev=2.0)
    board = service.get_user_ev_leaderboard("week")
"""

from datetime import datetime, timedelta
from typing import Callable, List, Optional
import logging

from analysis.ev_calculator import EVAnalysis, EVCalculator
from analysis.sources import PickSource
from analysis.summary import EVSummary, SummaryAggregator, UserEVStats
from config import Settings, get_settings
from engine.trend_engine import utc_now

logger = logging.getLogger(__name__)

TIME_RANGES = ("today", "week", "month")


class EVReportService:
    """EV analysis, summaries and leaderboards over a pick source."""

    def __init__(
        self,
        pick_source: PickSource,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
        calculator: Optional[EVCalculator] = None,
    ):
        self.pick_source = pick_source
        self.settings = settings or get_settings()
        self.clock = clock
        self.calculator = calculator or EVCalculator(default_stake=self.settings.DEFAULT_STAKE)
        self.aggregator = SummaryAggregator(user_stats_provider=pick_source.get_user_pick_stats)

    def start_date_for_range(self, time_range: str) -> datetime:
        """Window start for "today" (UTC midnight), "week" (7d) or "month" (30d)."""
        now = self.clock()
        if time_range == "today":
            return now.replace(hour=0, minute=0, second=0, microsecond=0)
        if time_range == "week":
            return now - timedelta(days=7)
        if time_range == "month":
            return now - timedelta(days=30)
        raise ValueError(f"Unknown time range '{time_range}', expected one of {TIME_RANGES}")

    def get_ev_analysis(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        owner_id: Optional[str] = None,
        sport: Optional[str] = None,
        min_ev: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> List[EVAnalysis]:
        """
        EV-rate picks created in a window.

        Args:
            start: Window start (default: 24 hours ago)
            end: Window end (default: now)
            owner_id: Only this owner's picks
            sport: Category substring filter
            min_ev: Drop picks below this EV percentage
            limit: Maximum picks fetched (default: settings.EV_REPORT_LIMIT)

        Returns:
            EVAnalysis list, best EV% first; empty if the fetch fails
        """
        end = end or self.clock()
        start = start or end - timedelta(hours=24)
        limit = self.settings.EV_REPORT_LIMIT if limit is None else limit

        try:
            picks = self.pick_source.fetch_picks(
                start, end,
                owner_id=owner_id,
                sport_filter=sport,
                settled_only=False,
                limit=limit,
                require_odds=True,
            )
        except Exception as e:
            logger.error(f"Error getting EV analysis: {e}")
            return []

        return self.calculator.analyze_picks(picks, min_ev=min_ev)

    def get_ev_summary(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        owner_id: Optional[str] = None,
    ) -> EVSummary:
        analyses = self.get_ev_analysis(start=start, end=end, owner_id=owner_id)
        return self.aggregator.summarize(analyses)

    def get_top_ev_picks(self, time_range: str, limit: int = 10, min_ev: float = 0) -> List[EVAnalysis]:
        """Best EV picks for the leaderboard."""
        return self.get_ev_analysis(
            start=self.start_date_for_range(time_range),
            end=self.clock(),
            min_ev=min_ev,
            limit=limit,
        )

    def get_user_ev_leaderboard(self, time_range: str, limit: int = 10) -> List[UserEVStats]:
        """Owners ranked by average EV% over the window."""
        summary = self.get_ev_summary(start=self.start_date_for_range(time_range))
        return self.aggregator.leaderboard(summary, limit=limit)
