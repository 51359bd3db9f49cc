"""
EV Summary Aggregator
=====================
Rolls per-pick EV analyses up into report-ready totals:
  - headline counts, mean EV %, total expected profit, best/worst pick
  - per owner (merged with realized win rate / profit / ROI)
  - per sport
  - per calendar day
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional
import logging

from analysis.ev_calculator import EVAnalysis
from analysis.picks import Outcome, PickRecord

logger = logging.getLogger(__name__)


@dataclass
class UserPickStats:
    """Realized (graded) record for one owner."""
    total_picks: int = 0
    winning_picks: int = 0
    losing_picks: int = 0
    pending_picks: int = 0
    push_picks: int = 0
    win_rate: float = 0.0
    total_profit: float = 0.0
    average_stake: float = 0.0
    average_odds: float = 0.0

    @property
    def roi(self) -> float:
        """Profit as a percent of total amount staked."""
        if self.average_stake <= 0 or self.total_picks == 0:
            return 0.0
        return self.total_profit / (self.average_stake * self.total_picks) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_picks": self.total_picks,
            "winning_picks": self.winning_picks,
            "losing_picks": self.losing_picks,
            "pending_picks": self.pending_picks,
            "push_picks": self.push_picks,
            "win_rate": self.win_rate,
            "total_profit": self.total_profit,
            "average_stake": self.average_stake,
            "average_odds": self.average_odds,
            "roi": self.roi,
        }


def compute_user_pick_stats(picks: Iterable[PickRecord]) -> UserPickStats:
    """Realized stats for one owner's picks. Only wins and losses carry profit."""
    stats = UserPickStats()
    total_stake = 0.0
    total_odds = 0
    odds_count = 0

    for pick in picks:
        stats.total_picks += 1
        if pick.result == Outcome.WIN:
            stats.winning_picks += 1
            stats.total_profit += pick.profit_loss or 0.0
        elif pick.result == Outcome.LOSS:
            stats.losing_picks += 1
            stats.total_profit += pick.profit_loss or 0.0
        elif pick.result == Outcome.PUSH:
            stats.push_picks += 1
        elif pick.result == Outcome.PENDING:
            stats.pending_picks += 1

        total_stake += pick.stake or 0.0
        if pick.odds:
            total_odds += pick.odds
            odds_count += 1

    settled = stats.winning_picks + stats.losing_picks
    stats.win_rate = stats.winning_picks / settled if settled > 0 else 0.0
    stats.average_stake = total_stake / stats.total_picks if stats.total_picks > 0 else 0.0
    stats.average_odds = total_odds / odds_count if odds_count > 0 else 0.0
    return stats


@dataclass
class UserEVStats:
    discord_id: str
    username: Optional[str]
    total_picks: int
    positive_ev_picks: int
    average_ev: float
    total_expected_profit: float
    win_rate: float
    actual_profit: float
    roi: float

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


@dataclass
class SportEVStats:
    sport: str
    total_picks: int
    average_ev: float
    total_expected_profit: float
    best_ev_pick: Optional[EVAnalysis]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sport": self.sport,
            "total_picks": self.total_picks,
            "average_ev": self.average_ev,
            "total_expected_profit": self.total_expected_profit,
            "best_ev_pick": self.best_ev_pick.to_dict() if self.best_ev_pick else None,
        }


@dataclass
class DailyEVStats:
    date: str                     # YYYY-MM-DD
    total_picks: int
    average_ev: float
    total_expected_profit: float
    positive_ev_count: int

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


@dataclass
class EVSummary:
    total_picks: int = 0
    positive_ev_picks: int = 0
    negative_ev_picks: int = 0
    average_ev: float = 0.0
    total_expected_profit: float = 0.0
    best_ev_pick: Optional[EVAnalysis] = None
    worst_ev_pick: Optional[EVAnalysis] = None
    ev_by_user: Dict[str, UserEVStats] = field(default_factory=dict)
    ev_by_sport: Dict[str, SportEVStats] = field(default_factory=dict)
    ev_by_time_range: List[DailyEVStats] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_picks": self.total_picks,
            "positive_ev_picks": self.positive_ev_picks,
            "negative_ev_picks": self.negative_ev_picks,
            "average_ev": self.average_ev,
            "total_expected_profit": self.total_expected_profit,
            "best_ev_pick": self.best_ev_pick.to_dict() if self.best_ev_pick else None,
            "worst_ev_pick": self.worst_ev_pick.to_dict() if self.worst_ev_pick else None,
            "ev_by_user": {k: v.to_dict() for k, v in self.ev_by_user.items()},
            "ev_by_sport": {k: v.to_dict() for k, v in self.ev_by_sport.items()},
            "ev_by_time_range": [d.to_dict() for d in self.ev_by_time_range],
        }


def _average_ev(analyses: List[EVAnalysis]) -> float:
    if not analyses:
        return 0.0
    return sum(a.ev_percentage for a in analyses) / len(analyses)


def _group_by(analyses: List[EVAnalysis], key_fn: Callable[[EVAnalysis], str]) -> Dict[str, List[EVAnalysis]]:
    groups: Dict[str, List[EVAnalysis]] = defaultdict(list)
    for analysis in analyses:
        groups[key_fn(analysis)].append(analysis)
    return groups


UserStatsProvider = Callable[[str], UserPickStats]


class SummaryAggregator:
    """
    Combine EV analyses into an EVSummary.

    Realized performance per owner comes from ``user_stats_provider``
    (usually the pick repository). Without one, realized fields are zero.
    """

    def __init__(self, user_stats_provider: Optional[UserStatsProvider] = None):
        self.user_stats_provider = user_stats_provider

    def _user_stats(self, discord_id: str) -> UserPickStats:
        if self.user_stats_provider is None:
            return UserPickStats()
        try:
            return self.user_stats_provider(discord_id)
        except Exception as e:
            logger.error(f"Could not load realized stats for {discord_id}: {e}")
            return UserPickStats()

    def user_stats(self, discord_id: str, picks: List[EVAnalysis]) -> UserEVStats:
        realized = self._user_stats(discord_id)
        return UserEVStats(
            discord_id=discord_id,
            username=picks[0].username if picks else None,
            total_picks=len(picks),
            positive_ev_picks=sum(1 for p in picks if p.expected_value > 0),
            average_ev=_average_ev(picks),
            total_expected_profit=sum(p.expected_profit for p in picks),
            win_rate=realized.win_rate,
            actual_profit=realized.total_profit,
            roi=realized.roi,
        )

    def summarize(self, analyses: Iterable[EVAnalysis]) -> EVSummary:
        ranked = sorted(analyses, key=lambda a: a.ev_percentage, reverse=True)

        summary = EVSummary(
            total_picks=len(ranked),
            positive_ev_picks=sum(1 for a in ranked if a.expected_value > 0),
            negative_ev_picks=sum(1 for a in ranked if a.expected_value < 0),
            average_ev=_average_ev(ranked),
            total_expected_profit=sum(a.expected_profit for a in ranked),
            best_ev_pick=ranked[0] if ranked else None,
            worst_ev_pick=ranked[-1] if ranked else None,
        )

        for discord_id, user_picks in _group_by(ranked, lambda a: a.discord_id).items():
            summary.ev_by_user[discord_id] = self.user_stats(discord_id, user_picks)

        for sport, sport_picks in _group_by(ranked, lambda a: a.sport).items():
            summary.ev_by_sport[sport] = SportEVStats(
                sport=sport,
                total_picks=len(sport_picks),
                average_ev=_average_ev(sport_picks),
                total_expected_profit=sum(p.expected_profit for p in sport_picks),
                best_ev_pick=sport_picks[0],
            )

        daily = [
            DailyEVStats(
                date=date,
                total_picks=len(day_picks),
                average_ev=_average_ev(day_picks),
                total_expected_profit=sum(p.expected_profit for p in day_picks),
                positive_ev_count=sum(1 for p in day_picks if p.expected_value > 0),
            )
            for date, day_picks in _group_by(ranked, lambda a: a.date).items()
        ]
        summary.ev_by_time_range = sorted(daily, key=lambda d: d.date, reverse=True)

        return summary

    def leaderboard(self, summary: EVSummary, limit: int = 10) -> List[UserEVStats]:
        """Owners ranked by average EV %."""
        users = [u for u in summary.ev_by_user.values() if u.total_picks > 0]
        return sorted(users, key=lambda u: u.average_ev, reverse=True)[:limit]
