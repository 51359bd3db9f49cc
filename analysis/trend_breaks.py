"""
Trend Break Detector
====================
Flags player/stat groups whose recent hit rate has split from their history.

The newest quarter of a group (never fewer than 3 picks) is compared with
everything older. A relative move of 25%+ is a break:
- performance_decline: recent hit rate fell (e.g. 80% → 20%)
- performance_surge:   recent hit rate rose

Groups with a 0% historical hit rate have no baseline to deviate from and
are skipped.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from analysis.picks import (
    PickRecord,
    hit_rate,
    most_common_line,
    most_common_side,
    sort_newest_first,
    split_group_key,
)

logger = logging.getLogger(__name__)

PERFORMANCE_DECLINE = "performance_decline"
PERFORMANCE_SURGE = "performance_surge"


@dataclass
class TrendBreak:
    """Recent-vs-historical divergence for one player/stat group."""
    player_name: str
    stat_type: str
    line: float                   # most common line in the group
    over_under: str               # most common side in the group
    historical_hit_rate: float
    recent_hit_rate: float
    deviation_percentage: float
    confidence_score: float
    sample_size: int
    trend_break_type: str         # "performance_decline" or "performance_surge"
    reasoning: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_name": self.player_name,
            "stat_type": self.stat_type,
            "line": self.line,
            "over_under": self.over_under,
            "historical_hit_rate": self.historical_hit_rate,
            "recent_hit_rate": self.recent_hit_rate,
            "deviation_percentage": self.deviation_percentage,
            "confidence_score": self.confidence_score,
            "sample_size": self.sample_size,
            "trend_break_type": self.trend_break_type,
            "reasoning": self.reasoning,
        }


def trend_break_confidence(deviation_percentage: float, recent_sample: int,
                           historical_sample: int) -> float:
    deviation_score = min(1.0, deviation_percentage / 100)
    recent_sample_score = min(1.0, recent_sample / 10)
    historical_sample_score = min(1.0, historical_sample / 20)
    return deviation_score * 0.6 + recent_sample_score * 0.2 + historical_sample_score * 0.2


class TrendBreakDetector:
    """
    Detect hit-rate trend breaks.

    Strategy:
    - Recent window = max(min_recent, floor(recent_fraction * n)) newest picks
    - Historical window must itself hold min_sample_size picks
    - Deviation is relative to the historical hit rate
    """

    def __init__(self, min_deviation: float = 25.0, recent_fraction: float = 0.25,
                 min_recent: int = 3):
        """
        Args:
            min_deviation: Minimum relative deviation in percent (default 25)
            recent_fraction: Share of the group treated as "recent" (default 25%)
            min_recent: Floor on the recent window size (default 3)
        """
        self.min_deviation = min_deviation
        self.recent_fraction = recent_fraction
        self.min_recent = min_recent

    def recent_window(self, n: int) -> int:
        return max(self.min_recent, int(n * self.recent_fraction))

    def analyze_group(self, player_name: str, stat_type: str, picks: List[PickRecord],
                      min_sample_size: int = 5) -> Optional[TrendBreak]:
        sorted_picks = sort_newest_first(picks)
        recent_count = self.recent_window(len(sorted_picks))
        recent_picks = sorted_picks[:recent_count]
        historical_picks = sorted_picks[recent_count:]

        if len(historical_picks) < min_sample_size:
            return None

        recent_hit_rate, recent_total = hit_rate(recent_picks)
        historical_hit_rate, historical_total = hit_rate(historical_picks)

        if historical_hit_rate == 0:
            logger.debug(f"{player_name} {stat_type}: 0% historical hit rate, cannot measure deviation")
            return None

        deviation_percentage = abs((recent_hit_rate - historical_hit_rate) / historical_hit_rate) * 100
        if deviation_percentage < self.min_deviation:
            return None

        if recent_hit_rate < historical_hit_rate:
            trend_break_type = PERFORMANCE_DECLINE
        else:
            trend_break_type = PERFORMANCE_SURGE

        return TrendBreak(
            player_name=player_name,
            stat_type=stat_type,
            line=most_common_line(sorted_picks),
            over_under=most_common_side(sorted_picks).value,
            historical_hit_rate=historical_hit_rate,
            recent_hit_rate=recent_hit_rate,
            deviation_percentage=deviation_percentage,
            confidence_score=trend_break_confidence(deviation_percentage, recent_total, historical_total),
            sample_size=len(sorted_picks),
            trend_break_type=trend_break_type,
            reasoning=(
                f"Recent {recent_count} games show {deviation_percentage:.1f}% "
                f"{trend_break_type.replace('_', ' ')} vs historical average"
            ),
        )

    def analyze(self, grouped_picks: Dict[str, List[PickRecord]],
                min_sample_size: int = 5) -> List[TrendBreak]:
        """
        Analyze every group.

        Returns:
            TrendBreak list, highest confidence first
        """
        breaks = []
        for key, picks in grouped_picks.items():
            if len(picks) < min_sample_size:
                continue
            player_name, stat_type = split_group_key(key)
            trend_break = self.analyze_group(player_name, stat_type, picks, min_sample_size)
            if trend_break is not None:
                breaks.append(trend_break)

        return sorted(breaks, key=lambda b: b.confidence_score, reverse=True)
