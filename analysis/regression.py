"""
Regression-to-Mean Analyzer
===========================
Compares how far recent results landed from the line against the group's
historical margin. Performance is signed so that "good for the bettor" is
always positive:

    over:  actual - line
    under: line - actual

A recent average 1.5+ away from the historical average marks a candidate
expected to drift back.

The over/under run counters walk the recent margins newest-first and stop at
the first margin inside the ±0.5 band. A margin on either side of the band
keeps the walk going, so both counters can be non-zero.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from analysis.picks import PickRecord, Side, sort_newest_first, split_group_key

logger = logging.getLogger(__name__)

# Confidence = diff / 5, capped
MAX_REGRESSION_CONFIDENCE = 0.9


@dataclass
class RegressionAnalysis:
    """Regression candidate for one player/stat group."""
    player_name: str
    stat_type: str
    current_performance: float    # mean recent margin
    expected_regression: float    # mean historical margin (the target)
    regression_confidence: float
    over_performance_streak: int
    under_performance_streak: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_name": self.player_name,
            "stat_type": self.stat_type,
            "current_performance": self.current_performance,
            "expected_regression": self.expected_regression,
            "regression_confidence": self.regression_confidence,
            "over_performance_streak": self.over_performance_streak,
            "under_performance_streak": self.under_performance_streak,
        }


def performance_margin(pick: PickRecord) -> float:
    """Signed distance of the result from the line, positive = beat the line."""
    actual_value = pick.actual_value or 0.0
    if pick.over_under == Side.OVER:
        return actual_value - pick.line
    return pick.line - actual_value


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def performance_runs(recent: List[float], baseline: float, band: float = 0.5):
    """
    Leading (over, under) run lengths relative to ``baseline ± band``.

    The walk ends at the first margin inside the band; crossing from one side
    to the other does not end it.
    """
    over_run = 0
    under_run = 0
    for perf in recent:
        if perf > baseline + band:
            over_run += 1
        elif perf < baseline - band:
            under_run += 1
        else:
            break
    return over_run, under_run


class RegressionAnalyzer:
    """
    Detect regression-to-mean candidates.

    Strategy:
    - Recent window = min(max_recent, floor(recent_fraction * n)) newest picks
    - Compare mean recent margin with mean historical margin
    """

    def __init__(self, min_difference: float = 1.5, max_recent: int = 5,
                 recent_fraction: float = 0.3, streak_band: float = 0.5):
        """
        Args:
            min_difference: Minimum |recent - historical| margin gap (default 1.5)
            max_recent: Cap on the recent window (default 5)
            recent_fraction: Share of the group treated as "recent" (default 30%)
            streak_band: Half-width of the neutral band for run counting (default 0.5)
        """
        self.min_difference = min_difference
        self.max_recent = max_recent
        self.recent_fraction = recent_fraction
        self.streak_band = streak_band

    def analyze_group(self, player_name: str, stat_type: str,
                      picks: List[PickRecord]) -> Optional[RegressionAnalysis]:
        sorted_picks = sort_newest_first(picks)
        recent_count = min(self.max_recent, int(len(sorted_picks) * self.recent_fraction))

        if recent_count == 0:
            return None

        recent_performance = [performance_margin(p) for p in sorted_picks[:recent_count]]
        historical_performance = [performance_margin(p) for p in sorted_picks[recent_count:]]

        avg_recent = _mean(recent_performance)
        avg_historical = _mean(historical_performance)
        performance_diff = abs(avg_recent - avg_historical)

        if performance_diff < self.min_difference:
            return None

        over_run, under_run = performance_runs(recent_performance, avg_historical, self.streak_band)

        return RegressionAnalysis(
            player_name=player_name,
            stat_type=stat_type,
            current_performance=avg_recent,
            expected_regression=avg_historical,
            regression_confidence=min(MAX_REGRESSION_CONFIDENCE, performance_diff / 5),
            over_performance_streak=over_run,
            under_performance_streak=under_run,
        )

    def analyze(self, grouped_picks: Dict[str, List[PickRecord]],
                min_sample_size: int = 5) -> List[RegressionAnalysis]:
        """
        Analyze every group.

        Returns:
            RegressionAnalysis list, highest confidence first
        """
        candidates = []
        for key, picks in grouped_picks.items():
            if len(picks) < min_sample_size:
                continue
            player_name, stat_type = split_group_key(key)
            candidate = self.analyze_group(player_name, stat_type, picks)
            if candidate is not None:
                candidates.append(candidate)

        return sorted(candidates, key=lambda c: c.regression_confidence, reverse=True)
