"""
Analysis Package
================
Statistical core for pick analytics.

Modules:
    - picks: Pick records, grouping and ordering helpers
    - ev_calculator: Expected-value math per pick
    - streaks: Active win/loss streaks
    - trend_breaks: Recent vs historical hit-rate divergence
    - outliers: Z-score outliers on the current line
    - regression: Regression-to-mean candidates
    - summary: EV rollups by owner, sport and day
    - sources / data_loader: Pick source interface and JSON implementation
"""

from analysis.picks import (
    PickRecord,
    Side,
    Outcome,
    group_picks_by_subject_stat,
)
from analysis.ev_calculator import EVCalculator, EVAnalysis, InvalidOddsError, calculate_ev
from analysis.streaks import StreakAnalyzer, StreakAnalysis
from analysis.trend_breaks import TrendBreakDetector, TrendBreak
from analysis.outliers import OutlierDetector, StatisticalOutlier
from analysis.regression import RegressionAnalyzer, RegressionAnalysis
from analysis.summary import (
    SummaryAggregator,
    EVSummary,
    UserPickStats,
    UserEVStats,
    compute_user_pick_stats,
)
from analysis.sources import PickSource, PickSourceError
from analysis.data_loader import DataLoader

__all__ = [
    "PickRecord",
    "Side",
    "Outcome",
    "group_picks_by_subject_stat",
    "EVCalculator",
    "EVAnalysis",
    "InvalidOddsError",
    "calculate_ev",
    "StreakAnalyzer",
    "StreakAnalysis",
    "TrendBreakDetector",
    "TrendBreak",
    "OutlierDetector",
    "StatisticalOutlier",
    "RegressionAnalyzer",
    "RegressionAnalysis",
    "SummaryAggregator",
    "EVSummary",
    "UserPickStats",
    "UserEVStats",
    "compute_user_pick_stats",
    "PickSource",
    "PickSourceError",
    "DataLoader",
]
