"""
TREND ENGINE: Unified Orchestrator
==================================
Single entry point for pick trend analysis.

This module orchestrates:
  - PickSource: fetches the settled picks for the analysis window
  - group_picks_by_subject_stat: buckets picks by player|stat once
  - StreakAnalyzer: active win/loss runs
  - TrendBreakDetector: recent vs historical hit-rate splits
  - OutlierDetector: z-score outliers on the current line
  - RegressionAnalyzer: regression-to-mean candidates

Each detector runs independently over the same grouping, then every list is
cut down to items at or above the confidence threshold.

If the pick source fails, the engine logs it and returns an empty
AnalysisSummary. Callers always get a well-formed result.

Usage:
    from engine.trend_engine import TrendAnalysisEngine
    from analysis.data_loader import DataLoader

    engine = TrendAnalysisEngine(DataLoader("data/picks.json"))
    summary = engine.perform_trend_analysis(days_back=30, sport_filter="nba")
    for streak in summary.streaks:
        print(streak.player_name, streak.current_streak)
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional
import logging

from analysis.picks import PickRecord, group_picks_by_subject_stat
from analysis.sources import PickSource
from analysis.streaks import StreakAnalyzer, StreakAnalysis
from analysis.trend_breaks import TrendBreakDetector, TrendBreak
from analysis.outliers import OutlierDetector, StatisticalOutlier
from analysis.regression import RegressionAnalyzer, RegressionAnalysis
from config import Settings, get_settings

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AnalysisMetadata:
    total_picks_analyzed: int
    start: datetime
    end: datetime
    confidence_threshold: float
    min_sample_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_picks_analyzed": self.total_picks_analyzed,
            "date_range": {
                "start": self.start.isoformat(),
                "end": self.end.isoformat(),
            },
            "confidence_threshold": self.confidence_threshold,
            "min_sample_size": self.min_sample_size,
        }


@dataclass
class AnalysisSummary:
    """Bundle of all detector outputs for one analysis run."""
    analysis_metadata: AnalysisMetadata
    streaks: List[StreakAnalysis] = field(default_factory=list)
    trend_breaks: List[TrendBreak] = field(default_factory=list)
    statistical_outliers: List[StatisticalOutlier] = field(default_factory=list)
    regression_candidates: List[RegressionAnalysis] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.streaks or self.trend_breaks
                    or self.statistical_outliers or self.regression_candidates)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "streaks": [s.to_dict() for s in self.streaks],
            "trend_breaks": [t.to_dict() for t in self.trend_breaks],
            "statistical_outliers": [o.to_dict() for o in self.statistical_outliers],
            "regression_candidates": [r.to_dict() for r in self.regression_candidates],
            "analysis_metadata": self.analysis_metadata.to_dict(),
        }


class TrendAnalysisEngine:
    """
    Orchestrates the four detectors over one fetched pick collection.

    All collaborators are injected; detector thresholds default to the
    values in Settings.
    """

    def __init__(
        self,
        pick_source: PickSource,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
        streak_analyzer: Optional[StreakAnalyzer] = None,
        trend_break_detector: Optional[TrendBreakDetector] = None,
        outlier_detector: Optional[OutlierDetector] = None,
        regression_analyzer: Optional[RegressionAnalyzer] = None,
    ):
        self.pick_source = pick_source
        self.settings = settings or get_settings()
        self.clock = clock

        self.streak_analyzer = streak_analyzer or StreakAnalyzer(
            min_streak_length=self.settings.STREAK_MIN_LENGTH
        )
        self.trend_break_detector = trend_break_detector or TrendBreakDetector(
            min_deviation=self.settings.TREND_BREAK_MIN_DEVIATION
        )
        self.outlier_detector = outlier_detector or OutlierDetector(
            min_z_score=self.settings.OUTLIER_MIN_Z_SCORE
        )
        self.regression_analyzer = regression_analyzer or RegressionAnalyzer(
            min_difference=self.settings.REGRESSION_MIN_DIFFERENCE
        )

    def perform_trend_analysis(
        self,
        days_back: Optional[int] = None,
        min_sample_size: Optional[int] = None,
        confidence_threshold: Optional[float] = None,
        sport_filter: Optional[str] = None,
    ) -> AnalysisSummary:
        """
        Fetch the window's settled picks and run every detector.

        Args:
            days_back: Size of the fetch window in days (default: settings)
            min_sample_size: Minimum picks per player/stat group (default: settings)
            confidence_threshold: Minimum confidence for reported items (default: settings)
            sport_filter: Category substring passed to the pick source

        Returns:
            AnalysisSummary; empty (with total_picks_analyzed=0) on fetch failure
        """
        days_back = self.settings.DAYS_BACK if days_back is None else days_back
        min_sample_size = self.settings.MIN_SAMPLE_SIZE if min_sample_size is None else min_sample_size
        if confidence_threshold is None:
            confidence_threshold = self.settings.CONFIDENCE_THRESHOLD
        if sport_filter is None:
            sport_filter = self.settings.SPORT_FILTER

        end = self.clock()
        start = end - timedelta(days=days_back)

        try:
            picks = self.pick_source.fetch_picks(start, end, sport_filter=sport_filter, settled_only=True)
        except Exception as e:
            logger.error(f"Error fetching historical picks: {e}")
            return self._empty_analysis(start, end, min_sample_size, confidence_threshold)

        if not picks:
            logger.info(f"No settled picks in the last {days_back} days")
            return self._empty_analysis(start, end, min_sample_size, confidence_threshold)

        return self.analyze_picks(
            picks,
            min_sample_size=min_sample_size,
            confidence_threshold=confidence_threshold,
            start=start,
            end=end,
        )

    def analyze_picks(
        self,
        picks: List[PickRecord],
        min_sample_size: int = 5,
        confidence_threshold: float = 0.7,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> AnalysisSummary:
        """
        Run every detector over an in-memory pick collection.

        The date range defaults to the span of the picks themselves.
        """
        if start is None or end is None:
            if picks:
                start = start or min(p.created_at for p in picks)
                end = end or max(p.created_at for p in picks)
            else:
                end = end or self.clock()
                start = start or end

        grouped = group_picks_by_subject_stat(picks)

        streaks = self.streak_analyzer.analyze(grouped, min_sample_size)
        trend_breaks = self.trend_break_detector.analyze(grouped, min_sample_size)
        outliers = self.outlier_detector.analyze(grouped, min_sample_size)
        regressions = self.regression_analyzer.analyze(grouped, min_sample_size)

        summary = AnalysisSummary(
            analysis_metadata=AnalysisMetadata(
                total_picks_analyzed=len(picks),
                start=start,
                end=end,
                confidence_threshold=confidence_threshold,
                min_sample_size=min_sample_size,
            ),
            streaks=[s for s in streaks if s.confidence_score >= confidence_threshold],
            trend_breaks=[t for t in trend_breaks if t.confidence_score >= confidence_threshold],
            statistical_outliers=[o for o in outliers if o.confidence_score >= confidence_threshold],
            regression_candidates=[
                r for r in regressions if r.regression_confidence >= confidence_threshold
            ],
        )

        logger.info(
            f"Trend analysis: {len(picks)} picks in {len(grouped)} groups → "
            f"{len(summary.streaks)} streaks, {len(summary.trend_breaks)} trend breaks, "
            f"{len(summary.statistical_outliers)} outliers, "
            f"{len(summary.regression_candidates)} regression candidates"
        )
        return summary

    # ── Single-detector accessors ────────────────────────────────

    def get_streak_analysis(self, **options) -> List[StreakAnalysis]:
        return self.perform_trend_analysis(**options).streaks

    def get_trend_break_analysis(self, **options) -> List[TrendBreak]:
        return self.perform_trend_analysis(**options).trend_breaks

    def get_outlier_analysis(self, **options) -> List[StatisticalOutlier]:
        return self.perform_trend_analysis(**options).statistical_outliers

    def get_regression_analysis(self, **options) -> List[RegressionAnalysis]:
        return self.perform_trend_analysis(**options).regression_candidates

    @staticmethod
    def _empty_analysis(start: datetime, end: datetime, min_sample_size: int,
                        confidence_threshold: float) -> AnalysisSummary:
        return AnalysisSummary(
            analysis_metadata=AnalysisMetadata(
                total_picks_analyzed=0,
                start=start,
                end=end,
                confidence_threshold=confidence_threshold,
                min_sample_size=min_sample_size,
            )
        )
