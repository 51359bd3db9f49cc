"""
Statistical Outlier Detector
============================
Z-score check of a group's most recent line against every line the group has
been posted at. A line 2+ standard deviations from the mean is an outlier;
books rarely move a prop that far without a reason.

Population standard deviation is used. Groups whose lines never moved
(std = 0) cannot be scored and are skipped.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

import numpy as np

from analysis.picks import PickRecord, sort_newest_first, split_group_key

logger = logging.getLogger(__name__)

# Confidence = z / 4, capped
MAX_OUTLIER_CONFIDENCE = 0.95


@dataclass
class StatisticalOutlier:
    """Current-line outlier for one player/stat group."""
    player_name: str
    stat_type: str
    current_line: float
    historical_average: float
    standard_deviation: float
    z_score: float
    outlier_type: str             # "high" or "low"
    confidence_score: float
    sample_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_name": self.player_name,
            "stat_type": self.stat_type,
            "current_line": self.current_line,
            "historical_average": self.historical_average,
            "standard_deviation": self.standard_deviation,
            "z_score": self.z_score,
            "outlier_type": self.outlier_type,
            "confidence_score": self.confidence_score,
            "sample_size": self.sample_size,
        }


class OutlierDetector:
    """Flag groups whose latest line is a statistical outlier."""

    def __init__(self, min_z_score: float = 2.0):
        """
        Args:
            min_z_score: Standard deviations from the mean to count as an outlier (default 2.0)
        """
        self.min_z_score = min_z_score

    def analyze_group(self, player_name: str, stat_type: str,
                      picks: List[PickRecord]) -> Optional[StatisticalOutlier]:
        lines = np.array([p.line for p in picks], dtype=float)
        mean = float(np.mean(lines))
        std = float(np.std(lines))

        if std == 0:
            logger.debug(f"{player_name} {stat_type}: no line variance, skipping")
            return None

        current_line = sort_newest_first(picks)[0].line
        z_score = abs(current_line - mean) / std

        if z_score < self.min_z_score:
            return None

        return StatisticalOutlier(
            player_name=player_name,
            stat_type=stat_type,
            current_line=current_line,
            historical_average=mean,
            standard_deviation=std,
            z_score=z_score,
            outlier_type="high" if current_line > mean else "low",
            confidence_score=min(MAX_OUTLIER_CONFIDENCE, z_score / 4),
            sample_size=len(picks),
        )

    def analyze(self, grouped_picks: Dict[str, List[PickRecord]],
                min_sample_size: int = 5) -> List[StatisticalOutlier]:
        """
        Analyze every group.

        Returns:
            StatisticalOutlier list, largest z-score first
        """
        outliers = []
        for key, picks in grouped_picks.items():
            if len(picks) < min_sample_size:
                continue
            player_name, stat_type = split_group_key(key)
            outlier = self.analyze_group(player_name, stat_type, picks)
            if outlier is not None:
                outliers.append(outlier)

        return sorted(outliers, key=lambda o: o.z_score, reverse=True)
