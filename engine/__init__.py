"""
Engine layer: orchestrates pick sources and the analysis package.

Provides the trend analysis pipeline and the EV reporting path.
"""

from engine.trend_engine import TrendAnalysisEngine, AnalysisSummary, AnalysisMetadata
from engine.ev_report import EVReportService

__all__ = [
    "TrendAnalysisEngine",
    "AnalysisSummary",
    "AnalysisMetadata",
    "EVReportService",
]
