"""
Test Suite for Trend Break Detector
===================================
Tests recent vs historical hit-rate comparison.
"""

import pytest
from analysis.picks import group_picks_by_subject_stat
from analysis.trend_breaks import (
    PERFORMANCE_DECLINE,
    PERFORMANCE_SURGE,
    TrendBreakDetector,
    trend_break_confidence,
)


class TestTrendBreakDetector:

    def setup_method(self):
        self.detector = TrendBreakDetector()

    def test_recent_window(self):
        assert self.detector.recent_window(5) == 3
        assert self.detector.recent_window(12) == 3
        assert self.detector.recent_window(16) == 4
        assert self.detector.recent_window(41) == 10

    def test_performance_decline(self, make_series):
        # newest 4: one win; older 12: all wins
        picks = make_series(["loss", "loss", "loss", "win"] + ["win"] * 12)
        result = self.detector.analyze_group("LeBron James", "points", picks)

        assert result.trend_break_type == PERFORMANCE_DECLINE
        assert result.recent_hit_rate == pytest.approx(0.25)
        assert result.historical_hit_rate == pytest.approx(1.0)
        assert result.deviation_percentage == pytest.approx(75.0)
        assert result.sample_size == 16
        # 0.75*0.6 + 0.4*0.2 + 0.6*0.2
        assert result.confidence_score == pytest.approx(0.65)
        assert result.reasoning == "Recent 4 games show 75.0% performance decline vs historical average"

    def test_eighty_percent_history_twenty_percent_recent(self, make_series):
        # 20 picks → recent window of 5
        picks = make_series(["win"] + ["loss"] * 4 + ["win"] * 12 + ["loss"] * 3)
        result = self.detector.analyze_group("A", "points", picks)

        assert result.recent_hit_rate == pytest.approx(0.2)
        assert result.historical_hit_rate == pytest.approx(0.8)
        assert result.deviation_percentage == pytest.approx(75.0)
        assert result.trend_break_type == PERFORMANCE_DECLINE
        assert result.confidence_score == pytest.approx(0.70)

    def test_performance_surge(self, make_series):
        picks = make_series(["win"] * 4 + ["win", "loss"] * 6)
        result = self.detector.analyze_group("LeBron James", "points", picks)

        assert result.trend_break_type == PERFORMANCE_SURGE
        assert result.recent_hit_rate == pytest.approx(1.0)
        assert result.historical_hit_rate == pytest.approx(0.5)
        assert result.deviation_percentage == pytest.approx(100.0)
        assert result.confidence_score == pytest.approx(0.8)
        assert "performance surge" in result.reasoning

    def test_small_deviation_ignored(self, make_series):
        picks = make_series(["win", "loss"] * 8)
        assert self.detector.analyze_group("A", "points", picks) is None

    def test_historical_window_must_meet_sample_size(self, make_series):
        # 7 picks → 3 recent, 4 historical
        picks = make_series(["loss"] * 3 + ["win"] * 4)
        assert self.detector.analyze_group("A", "points", picks, min_sample_size=5) is None
        assert self.detector.analyze_group("A", "points", picks, min_sample_size=4) is not None

    def test_zero_historical_hit_rate_skipped(self, make_series):
        picks = make_series(["win"] * 3 + ["loss"] * 8)
        assert self.detector.analyze_group("A", "points", picks) is None

    def test_pushes_excluded_from_rates_and_confidence(self, make_series):
        picks = make_series(["loss", "push", "loss", "win"] + ["win"] * 10 + ["push"] * 2)
        result = self.detector.analyze_group("A", "points", picks)

        # recent: loss, push, loss, win → 1/3
        assert result.recent_hit_rate == pytest.approx(1 / 3)
        assert result.historical_hit_rate == pytest.approx(1.0)
        assert result.confidence_score == pytest.approx(
            trend_break_confidence(result.deviation_percentage, 3, 10)
        )

    def test_reports_modal_line_and_side(self, make_series):
        picks = (
            make_series(["loss"] * 3, line=27.5, over_under="under")
            + make_series(["win"] * 9, start_days_ago=3, line=25.5)
        )
        result = self.detector.analyze_group("A", "points", picks)

        assert result.line == 25.5
        assert result.over_under == "over"

    def test_custom_min_deviation(self, make_series):
        detector = TrendBreakDetector(min_deviation=80)
        picks = make_series(["loss", "loss", "loss", "win"] + ["win"] * 12)
        assert detector.analyze_group("A", "points", picks) is None

    def test_analyze_sorted_by_confidence(self, make_series):
        picks = (
            make_series(["loss", "loss", "loss", "win"] + ["win"] * 12, player_name="Slump")
            + make_series(["win"] * 4 + ["win", "loss"] * 6, player_name="Surge")
            + make_series(["win"] * 4, player_name="Tiny")
        )
        breaks = self.detector.analyze(group_picks_by_subject_stat(picks))

        assert [b.player_name for b in breaks] == ["Surge", "Slump"]


class TestTrendBreakConfidence:

    def test_components_cap_at_one(self):
        assert trend_break_confidence(500, 50, 50) == pytest.approx(1.0)

    def test_zero(self):
        assert trend_break_confidence(0, 0, 0) == 0
