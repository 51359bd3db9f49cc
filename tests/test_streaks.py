"""
Test Suite for Streak Analyzer
==============================
Tests the run detection, push handling and confidence scoring.
"""

import pytest
from analysis.picks import group_picks_by_subject_stat
from analysis.streaks import StreakAnalyzer, current_run, streak_confidence


class TestCurrentRun:

    def test_counts_from_newest(self, make_series):
        assert current_run(make_series(["win", "win", "loss", "win"])) == (2, "win")

    def test_pushes_are_transparent(self, make_series):
        length, outcome = current_run(make_series(["loss", "push", "loss", "push", "loss", "win"]))
        assert length == 3
        assert outcome == "loss"

    def test_leading_push_means_no_run(self, make_series):
        assert current_run(make_series(["push", "win", "win", "win"])) == (0, None)

    def test_empty(self):
        assert current_run([]) == (0, None)


class TestStreakAnalyzer:

    def setup_method(self):
        self.analyzer = StreakAnalyzer()

    def test_common_streak_scores_low(self, make_series):
        picks = make_series(["win"] * 5 + ["loss"] * 5 + ["win"] * 5)
        streak = self.analyzer.analyze_group("LeBron James", "points", picks)

        assert streak.current_streak == 5
        assert streak.streak_type == "win"
        assert streak.historical_win_rate == pytest.approx(10 / 15)
        assert streak.streak_probability == pytest.approx((10 / 15) ** 5)
        assert streak.games_analyzed == 15
        # rarity floored at 0, length 0.5, sample 0.75
        assert streak.confidence_score == pytest.approx(0.30)

    def test_loss_streak_uses_loss_rate(self, make_series):
        picks = make_series(["loss"] * 4 + ["win"] * 6)
        streak = self.analyzer.analyze_group("LeBron James", "points", picks)

        assert streak.streak_type == "loss"
        assert streak.streak_probability == pytest.approx(0.4 ** 4)
        assert streak.confidence_score == pytest.approx(0.592, abs=1e-3)

    def test_input_order_does_not_matter(self, make_series):
        picks = make_series(["win", "win", "win", "loss", "loss", "win"])
        forward = self.analyzer.analyze_group("A", "points", picks)
        backward = self.analyzer.analyze_group("A", "points", list(reversed(picks)))
        assert forward == backward

    def test_short_run_ignored(self, make_series):
        picks = make_series(["win", "win", "loss", "loss", "loss", "win"])
        assert self.analyzer.analyze_group("A", "points", picks) is None

    def test_pushes_not_counted_in_sample(self, make_series):
        picks = make_series(["win", "push", "win", "win", "loss", "push"])
        streak = self.analyzer.analyze_group("A", "points", picks)

        assert streak.current_streak == 3
        assert streak.games_analyzed == 4

    def test_custom_min_length(self, make_series):
        analyzer = StreakAnalyzer(min_streak_length=5)
        picks = make_series(["win"] * 4 + ["loss"] * 4)
        assert analyzer.analyze_group("A", "points", picks) is None

    def test_analyze_respects_min_sample_size(self, make_series):
        grouped = group_picks_by_subject_stat(make_series(["win"] * 4))

        assert self.analyzer.analyze(grouped, min_sample_size=5) == []
        assert len(self.analyzer.analyze(grouped, min_sample_size=4)) == 1

    def test_analyze_sorted_by_confidence(self, make_series):
        picks = (
            make_series(["win"] * 5 + ["loss"] * 5 + ["win"] * 5, player_name="Hot Hand")
            + make_series(["loss"] * 4 + ["win"] * 6, player_name="Cold Hand")
        )
        streaks = self.analyzer.analyze(group_picks_by_subject_stat(picks))

        assert [s.player_name for s in streaks] == ["Cold Hand", "Hot Hand"]
        assert all(0 <= s.confidence_score <= 1 for s in streaks)

    def test_to_dict(self, make_series):
        streak = self.analyzer.analyze_group("A", "points", make_series(["win"] * 5))
        assert streak.to_dict()["streak_type"] == "win"


class TestStreakConfidence:

    def test_bounds(self):
        assert streak_confidence(0, 1.0, 0) == 0
        assert streak_confidence(50, 0.0, 500) == pytest.approx(1.0)
