"""
Test Suite for EV Report Service
================================
"""

from datetime import datetime, timedelta, timezone

import pytest
from analysis.sources import PickSourceError
from config import Settings
from engine.ev_report import EVReportService

NOW = datetime(2026, 3, 1, 19, 30, tzinfo=timezone.utc)


@pytest.fixture
def picks(make_pick):
    return [
        make_pick(result="pending", confidence=70, discord_id="alice", username="Alice", days_ago=0),
        make_pick(result="win", confidence=40, discord_id="alice", username="Alice", days_ago=0),
        make_pick(result="loss", confidence=65, discord_id="bob", pick_type="nfl_player_prop", days_ago=3),
        make_pick(result="win", confidence=55, discord_id="bob", days_ago=20),
        make_pick(result="win", confidence=90, discord_id="carol", days_ago=45),
    ]


def build_service(source):
    return EVReportService(source, settings=Settings(), clock=lambda: NOW)


class TestTimeRanges:

    @pytest.fixture(autouse=True)
    def _service(self, stub_source):
        self.service = build_service(stub_source())

    def test_today_is_utc_midnight(self):
        assert self.service.start_date_for_range("today") == datetime(2026, 3, 1, tzinfo=timezone.utc)

    def test_week_and_month(self):
        assert self.service.start_date_for_range("week") == NOW - timedelta(days=7)
        assert self.service.start_date_for_range("month") == NOW - timedelta(days=30)

    def test_unknown_range(self):
        with pytest.raises(ValueError):
            self.service.start_date_for_range("fortnight")


class TestEVAnalysis:

    def test_default_window_is_last_24_hours(self, stub_source, picks):
        source = stub_source(picks)
        analyses = build_service(source).get_ev_analysis()

        call = source.calls[0]
        assert call["end"] == NOW
        assert call["end"] - call["start"] == timedelta(hours=24)
        assert call["limit"] == 100
        assert [a.confidence for a in analyses] == [70, 40]

    def test_includes_pending_picks(self, stub_source, picks):
        source = stub_source(picks)
        build_service(source).get_ev_analysis()
        assert source.calls[0]["settled_only"] is False

    def test_filters_pass_through(self, stub_source, picks):
        source = stub_source(picks)
        analyses = build_service(source).get_ev_analysis(
            start=NOW - timedelta(days=30), owner_id="bob", sport="nfl", limit=5
        )

        call = source.calls[0]
        assert (call["owner_id"], call["sport_filter"], call["limit"]) == ("bob", "nfl", 5)
        assert [a.confidence for a in analyses] == [65]

    def test_unrateable_picks_do_not_count_against_limit(self, stub_source, make_pick):
        unrated = [make_pick(result="pending", odds=None) for _ in range(3)]
        rated = make_pick(result="pending", confidence=70, days_ago=1)
        source = stub_source(unrated + [rated])

        top = build_service(source).get_top_ev_picks("week", limit=3, min_ev=0)

        assert source.calls[0]["require_odds"] is True
        assert [a.pick_id for a in top] == [rated.id]

    def test_min_ev(self, stub_source, picks):
        analyses = build_service(stub_source(picks)).get_ev_analysis(min_ev=0)
        assert [a.confidence for a in analyses] == [70]

    def test_source_failure_returns_empty(self, stub_source):
        source = stub_source(error=PickSourceError("timeout"))
        assert build_service(source).get_ev_analysis() == []


class TestEVSummary:

    def test_summary_over_window(self, stub_source, picks):
        summary = build_service(stub_source(picks)).get_ev_summary(start=NOW - timedelta(days=30))

        assert summary.total_picks == 4
        assert set(summary.ev_by_user) == {"alice", "bob"}
        assert set(summary.ev_by_sport) == {"NBA", "NFL"}
        assert summary.best_ev_pick.confidence == 70

    def test_realized_stats_come_from_source(self, stub_source, picks):
        summary = build_service(stub_source(picks)).get_ev_summary(start=NOW - timedelta(days=30))

        bob = summary.ev_by_user["bob"]
        assert bob.win_rate == pytest.approx(0.5)
        assert bob.actual_profit == pytest.approx(90.91 - 100.0)

    def test_summary_on_failure_is_empty(self, stub_source):
        summary = build_service(stub_source(error=PickSourceError("down"))).get_ev_summary()
        assert summary.total_picks == 0
        assert summary.best_ev_pick is None


class TestLeaderboards:

    def test_top_ev_picks(self, stub_source, picks):
        top = build_service(stub_source(picks)).get_top_ev_picks("week", limit=10, min_ev=0)
        assert [a.confidence for a in top] == [70, 65]

    def test_top_ev_picks_today(self, stub_source, picks):
        top = build_service(stub_source(picks)).get_top_ev_picks("today", min_ev=-100)
        assert [a.confidence for a in top] == [70, 40]

    def test_user_leaderboard(self, stub_source, picks):
        board = build_service(stub_source(picks)).get_user_ev_leaderboard("month")

        # bob averages 60% confidence, alice 55%
        assert [u.discord_id for u in board] == ["bob", "alice"]
        assert board[1].username == "Alice"

    def test_user_leaderboard_limit(self, stub_source, picks):
        board = build_service(stub_source(picks)).get_user_ev_leaderboard("month", limit=1)
        assert len(board) == 1

    def test_unknown_range_raises(self, stub_source, picks):
        with pytest.raises(ValueError):
            build_service(stub_source(picks)).get_top_ev_picks("year")
