"""
Shared test fixtures for the pick analytics test suite.
"""

import sys
from datetime import datetime, timedelta, timezone
from itertools import count
from pathlib import Path

import pytest

# Ensure project root is on sys.path so analysis.* / engine.* imports resolve
PROJECT_ROOT = str(Path(__file__).parent.parent)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from analysis.picks import Outcome, PickRecord, Side  # noqa: E402
from analysis.sources import PickSource, filter_picks  # noqa: E402
from analysis.summary import compute_user_pick_stats  # noqa: E402

BASE_TIME = datetime(2026, 3, 1, 18, 0, tzinfo=timezone.utc)

_ids = count(1)


def build_pick(
    result="win",
    player_name="LeBron James",
    stat_type="points",
    line=25.5,
    over_under="over",
    odds=-110,
    actual_value=None,
    confidence=60.0,
    days_ago=0,
    pick_type="nba_player_prop",
    discord_id="user-1",
    username=None,
    stake=100.0,
    profit_loss=None,
    pick_id=None,
):
    """One PickRecord with sensible defaults; actual_value follows the result."""
    result = Outcome(result)
    side = Side(over_under)
    if actual_value is None:
        if result == Outcome.PUSH:
            actual_value = line
        else:
            beat = 2.0 if result == Outcome.WIN else -2.0
            actual_value = line + beat if side == Side.OVER else line - beat
    if profit_loss is None:
        profit_loss = {Outcome.WIN: 90.91, Outcome.LOSS: -100.0}.get(result, 0.0)
    return PickRecord(
        id=pick_id or f"pick-{next(_ids)}",
        player_name=player_name,
        stat_type=stat_type,
        line=line,
        over_under=side,
        odds=odds,
        result=result,
        actual_value=actual_value,
        confidence=confidence,
        created_at=BASE_TIME - timedelta(days=days_ago),
        pick_type=pick_type,
        discord_id=discord_id,
        username=username,
        stake=stake,
        profit_loss=profit_loss,
    )


def build_series(results, start_days_ago=0, **kwargs):
    """Picks for one group from a newest-first list of results, one per day."""
    return [
        build_pick(result=r, days_ago=start_days_ago + i, **kwargs)
        for i, r in enumerate(results)
    ]


@pytest.fixture
def make_pick():
    return build_pick


@pytest.fixture
def make_series():
    return build_series


@pytest.fixture
def base_time():
    return BASE_TIME


class StubPickSource(PickSource):
    """In-memory source that records how it was queried."""

    def __init__(self, picks=None, error=None):
        self.picks = picks or []
        self.error = error
        self.calls = []

    def fetch_picks(self, start, end, owner_id=None, sport_filter=None,
                    settled_only=True, limit=None, require_odds=False):
        self.calls.append({
            "start": start, "end": end, "owner_id": owner_id,
            "sport_filter": sport_filter, "settled_only": settled_only, "limit": limit,
            "require_odds": require_odds,
        })
        if self.error:
            raise self.error
        return filter_picks(self.picks, start, end, owner_id, sport_filter, settled_only, limit, require_odds)

    def get_user_pick_stats(self, owner_id):
        return compute_user_pick_stats(p for p in self.picks if p.discord_id == owner_id)


@pytest.fixture
def stub_source():
    return StubPickSource
