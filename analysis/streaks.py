"""
Streak Analyzer
===============
Finds players/stat types currently riding a run of 3+ wins or losses.

Pushes neither extend nor break a run, but a push as the MOST RECENT result
means no streak is attributed at all. Rarity is judged against the group's
own historical win rate: a 5-game heater from a 50% capper is rarer than the
same run from a 70% capper.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from analysis.picks import (
    Outcome,
    PickRecord,
    hit_rate,
    sort_newest_first,
    split_group_key,
)

logger = logging.getLogger(__name__)


@dataclass
class StreakAnalysis:
    """Current run for one player/stat group."""
    player_name: str
    stat_type: str
    current_streak: int
    streak_type: str              # "win" or "loss"
    streak_probability: float     # chance of this run under the historical rate
    historical_win_rate: float
    games_analyzed: int           # non-push picks in the group
    confidence_score: float       # 0.0 to 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_name": self.player_name,
            "stat_type": self.stat_type,
            "current_streak": self.current_streak,
            "streak_type": self.streak_type,
            "streak_probability": self.streak_probability,
            "historical_win_rate": self.historical_win_rate,
            "games_analyzed": self.games_analyzed,
            "confidence_score": self.confidence_score,
        }


def current_run(sorted_picks: List[PickRecord]):
    """
    Length and outcome of the run at the head of a newest-first list.

    Returns ``(0, None)`` if the list is empty or starts with a push.
    """
    if not sorted_picks or sorted_picks[0].result == Outcome.PUSH:
        return 0, None

    streak_type = sorted_picks[0].result
    length = 0
    for pick in sorted_picks:
        if pick.result == streak_type:
            length += 1
        elif pick.result != Outcome.PUSH:
            break
    return length, streak_type


def streak_confidence(streak_length: int, probability: float, sample_size: int) -> float:
    rarity_score = max(0.0, 1 - probability * 10)
    length_score = min(1.0, streak_length / 10)
    sample_score = min(1.0, sample_size / 20)
    return rarity_score * 0.5 + length_score * 0.3 + sample_score * 0.2


class StreakAnalyzer:
    """
    Detect active win/loss streaks per player/stat group.

    Strategy:
    - Group must have at least min_sample_size picks
    - Run length is counted from the most recent pick backwards
    - Only runs of min_streak_length+ are reported
    """

    def __init__(self, min_streak_length: int = 3):
        """
        Args:
            min_streak_length: Shortest run worth reporting (default 3)
        """
        self.min_streak_length = min_streak_length

    def analyze_group(self, player_name: str, stat_type: str,
                      picks: List[PickRecord]) -> Optional[StreakAnalysis]:
        sorted_picks = sort_newest_first(picks)
        length, streak_type = current_run(sorted_picks)

        if streak_type is None or length < self.min_streak_length:
            return None

        win_rate, total_games = hit_rate(sorted_picks)
        p = win_rate if streak_type == Outcome.WIN else 1 - win_rate
        streak_probability = p ** length

        return StreakAnalysis(
            player_name=player_name,
            stat_type=stat_type,
            current_streak=length,
            streak_type=streak_type.value,
            streak_probability=streak_probability,
            historical_win_rate=win_rate,
            games_analyzed=total_games,
            confidence_score=streak_confidence(length, streak_probability, total_games),
        )

    def analyze(self, grouped_picks: Dict[str, List[PickRecord]],
                min_sample_size: int = 5) -> List[StreakAnalysis]:
        """
        Analyze every group.

        Args:
            grouped_picks: Output of group_picks_by_subject_stat
            min_sample_size: Groups smaller than this are ignored

        Returns:
            StreakAnalysis list, highest confidence first
        """
        streaks = []
        for key, picks in grouped_picks.items():
            if len(picks) < min_sample_size:
                continue
            player_name, stat_type = split_group_key(key)
            streak = self.analyze_group(player_name, stat_type, picks)
            if streak is not None:
                streaks.append(streak)

        logger.debug(f"Streak analysis: {len(streaks)} active streaks in {len(grouped_picks)} groups")
        return sorted(streaks, key=lambda s: s.confidence_score, reverse=True)
