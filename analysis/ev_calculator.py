"""
EV CALCULATOR
=============
Rates each pick by expected value: the analyst's confidence (0-100) is taken
as the true win probability and compared against the probability implied by
the American odds.

    EV (per unit)  = p * decimal_odds - 1
    EV %           = EV / implied_probability * 100
    Expected P/L   = EV * stake

Probabilities are NOT clamped. A confidence of 150 yields p = 1.5 and a
correspondingly absurd EV; callers get the number, not an exception.

Usage:
    from analysis.ev_calculator import EVCalculator
    calc = EVCalculator()
    calc.calculate_ev(-110, 0.60)
    # → {'implied_probability': 0.5238, 'expected_value': 0.1455, ...}
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
import logging

from analysis.picks import PickRecord
from config.sports_config import extract_sport

logger = logging.getLogger(__name__)

DEFAULT_STAKE = 100.0


class InvalidOddsError(ValueError):
    """American odds of 0 have no decimal equivalent."""


@dataclass
class EVAnalysis:
    """One pick enriched with EV metrics."""
    pick_id: str
    player_name: str
    stat_type: str
    line: float
    over_under: str
    odds: int
    implied_probability: float
    true_probability: float
    expected_value: float       # per unit staked
    ev_percentage: float
    stake: float
    expected_profit: float
    sport: str
    confidence: float           # 0-100
    created_at: datetime
    discord_id: str
    username: Optional[str] = None

    @property
    def date(self) -> str:
        """UTC calendar day, used for the per-day rollup."""
        return self.created_at.astimezone(timezone.utc).date().isoformat()

    def to_dict(self) -> Dict:
        return {
            "pick_id": self.pick_id,
            "player_name": self.player_name,
            "stat_type": self.stat_type,
            "line": self.line,
            "over_under": self.over_under,
            "odds": self.odds,
            "implied_probability": self.implied_probability,
            "true_probability": self.true_probability,
            "expected_value": self.expected_value,
            "ev_percentage": self.ev_percentage,
            "stake": self.stake,
            "expected_profit": self.expected_profit,
            "sport": self.sport,
            "confidence": self.confidence,
            "created_at": self.created_at.isoformat(),
            "discord_id": self.discord_id,
            "username": self.username,
        }


class EVCalculator:
    """Expected-value math for American odds."""

    def __init__(self, default_stake: float = DEFAULT_STAKE):
        self.default_stake = default_stake

    @staticmethod
    def american_to_decimal(american: int) -> float:
        """Convert American odds to decimal odds."""
        if american == 0:
            raise InvalidOddsError("American odds of 0 are undefined")
        if american > 0:
            return (american / 100) + 1
        else:
            return (100 / abs(american)) + 1

    @classmethod
    def implied_probability(cls, american: int) -> float:
        """Probability implied by the odds alone (vig included)."""
        return 1 / cls.american_to_decimal(american)

    def calculate_ev(self, american_odds: int, true_probability: float,
                     stake: Optional[float] = None) -> Dict[str, float]:
        """
        Calculate expected value for a single wager.

        Args:
            american_odds:    e.g. -110, +150. Zero raises InvalidOddsError.
            true_probability: estimated win probability. Not range-checked.
            stake:            amount wagered (default 100)

        Returns:
            Dict with implied_probability, expected_value, ev_percentage,
            expected_profit
        """
        if stake is None:
            stake = self.default_stake

        decimal_odds = self.american_to_decimal(american_odds)
        implied_probability = 1 / decimal_odds
        expected_value = (true_probability * decimal_odds) - 1
        ev_percentage = (expected_value / implied_probability) * 100
        expected_profit = expected_value * stake

        return {
            "implied_probability": implied_probability,
            "expected_value": expected_value,
            "ev_percentage": ev_percentage,
            "expected_profit": expected_profit,
        }

    def analyze_pick(self, pick: PickRecord) -> Optional[EVAnalysis]:
        """
        Rate one pick. Returns None when the pick has no usable odds or
        confidence (missing, or zero).
        """
        if not pick.odds or not pick.confidence:
            logger.debug(f"Skipping pick {pick.id}: missing odds or confidence")
            return None

        true_probability = pick.confidence / 100
        stake = pick.stake or self.default_stake
        ev = self.calculate_ev(pick.odds, true_probability, stake)

        return EVAnalysis(
            pick_id=pick.id,
            player_name=pick.player_name or "Unknown",
            stat_type=pick.stat_type or "Unknown",
            line=pick.line or 0.0,
            over_under=pick.over_under.value,
            odds=pick.odds,
            implied_probability=ev["implied_probability"],
            true_probability=true_probability,
            expected_value=ev["expected_value"],
            ev_percentage=ev["ev_percentage"],
            stake=stake,
            expected_profit=ev["expected_profit"],
            sport=extract_sport(pick.pick_type),
            confidence=pick.confidence,
            created_at=pick.created_at,
            discord_id=pick.discord_id,
            username=pick.username,
        )

    def analyze_picks(self, picks: Iterable[PickRecord],
                      min_ev: Optional[float] = None) -> List[EVAnalysis]:
        """
        Rate every usable pick, optionally dropping those below ``min_ev``
        (an EV percentage). Sorted best EV% first.
        """
        analyses = []
        for pick in picks:
            analysis = self.analyze_pick(pick)
            if analysis is None:
                continue
            if min_ev is not None and analysis.ev_percentage < min_ev:
                continue
            analyses.append(analysis)

        return sorted(analyses, key=lambda a: a.ev_percentage, reverse=True)


def calculate_ev(american_odds: int, true_probability: float,
                 stake: float = DEFAULT_STAKE) -> Dict[str, float]:
    """Module-level shortcut for ``EVCalculator().calculate_ev``."""
    return EVCalculator().calculate_ev(american_odds, true_probability, stake)
