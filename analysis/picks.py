"""
Pick Records
============
The atomic unit every analysis consumes: one recorded player/stat wager with
its outcome, plus helpers for grouping and ordering pick collections.
"""

from collections import Counter
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
import enum


class Side(str, enum.Enum):
    """Which side of the line was taken"""
    OVER = "over"
    UNDER = "under"


class Outcome(str, enum.Enum):
    """Recorded pick result"""
    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    PENDING = "pending"


SETTLED_OUTCOMES = (Outcome.WIN, Outcome.LOSS, Outcome.PUSH)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed) or pass a datetime through."""
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class PickRecord:
    """A single historical pick."""
    id: str
    player_name: str
    stat_type: str
    line: float
    over_under: Side
    odds: Optional[int]              # American odds (e.g., -110, +150)
    result: Outcome
    actual_value: Optional[float]    # realized stat value
    confidence: Optional[float]      # 0-100, analyst's win probability estimate
    created_at: datetime
    pick_type: str = ""              # free-text category, e.g. "nba_player_prop"
    discord_id: str = ""             # owner
    username: Optional[str] = None
    stake: Optional[float] = None
    profit_loss: Optional[float] = None

    @property
    def group_key(self) -> str:
        return f"{self.player_name}|{self.stat_type}"

    @property
    def is_push(self) -> bool:
        return self.result == Outcome.PUSH

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["over_under"] = self.over_under.value
        data["result"] = self.result.value
        data["created_at"] = self.created_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PickRecord":
        """Build a record from a row dict using the picks table column names."""
        odds = d.get("odds")
        actual_value = d.get("actual_value")
        confidence = d.get("confidence")
        stake = d.get("stake")
        profit_loss = d.get("profit_loss")
        return cls(
            id=str(d.get("id", "")),
            player_name=d.get("player_name") or "Unknown",
            stat_type=d.get("stat_type") or "Unknown",
            line=float(d.get("line") or 0.0),
            over_under=Side(d.get("over_under") or Side.OVER.value),
            odds=int(odds) if odds is not None else None,
            result=Outcome(d.get("result") or Outcome.PENDING.value),
            actual_value=float(actual_value) if actual_value is not None else None,
            confidence=float(confidence) if confidence is not None else None,
            created_at=parse_timestamp(d["created_at"]),
            pick_type=d.get("pick_type") or "",
            discord_id=str(d.get("discord_id") or ""),
            username=d.get("username"),
            stake=float(stake) if stake is not None else None,
            profit_loss=float(profit_loss) if profit_loss is not None else None,
        )


def group_picks_by_subject_stat(picks: Iterable[PickRecord]) -> Dict[str, List[PickRecord]]:
    """
    Partition picks by ``player|stat_type``.

    Keys keep first-seen order and each list keeps input order; no filtering
    is applied. Detectors sort and size-check groups themselves.
    """
    grouped: Dict[str, List[PickRecord]] = {}
    for pick in picks:
        grouped.setdefault(pick.group_key, []).append(pick)
    return grouped


def split_group_key(key: str):
    """Inverse of ``PickRecord.group_key``."""
    player_name, _, stat_type = key.partition("|")
    return player_name, stat_type


def sort_newest_first(picks: Iterable[PickRecord]) -> List[PickRecord]:
    return sorted(picks, key=lambda p: p.created_at, reverse=True)


def hit_rate(picks: Iterable[PickRecord]):
    """Return ``(wins / non-push count, non-push count)``; rate is 0 with no settled decisions."""
    wins = 0
    decided = 0
    for pick in picks:
        if pick.result == Outcome.WIN:
            wins += 1
            decided += 1
        elif pick.result == Outcome.LOSS:
            decided += 1
    return (wins / decided if decided > 0 else 0.0), decided


def most_common_line(picks: List[PickRecord]) -> float:
    """Modal line; ties go to the line seen first."""
    counts = Counter(p.line for p in picks)
    best_line = picks[0].line
    best_count = 0
    for line, count in counts.items():
        if count > best_count:
            best_count = count
            best_line = line
    return best_line


def most_common_side(picks: List[PickRecord]) -> Side:
    """Modal over/under; a tie resolves to over."""
    overs = sum(1 for p in picks if p.over_under == Side.OVER)
    unders = sum(1 for p in picks if p.over_under == Side.UNDER)
    return Side.OVER if overs >= unders else Side.UNDER
