"""Database models for the picks store"""

from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Enum as SQLEnum, Index
)
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone

from analysis.picks import Outcome, PickRecord, Side


Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FinalPick(Base):
    """A submitted player-prop pick and, once graded, its result"""
    __tablename__ = "final_picks"

    id = Column(Integer, primary_key=True)

    # Owner
    discord_id = Column(String(50), nullable=False, index=True)
    username = Column(String(100))

    # Market
    player_name = Column(String(100), index=True)
    stat_type = Column(String(50))
    line = Column(Float)
    over_under = Column(SQLEnum(Side, values_callable=lambda e: [m.value for m in e]))
    odds = Column(Integer)  # American odds
    pick_type = Column(String(100))  # free-text category, e.g. "nba_player_prop"

    # Analyst estimate (0-100)
    confidence = Column(Float)

    # Wager
    stake = Column(Float, default=100.0)

    # Grading
    result = Column(
        SQLEnum(Outcome, values_callable=lambda e: [m.value for m in e]),
        default=Outcome.PENDING,
        index=True,
    )
    actual_value = Column(Float)
    profit_loss = Column(Float)

    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)

    __table_args__ = (
        Index("idx_final_picks_player_stat", "player_name", "stat_type"),
    )

    def to_record(self) -> PickRecord:
        """Detach into the immutable record the analyzers consume."""
        created_at = self.created_at
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return PickRecord(
            id=str(self.id),
            player_name=self.player_name or "Unknown",
            stat_type=self.stat_type or "Unknown",
            line=self.line or 0.0,
            over_under=self.over_under or Side.OVER,
            odds=self.odds,
            result=self.result or Outcome.PENDING,
            actual_value=self.actual_value,
            confidence=self.confidence,
            created_at=created_at,
            pick_type=self.pick_type or "",
            discord_id=self.discord_id or "",
            username=self.username,
            stake=self.stake,
            profit_loss=self.profit_loss,
        )

    def __repr__(self):
        return f"<FinalPick {self.player_name} {self.stat_type} {self.over_under} {self.line} ({self.result})>"

    @classmethod
    def from_record(cls, record: PickRecord) -> "FinalPick":
        return cls(
            id=int(record.id) if str(record.id).isdigit() else None,
            discord_id=record.discord_id,
            username=record.username,
            player_name=record.player_name,
            stat_type=record.stat_type,
            line=record.line,
            over_under=record.over_under,
            odds=record.odds,
            pick_type=record.pick_type,
            confidence=record.confidence,
            stake=record.stake,
            result=record.result,
            actual_value=record.actual_value,
            profit_loss=record.profit_loss,
            created_at=record.created_at,
        )
