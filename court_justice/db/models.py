from datetime import datetime, timezone
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, DateTime, Float, JSON

class Base(DeclarativeBase): pass

class GameStateRow(Base):
    __tablename__ = "game_state"
    id: Mapped[str] = mapped_column(String, primary_key=True)   # siempre "current"
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)  # ProgressRecord completo
    updated_at: Mapped["DateTime"] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

class CaseHistory(Base):
    __tablename__ = "case_history"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    case_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    verdict: Mapped[str] = mapped_column(String, nullable=False)          # "guilty" | "not-guilty"
    correct_verdict: Mapped[str] = mapped_column(String, nullable=False)
    was_correct: Mapped[bool] = mapped_column(Boolean, nullable=False)
    coins_earned: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_at: Mapped["DateTime"] = mapped_column(
        DateTime(timezone=True),
        index=True,
        default=lambda: datetime.now(timezone.utc)
    )
    time_spent: Mapped[float] = mapped_column(Float, default=0.0)

class OwnedItem(Base):
    __tablename__ = "customization"
    item_id: Mapped[str] = mapped_column(String, primary_key=True)
    category: Mapped[str] = mapped_column(String, nullable=False)  # "courtroom" | "gavel" | "robe" | "decoration"
    obtained_at: Mapped["DateTime"] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
