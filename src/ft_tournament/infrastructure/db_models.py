"""SQLAlchemy ORM model for the tournaments table.

Maps to the table created by alembic/versions/004_create_tournaments.py.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.ft_common.database import Base


class TournamentORM(Base):
    __tablename__ = "tournaments"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    game_type: Mapped[str] = mapped_column(String(30), nullable=False)
    team_mode: Mapped[str] = mapped_column(String(10), nullable=False)
    match_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entry_fee: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    prize_pool: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False)
    current_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="upcoming")
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
