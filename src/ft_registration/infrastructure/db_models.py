"""SQLAlchemy ORM models for ft_registration.

Maps to tables created by migrations 005 and 006.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import BigInteger, DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.ft_common.database import Base


class TournamentRegistrationORM(Base):
    __tablename__ = "tournament_registrations"
    __table_args__ = (
        UniqueConstraint("user_id", "tournament_id", name="uq_registrations_user_tournament"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    tournament_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    registration_type: Mapped[str] = mapped_column(String(10), nullable=False)
    team_leader_id: Mapped[UUID | None] = mapped_column(PG_UUID(as_uuid=True), nullable=True)
    registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class TeamRegistrationORM(Base):
    __tablename__ = "team_registrations"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    tournament_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    team_leader_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    team_name: Mapped[str] = mapped_column(String(100), nullable=False)
    team_members: Mapped[list[UUID]] = mapped_column(
        ARRAY(PG_UUID(as_uuid=True)), nullable=False
    )
    team_size: Mapped[int] = mapped_column(Integer, nullable=False)
    entry_fee_paid: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
