"""Pydantic schemas for ft_tournament API."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from src.ft_common.enums import GameType, TeamMode, TournamentStatus
from src.ft_common.money import cents_to_display
from src.ft_tournament.domain.models import Tournament


class TournamentCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    game_type: GameType
    team_mode: TeamMode = TeamMode.SOLO
    match_type: str = Field("Battle Royale", min_length=1, max_length=50)
    entry_fee_cents: int = Field(0, ge=0)
    prize_pool_cents: int = Field(0, ge=0)
    max_participants: int = Field(..., gt=0)
    start_date: datetime | None = None
    end_date: datetime | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "TournamentCreateRequest":
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class StatusUpdateRequest(BaseModel):
    status: TournamentStatus


class TournamentItem(BaseModel):
    id: int
    name: str
    description: str | None
    game_type: str
    team_mode: str
    match_type: str
    entry_fee_cents: int
    entry_fee_display: str
    prize_pool_cents: int
    prize_pool_display: str
    max_participants: int
    current_participants: int
    seats_left: int
    status: str
    start_date: str | None
    end_date: str | None

    @classmethod
    def from_domain(cls, t: Tournament) -> "TournamentItem":
        return cls(
            id=t.id,
            name=t.name,
            description=t.description,
            game_type=t.game_type,
            team_mode=t.team_mode,
            match_type=t.match_type,
            entry_fee_cents=t.entry_fee,
            entry_fee_display=cents_to_display(t.entry_fee),
            prize_pool_cents=t.prize_pool,
            prize_pool_display=cents_to_display(t.prize_pool),
            max_participants=t.max_participants,
            current_participants=t.current_participants,
            seats_left=t.seats_left,
            status=t.status,
            start_date=t.start_date.isoformat() if t.start_date else None,
            end_date=t.end_date.isoformat() if t.end_date else None,
        )


class TournamentListResponse(BaseModel):
    items: list[TournamentItem]
    next_cursor: str | None
    has_more: bool
