"""Domain models for ft_tournament: pure dataclasses."""

from dataclasses import dataclass
from datetime import datetime

from src.ft_common.enums import TeamMode


@dataclass
class Tournament:
    id: int
    name: str
    description: str | None
    game_type: str
    team_mode: str
    match_type: str
    entry_fee: int          # cents per seat
    prize_pool: int         # cents
    max_participants: int   # seats
    current_participants: int
    status: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def seats_left(self) -> int:
        return max(self.max_participants - self.current_participants, 0)

    @property
    def is_free(self) -> bool:
        return self.entry_fee == 0

    @property
    def mode(self) -> TeamMode:
        return TeamMode(self.team_mode)


@dataclass
class NewTournament:
    """Validated input for creating a tournament."""

    name: str
    description: str | None
    game_type: str
    team_mode: str
    match_type: str
    entry_fee: int
    prize_pool: int
    max_participants: int
    start_date: datetime | None = None
    end_date: datetime | None = None
