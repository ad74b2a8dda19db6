"""Domain models for ft_registration: pure dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Registration:
    id: int
    user_id: str
    tournament_id: int
    registration_type: str
    team_leader_id: str | None = None
    registered_at: datetime | None = None


@dataclass
class TeamRegistration:
    id: int
    tournament_id: int
    team_leader_id: str
    team_name: str
    team_members: list[str] = field(default_factory=list)  # leader first
    team_size: int = 0
    entry_fee_paid: int = 0
    created_at: datetime | None = None


@dataclass
class NewTeam:
    tournament_id: int
    team_leader_id: str
    team_name: str
    team_members: list[str]
    entry_fee_paid: int

    @property
    def team_size(self) -> int:
        return len(self.team_members)


@dataclass
class Participant:
    user_id: str
    username: str
    registration_type: str
    team_leader_id: str | None
    registered_at: datetime | None = None
