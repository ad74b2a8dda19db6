"""Pydantic schemas for ft_registration API.

The entry is a tagged variant keyed by `registration_type`:

    {"registration_type": "solo"}
    {"registration_type": "duo",   "teammate": "alice"}
    {"registration_type": "squad", "team_name": "Wolves",
     "players": ["me", "bob", "carol", "dave", "sub"]}

Squad rosters list four main players plus an optional substitute and
must include the registering leader.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator

from src.ft_common.enums import SQUAD_MAX_SEATS, TeamMode

Username = Annotated[str, Field(min_length=1, max_length=64)]


def _clean(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValueError("Usernames must not be blank")
    return name


class SoloEntry(BaseModel):
    registration_type: Literal["solo"] = "solo"


class DuoEntry(BaseModel):
    registration_type: Literal["duo"] = "duo"
    teammate: Username

    @field_validator("teammate")
    @classmethod
    def strip_teammate(cls, v: str) -> str:
        return _clean(v)


class SquadEntry(BaseModel):
    registration_type: Literal["squad"] = "squad"
    team_name: str = Field(..., min_length=1, max_length=100)
    players: list[Username] = Field(
        ..., min_length=TeamMode.SQUAD.seats, max_length=SQUAD_MAX_SEATS
    )

    @field_validator("team_name")
    @classmethod
    def strip_team_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Team name must not be blank")
        return v

    @field_validator("players")
    @classmethod
    def unique_players(cls, v: list[str]) -> list[str]:
        names = [_clean(n) for n in v]
        if len(set(names)) != len(names):
            raise ValueError("Squad players must be distinct")
        return names


Entry = Annotated[SoloEntry | DuoEntry | SquadEntry, Field(discriminator="registration_type")]


class RegistrationRequest(BaseModel):
    tournament_id: int = Field(..., gt=0)
    entry: Entry = Field(default_factory=SoloEntry)


class RegistrationResponse(BaseModel):
    success: bool = True
    message: str
    tournament_type: Literal["free", "paid"]
    registration_type: str
    entry_fee_cents: int            # total charged to the payer
    entry_fee_display: str
    deposit_debited_cents: int = 0
    winnings_debited_cents: int = 0
    team_name: str | None = None
    team_id: int | None = None


class ValidateUsernamesRequest(BaseModel):
    usernames: list[Username] = Field(..., min_length=1, max_length=SQUAD_MAX_SEATS * 2)

    @field_validator("usernames")
    @classmethod
    def strip_usernames(cls, v: list[str]) -> list[str]:
        return [_clean(n) for n in v]


class ValidateUsernamesResponse(BaseModel):
    valid: list[str]
    not_found: list[str]
    banned: list[str]
    all_valid: bool


class TeamMemberOut(BaseModel):
    user_id: str
    username: str | None


class TeamOut(BaseModel):
    id: int
    team_name: str
    team_leader_id: str
    team_size: int
    entry_fee_paid_cents: int
    members: list[TeamMemberOut]
    created_at: str | None


class ParticipantOut(BaseModel):
    user_id: str
    username: str
    registration_type: str
    team_leader_id: str | None
    registered_at: str | None
