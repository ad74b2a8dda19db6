"""Tests for ft_common.enums: values must match the DB CHECK constraints."""

import pytest
from pydantic import ValidationError

from src.ft_common.enums import (
    SQUAD_MAX_SEATS,
    BalanceType,
    BanStatus,
    GameType,
    PayoutStatus,
    TeamMode,
    TournamentStatus,
)
from src.ft_gateway.user.schemas import RegisterRequest


class TestEnumValues:
    def test_str_enums_compare_to_db_values(self) -> None:
        assert BanStatus.TEMP_BANNED == "temp_banned"
        assert TournamentStatus.UPCOMING == "upcoming"
        assert PayoutStatus.PENDING == "pending"
        assert BalanceType.COMBINED == "combined"

    def test_game_types(self) -> None:
        assert {g.value for g in GameType} == {"Free Fire", "BGMI", "Valorant", "CODM"}

    def test_seats_per_mode(self) -> None:
        assert [m.seats for m in TeamMode] == [1, 2, 4]
        assert SQUAD_MAX_SEATS == 5


class TestRegisterRequest:
    def test_valid(self) -> None:
        req = RegisterRequest(username="sniper_01", email="s@example.com", password="Secure1x")
        assert req.username == "sniper_01"

    @pytest.mark.parametrize(
        ("username", "email", "password"),
        [
            ("ab", "a@b.com", "Secure1x"),
            ("bad name", "a@b.com", "Secure1x"),
            ("alice", "not-an-email", "Secure1x"),
            ("alice", "a@b.com", "Ab1"),
            ("alice", "a@b.com", "alllower1"),
            ("alice", "a@b.com", "ALLUPPER1"),
            ("alice", "a@b.com", "NoDigitPass"),
        ],
    )
    def test_rejected(self, username: str, email: str, password: str) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(username=username, email=email, password=password)
