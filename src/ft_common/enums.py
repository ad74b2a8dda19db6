"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class BanStatus(str, Enum):
    ACTIVE = "active"
    TEMP_BANNED = "temp_banned"
    BANNED = "banned"


class TeamMode(str, Enum):
    """Tournament format; each mode has a fixed seat count per entry."""
    SOLO = "solo"
    DUO = "duo"
    SQUAD = "squad"

    @property
    def seats(self) -> int:
        return _SEATS[self]


_SEATS = {TeamMode.SOLO: 1, TeamMode.DUO: 2, TeamMode.SQUAD: 4}

# Squads may bring one optional substitute on top of the four main seats
SQUAD_MAX_SEATS = 5


class TournamentStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"


class GameType(str, Enum):
    FREE_FIRE = "Free Fire"
    BGMI = "BGMI"
    VALORANT = "Valorant"
    CODM = "CODM"


class TransactionType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class BalanceType(str, Enum):
    DEPOSIT = "deposit"
    WINNINGS = "winnings"
    # Only used for zero-amount audit rows; real combined debits log one
    # row per balance actually drawn from.
    COMBINED = "combined"


class PayoutStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PayoutAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class WalletOperation(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
