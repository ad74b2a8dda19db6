"""RegistrationService: admits a player or a whole team into a tournament.

Every admission is one database transaction:

1. lock the tournament row (SELECT ... FOR UPDATE), which linearizes
   capacity-check-then-increment for that tournament;
2. run the eligibility checks;
3. settle the fee through WalletLedger.debit_combined, which locks the
   payer's wallet row;
4. insert the registration rows (and the team row);
5. bump current_participants with a guarded UPDATE;
6. commit.

Any failure rolls the whole unit back, so no partial team, orphan debit or
phantom seat can survive. Locks are always taken tournament first, wallet
second.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.enums import TeamMode
from src.ft_common.errors import (
    AlreadyRegisteredError,
    InvalidInputError,
    TournamentFullError,
    TournamentNotFoundError,
    UserBannedError,
    UserNotFoundError,
)
from src.ft_common.money import cents_to_display
from src.ft_gateway.user.persistence import UserRepository
from src.ft_gateway.user.repository import UserRepositoryProtocol, UserSummary
from src.ft_registration.application.schemas import (
    DuoEntry,
    ParticipantOut,
    RegistrationRequest,
    RegistrationResponse,
    SoloEntry,
    SquadEntry,
    TeamMemberOut,
    TeamOut,
    ValidateUsernamesResponse,
)
from src.ft_registration.domain.models import NewTeam
from src.ft_registration.domain.repository import RegistrationRepositoryProtocol
from src.ft_registration.infrastructure.persistence import RegistrationRepository
from src.ft_tournament.domain.models import Tournament
from src.ft_tournament.domain.repository import TournamentRepositoryProtocol
from src.ft_tournament.infrastructure.persistence import TournamentRepository
from src.ft_wallet.domain.ledger import WalletLedger
from src.ft_wallet.domain.models import CombinedDebit
from src.ft_wallet.domain.repository import WalletRepositoryProtocol
from src.ft_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)

REFERENCE_TYPE = "TOURNAMENT"


def _roster(leader: str, entry: DuoEntry | SquadEntry) -> tuple[list[str], str]:
    """Return (usernames leader first, team name) for a team entry."""
    if isinstance(entry, DuoEntry):
        if entry.teammate == leader:
            raise InvalidInputError("You cannot pick yourself as your teammate")
        return [leader, entry.teammate], f"{leader} & {entry.teammate}"
    if leader not in entry.players:
        raise InvalidInputError("Squad players must include your own username")
    return [leader] + [p for p in entry.players if p != leader], entry.team_name


def _eligible(users: list[UserSummary]) -> dict[str, UserSummary]:
    # Admin accounts cannot play
    return {u.username: u for u in users if not u.is_admin}


class RegistrationService:
    def __init__(
        self,
        registrations: RegistrationRepositoryProtocol | None = None,
        tournaments: TournamentRepositoryProtocol | None = None,
        wallets: WalletRepositoryProtocol | None = None,
        users: UserRepositoryProtocol | None = None,
    ) -> None:
        self._registrations: RegistrationRepositoryProtocol = (
            registrations or RegistrationRepository()
        )
        self._tournaments: TournamentRepositoryProtocol = tournaments or TournamentRepository()
        self._ledger = WalletLedger(wallets or WalletRepository())
        self._users: UserRepositoryProtocol = users or UserRepository()

    async def register(
        self, db: AsyncSession, user_id: str, username: str, body: RegistrationRequest
    ) -> RegistrationResponse:
        entry = body.entry
        if isinstance(entry, SoloEntry):
            return await self.register_solo(db, user_id, body.tournament_id)
        return await self.register_team(db, user_id, username, body.tournament_id, entry)

    async def _lock_tournament(
        self, db: AsyncSession, tournament_id: int, mode: TeamMode
    ) -> Tournament:
        tournament = await self._tournaments.lock_by_id(db, tournament_id)
        if tournament is None:
            raise TournamentNotFoundError(tournament_id)
        if tournament.team_mode != mode.value:
            raise InvalidInputError(
                f"This tournament takes {tournament.team_mode} entries, not {mode.value}"
            )
        return tournament

    async def _settle_fee(
        self, db: AsyncSession, payer_id: str, amount: int, description: str,
        tournament: Tournament,
    ) -> CombinedDebit:
        if amount == 0:
            await self._ledger.record_audit(
                db, payer_id, description, REFERENCE_TYPE, str(tournament.id)
            )
            return CombinedDebit(from_deposit=0, from_winnings=0)
        result = await self._ledger.debit_combined(
            db, payer_id, amount, description, REFERENCE_TYPE, str(tournament.id)
        )
        return result.split

    async def _take_seats(self, db: AsyncSession, tournament: Tournament, seats: int) -> None:
        # Guarded increment; only fails if the row lock was bypassed
        if await self._tournaments.increment_participants(db, tournament.id, seats) is None:
            raise TournamentFullError(seats, tournament.seats_left)

    async def register_solo(
        self, db: AsyncSession, user_id: str, tournament_id: int
    ) -> RegistrationResponse:
        try:
            tournament = await self._lock_tournament(db, tournament_id, TeamMode.SOLO)
            if tournament.seats_left < 1:
                raise TournamentFullError(1, tournament.seats_left)
            if await self._registrations.exists(db, user_id, tournament.id):
                raise AlreadyRegisteredError()
            user = await self._users.get_by_id(db, user_id)
            if user is None:
                raise UserNotFoundError([user_id])
            if user.banned:
                raise UserBannedError()

            fee = tournament.entry_fee
            split = await self._settle_fee(
                db, user_id, fee, f"Tournament registration: {tournament.name}", tournament
            )
            await self._registrations.insert_registrations(
                db, tournament.id, TeamMode.SOLO.value, [user_id], None
            )
            await self._take_seats(db, tournament, 1)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Solo registration user=%s tournament=%d fee=%d",
            user_id, tournament.id, fee,
        )
        if tournament.is_free:
            message = "Successfully registered for free tournament!"
        else:
            message = (
                f"Successfully registered for tournament! "
                f"Entry fee: {cents_to_display(fee)}"
            )
        return RegistrationResponse(
            message=message,
            tournament_type="free" if tournament.is_free else "paid",
            registration_type=TeamMode.SOLO.value,
            entry_fee_cents=fee,
            entry_fee_display=cents_to_display(fee),
            deposit_debited_cents=split.from_deposit,
            winnings_debited_cents=split.from_winnings,
        )

    async def register_team(
        self,
        db: AsyncSession,
        leader_id: str,
        leader_username: str,
        tournament_id: int,
        entry: DuoEntry | SquadEntry,
    ) -> RegistrationResponse:
        """Register a duo or squad; the leader pays entry_fee for every seat."""
        mode = TeamMode(entry.registration_type)
        usernames, team_name = _roster(leader_username, entry)
        seats = len(usernames)

        try:
            tournament = await self._lock_tournament(db, tournament_id, mode)

            # Bulk lookup before any mutation: no partial team is ever admitted
            found = _eligible(await self._users.list_by_usernames(db, usernames))
            missing = [name for name in usernames if name not in found]
            if missing:
                raise UserNotFoundError(missing)
            if found[leader_username].id != leader_id:
                raise InvalidInputError("Team leader does not match the signed-in user")
            banned = [name for name in usernames if found[name].banned]
            if banned:
                raise UserBannedError(banned)

            member_ids = [found[name].id for name in usernames]
            taken = set(await self._registrations.find_registered(db, tournament.id, member_ids))
            if taken:
                raise AlreadyRegisteredError(
                    [name for name in usernames if found[name].id in taken]
                )
            if tournament.seats_left < seats:
                raise TournamentFullError(seats, tournament.seats_left)

            total_fee = tournament.entry_fee * seats
            split = await self._settle_fee(
                db,
                leader_id,
                total_fee,
                f"{mode.value.capitalize()} registration: {tournament.name} ({team_name})",
                tournament,
            )
            team = await self._registrations.insert_team(
                db,
                NewTeam(
                    tournament_id=tournament.id,
                    team_leader_id=leader_id,
                    team_name=team_name,
                    team_members=member_ids,
                    entry_fee_paid=total_fee,
                ),
            )
            await self._registrations.insert_registrations(
                db, tournament.id, mode.value, member_ids, leader_id
            )
            await self._take_seats(db, tournament, seats)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Team registration team=%r mode=%s seats=%d tournament=%d fee=%d",
            team_name, mode.value, seats, tournament.id, total_fee,
        )
        if tournament.is_free:
            message = f'Team "{team_name}" registered successfully for free tournament!'
        else:
            message = (
                f'Team "{team_name}" registered successfully for '
                f"{cents_to_display(total_fee)}"
            )
        return RegistrationResponse(
            message=message,
            tournament_type="free" if tournament.is_free else "paid",
            registration_type=mode.value,
            entry_fee_cents=total_fee,
            entry_fee_display=cents_to_display(total_fee),
            deposit_debited_cents=split.from_deposit,
            winnings_debited_cents=split.from_winnings,
            team_name=team_name,
            team_id=team.id,
        )

    async def validate_usernames(
        self, db: AsyncSession, usernames: list[str]
    ) -> ValidateUsernamesResponse:
        """Report which usernames can join a team, for the roster form."""
        names = list(dict.fromkeys(n.strip() for n in usernames))
        found = _eligible(await self._users.list_by_usernames(db, names))
        not_found = [n for n in names if n not in found]
        banned = [n for n in names if n in found and found[n].banned]
        valid = [n for n in names if n in found and not found[n].banned]
        return ValidateUsernamesResponse(
            valid=valid,
            not_found=not_found,
            banned=banned,
            all_valid=not not_found and not banned,
        )

    async def list_teams(self, db: AsyncSession, tournament_id: int) -> list[TeamOut]:
        if await self._tournaments.get_by_id(db, tournament_id) is None:
            raise TournamentNotFoundError(tournament_id)
        teams = await self._registrations.list_teams(db, tournament_id)
        member_ids = list({m for t in teams for m in t.team_members})
        names = {u.id: u.username for u in await self._users.list_by_ids(db, member_ids)}
        return [
            TeamOut(
                id=t.id,
                team_name=t.team_name,
                team_leader_id=t.team_leader_id,
                team_size=t.team_size,
                entry_fee_paid_cents=t.entry_fee_paid,
                members=[TeamMemberOut(user_id=m, username=names.get(m)) for m in t.team_members],
                created_at=t.created_at.isoformat() if t.created_at else None,
            )
            for t in teams
        ]

    async def list_participants(
        self, db: AsyncSession, tournament_id: int
    ) -> list[ParticipantOut]:
        if await self._tournaments.get_by_id(db, tournament_id) is None:
            raise TournamentNotFoundError(tournament_id)
        participants = await self._registrations.list_participants(db, tournament_id)
        return [
            ParticipantOut(
                user_id=p.user_id,
                username=p.username,
                registration_type=p.registration_type,
                team_leader_id=p.team_leader_id,
                registered_at=p.registered_at.isoformat() if p.registered_at else None,
            )
            for p in participants
        ]
