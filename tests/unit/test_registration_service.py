"""RegistrationService scenarios against the in-memory store.

The store's sessions hold row locks until commit/rollback and undo their
writes on rollback, so these tests cover the all-or-nothing and
serialization guarantees as well as the happy paths.
"""

import asyncio
from datetime import timedelta

import pytest

from src.ft_common.datetime_utils import utc_now
from src.ft_common.errors import (
    AlreadyRegisteredError,
    InsufficientBalanceError,
    InvalidInputError,
    TournamentFullError,
    TournamentNotFoundError,
    UserBannedError,
    UserNotFoundError,
)
from src.ft_registration.application.schemas import (
    DuoEntry,
    RegistrationRequest,
    SquadEntry,
)
from src.ft_registration.application.service import RegistrationService
from tests.fakes import (
    FakeRegistrationRepository,
    FakeSession,
    FakeTournamentRepository,
    FakeUserRepository,
    FakeWalletRepository,
    InMemoryStore,
)


@pytest.fixture
def service(store: InMemoryStore) -> RegistrationService:
    return RegistrationService(
        registrations=FakeRegistrationRepository(store),
        tournaments=FakeTournamentRepository(store),
        wallets=FakeWalletRepository(store),
        users=FakeUserRepository(store),
    )


def _balances(store: InMemoryStore, user_id: str) -> tuple[int, int]:
    wallet = store.wallets[user_id]
    return wallet.deposit_balance, wallet.winnings_balance


class TestSolo:
    async def test_paid_entry_drains_deposit_then_winnings(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        user = store.add_user("alice", deposit=1000, winnings=500)
        t = store.add_tournament(entry_fee=1200)

        resp = await service.register_solo(session, user.id, t.id)

        assert resp.tournament_type == "paid"
        assert resp.deposit_debited_cents == 1000
        assert resp.winnings_debited_cents == 200
        assert resp.message == "Successfully registered for tournament! Entry fee: ₹12.00"
        assert _balances(store, user.id) == (0, 300)
        assert store.tournaments[t.id].current_participants == 1
        entries = store.transactions_for(user.id)
        assert [(e.balance_type, e.amount) for e in entries] == [
            ("deposit", 1000), ("winnings", 200),
        ]
        assert all(e.description == "Tournament registration: Weekend Cup" for e in entries)
        assert session.commits == 1

    async def test_free_entry_leaves_balances(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        user = store.add_user("alice", deposit=700, winnings=300)
        t = store.add_tournament(entry_fee=0)

        resp = await service.register_solo(session, user.id, t.id)

        assert resp.tournament_type == "free"
        assert resp.message == "Successfully registered for free tournament!"
        assert _balances(store, user.id) == (700, 300)
        [audit] = store.transactions_for(user.id)
        assert audit.amount == 0
        assert audit.balance_type == "combined"

    async def test_insufficient_funds_rolls_everything_back(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        user = store.add_user("alice", deposit=100, winnings=100)
        t = store.add_tournament(entry_fee=1200)

        with pytest.raises(InsufficientBalanceError):
            await service.register_solo(session, user.id, t.id)

        assert session.rollbacks == 1
        assert _balances(store, user.id) == (100, 100)
        assert store.registrations == []
        assert store.tournaments[t.id].current_participants == 0

    async def test_full_tournament(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        user = store.add_user("alice", deposit=5000)
        t = store.add_tournament(entry_fee=100, max_participants=2, current_participants=2)
        with pytest.raises(TournamentFullError, match="Tournament is full"):
            await service.register_solo(session, user.id, t.id)
        assert _balances(store, user.id) == (5000, 0)

    async def test_banned_user(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        user = store.add_user(
            "alice", deposit=5000, ban_status="temp_banned",
            ban_expiry=utc_now() + timedelta(days=1),
        )
        t = store.add_tournament(entry_fee=100)
        with pytest.raises(UserBannedError):
            await service.register_solo(session, user.id, t.id)

    async def test_expired_temp_ban_may_register(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        user = store.add_user(
            "alice", ban_status="temp_banned", ban_expiry=utc_now() - timedelta(minutes=5),
        )
        t = store.add_tournament()
        resp = await service.register_solo(session, user.id, t.id)
        assert resp.success

    async def test_missing_tournament(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        user = store.add_user("alice")
        with pytest.raises(TournamentNotFoundError):
            await service.register_solo(session, user.id, 404)

    async def test_mode_mismatch(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        user = store.add_user("alice")
        t = store.add_tournament(team_mode="duo")
        with pytest.raises(InvalidInputError):
            await service.register_solo(session, user.id, t.id)

    async def test_register_twice(
        self, service: RegistrationService, store: InMemoryStore
    ) -> None:
        user = store.add_user("alice", deposit=5000)
        t = store.add_tournament(entry_fee=1000)
        await service.register_solo(FakeSession(), user.id, t.id)
        with pytest.raises(AlreadyRegisteredError):
            await service.register_solo(FakeSession(), user.id, t.id)
        assert _balances(store, user.id) == (4000, 0)
        assert store.tournaments[t.id].current_participants == 1

    async def test_concurrent_duplicate_admits_exactly_once(
        self, service: RegistrationService, store: InMemoryStore
    ) -> None:
        user = store.add_user("alice", deposit=5000)
        t = store.add_tournament(entry_fee=1000)

        results = await asyncio.gather(
            service.register_solo(FakeSession(), user.id, t.id),
            service.register_solo(FakeSession(), user.id, t.id),
            return_exceptions=True,
        )

        assert sum(1 for r in results if not isinstance(r, Exception)) == 1
        assert sum(1 for r in results if isinstance(r, AlreadyRegisteredError)) == 1
        assert _balances(store, user.id) == (4000, 0)
        assert len(store.registrations) == 1
        assert store.tournaments[t.id].current_participants == 1

    async def test_concurrent_last_seat(
        self, service: RegistrationService, store: InMemoryStore
    ) -> None:
        t = store.add_tournament(entry_fee=100, max_participants=1)
        users = [store.add_user(f"p{i}", deposit=100) for i in range(3)]

        results = await asyncio.gather(
            *(service.register_solo(FakeSession(), u.id, t.id) for u in users),
            return_exceptions=True,
        )

        assert sum(1 for r in results if isinstance(r, TournamentFullError)) == 2
        assert store.tournaments[t.id].current_participants == 1
        assert sum(store.wallets[u.id].deposit_balance for u in users) == 200


class TestDuo:
    async def test_leader_pays_both_seats(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        leader = store.add_user("alice", deposit=1500, winnings=700)
        mate = store.add_user("bob", deposit=9999)
        t = store.add_tournament(entry_fee=1000, team_mode="duo")

        resp = await service.register_team(
            session, leader.id, "alice", t.id, DuoEntry(teammate="bob")
        )

        assert resp.entry_fee_cents == 2000
        assert resp.team_name == "alice & bob"
        assert _balances(store, leader.id) == (0, 200)
        assert _balances(store, mate.id) == (9999, 0)
        assert store.tournaments[t.id].current_participants == 2
        assert {r.user_id for r in store.registrations} == {leader.id, mate.id}
        assert all(r.team_leader_id == leader.id for r in store.registrations)
        [team] = store.teams
        assert team.team_members == [leader.id, mate.id]
        assert team.entry_fee_paid == 2000

    async def test_self_as_teammate(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        leader = store.add_user("alice")
        t = store.add_tournament(team_mode="duo")
        with pytest.raises(InvalidInputError):
            await service.register_team(
                session, leader.id, "alice", t.id, DuoEntry(teammate="alice")
            )

    async def test_unknown_teammate(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        leader = store.add_user("alice", deposit=5000)
        t = store.add_tournament(entry_fee=100, team_mode="duo")
        with pytest.raises(UserNotFoundError) as exc:
            await service.register_team(
                session, leader.id, "alice", t.id, DuoEntry(teammate="ghost")
            )
        assert exc.value.names == ["ghost"]
        assert _balances(store, leader.id) == (5000, 0)

    async def test_admin_cannot_be_teammate(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        leader = store.add_user("alice")
        store.add_user("root", is_admin=True)
        t = store.add_tournament(team_mode="duo")
        with pytest.raises(UserNotFoundError):
            await service.register_team(
                session, leader.id, "alice", t.id, DuoEntry(teammate="root")
            )


class TestSquad:
    def _squad(self, *players: str) -> SquadEntry:
        return SquadEntry(team_name="Wolves", players=list(players))

    async def test_squad_pays_per_seat_and_fills_in_order(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        leader = store.add_user("lead", deposit=10000, winnings=5000)
        others = [store.add_user(n) for n in ("b", "c", "d")]
        t = store.add_tournament(entry_fee=3000, team_mode="squad", max_participants=8)

        resp = await service.register_team(
            session, leader.id, "lead", t.id, self._squad("b", "lead", "c", "d")
        )

        assert resp.entry_fee_cents == 12000
        assert resp.team_name == "Wolves"
        assert _balances(store, leader.id) == (0, 3000)
        assert store.tournaments[t.id].current_participants == 4
        assert store.teams[0].team_members == [leader.id] + [u.id for u in others]

    async def test_substitute_takes_a_fifth_seat(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        leader = store.add_user("lead", deposit=500)
        for n in ("b", "c", "d", "sub"):
            store.add_user(n)
        t = store.add_tournament(entry_fee=100, team_mode="squad", max_participants=10)

        resp = await service.register_team(
            session, leader.id, "lead", t.id, self._squad("lead", "b", "c", "d", "sub")
        )

        assert resp.entry_fee_cents == 500
        assert store.tournaments[t.id].current_participants == 5

    async def test_not_enough_seats_changes_nothing(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        leader = store.add_user("lead", deposit=10000)
        for n in ("b", "c", "d"):
            store.add_user(n)
        t = store.add_tournament(
            entry_fee=100, team_mode="squad", max_participants=4, current_participants=3,
        )

        with pytest.raises(TournamentFullError, match="need 4, 1 left"):
            await service.register_team(
                session, leader.id, "lead", t.id, self._squad("lead", "b", "c", "d")
            )

        assert store.tournaments[t.id].current_participants == 3
        assert _balances(store, leader.id) == (10000, 0)
        assert store.registrations == []
        assert store.teams == []

    async def test_leader_must_be_on_roster(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        leader = store.add_user("lead")
        t = store.add_tournament(team_mode="squad")
        with pytest.raises(InvalidInputError):
            await service.register_team(
                session, leader.id, "lead", t.id, self._squad("a", "b", "c", "d")
            )

    async def test_banned_members_are_named(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        leader = store.add_user("lead", deposit=10000)
        store.add_user("b", ban_status="banned")
        store.add_user("c")
        store.add_user("d", ban_status="banned")
        t = store.add_tournament(entry_fee=100, team_mode="squad")

        with pytest.raises(UserBannedError) as exc:
            await service.register_team(
                session, leader.id, "lead", t.id, self._squad("lead", "b", "c", "d")
            )
        assert exc.value.usernames == ["b", "d"]
        assert _balances(store, leader.id) == (10000, 0)

    async def test_member_already_registered(
        self, service: RegistrationService, store: InMemoryStore
    ) -> None:
        lead1 = store.add_user("lead1")
        lead2 = store.add_user("lead2")
        for n in ("b", "c", "d", "e", "f"):
            store.add_user(n)
        t = store.add_tournament(team_mode="squad", max_participants=20)
        await service.register_team(
            FakeSession(), lead1.id, "lead1", t.id, self._squad("lead1", "b", "c", "d")
        )

        with pytest.raises(AlreadyRegisteredError, match="tournament: d$"):
            await service.register_team(
                FakeSession(), lead2.id, "lead2", t.id, self._squad("lead2", "d", "e", "f")
            )
        assert store.tournaments[t.id].current_participants == 4
        assert len(store.teams) == 1

    async def test_leader_cannot_pay_rolls_back(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        leader = store.add_user("lead", deposit=300, winnings=50)
        for n in ("b", "c", "d"):
            store.add_user(n, deposit=100000)
        t = store.add_tournament(entry_fee=100, team_mode="squad")

        with pytest.raises(InsufficientBalanceError):
            await service.register_team(
                session, leader.id, "lead", t.id, self._squad("lead", "b", "c", "d")
            )
        assert _balances(store, leader.id) == (300, 50)
        assert store.tournaments[t.id].current_participants == 0


class TestDispatchAndLookups:
    async def test_register_dispatches_on_entry(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        leader = store.add_user("alice")
        store.add_user("bob")
        t = store.add_tournament(team_mode="duo")
        body = RegistrationRequest(tournament_id=t.id, entry=DuoEntry(teammate="bob"))
        resp = await service.register(session, leader.id, "alice", body)
        assert resp.registration_type == "duo"

    async def test_validate_usernames(
        self, service: RegistrationService, store: InMemoryStore, session: FakeSession
    ) -> None:
        store.add_user("alice")
        store.add_user("bob", ban_status="banned")
        store.add_user("root", is_admin=True)
        resp = await service.validate_usernames(session, ["alice", "bob", "ghost", "root"])
        assert resp.valid == ["alice"]
        assert resp.banned == ["bob"]
        assert resp.not_found == ["ghost", "root"]
        assert not resp.all_valid

    async def test_list_teams_and_participants(
        self, service: RegistrationService, store: InMemoryStore
    ) -> None:
        leader = store.add_user("alice")
        store.add_user("bob")
        t = store.add_tournament(team_mode="duo")
        await service.register_team(
            FakeSession(), leader.id, "alice", t.id, DuoEntry(teammate="bob")
        )

        [team] = await service.list_teams(FakeSession(), t.id)
        assert [m.username for m in team.members] == ["alice", "bob"]
        participants = await service.list_participants(FakeSession(), t.id)
        assert {p.username for p in participants} == {"alice", "bob"}

    async def test_list_teams_unknown_tournament(
        self, service: RegistrationService, session: FakeSession
    ) -> None:
        with pytest.raises(TournamentNotFoundError):
            await service.list_teams(session, 77)
