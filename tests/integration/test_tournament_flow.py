"""End-to-end money flows over HTTP (requires running PG + Redis).

Covers deposit, paid solo entry split across balances, squad entry paid by
the leader, prize award and its admin audit entry, withdrawal hold and
admin rejection refund, and the append-only ledger trigger.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from src.ft_common.database import async_session_factory

pytestmark = pytest.mark.asyncio(loop_scope="session")


async def _create_tournament(
    client: AsyncClient, admin: dict[str, str], **fields
) -> dict:
    body = {
        "name": "Integration Cup",
        "game_type": "BGMI",
        "team_mode": "solo",
        "entry_fee_cents": 1200,
        "max_participants": 10,
        **fields,
    }
    resp = await client.post("/api/v1/admin/tournaments", json=body, headers=admin)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


async def _balance(client: AsyncClient, headers: dict[str, str]) -> tuple[int, int]:
    data = (await client.get("/api/v1/wallet/balance", headers=headers)).json()["data"]
    return data["deposit_balance_cents"], data["winnings_balance_cents"]


async def _user_id(client: AsyncClient, headers: dict[str, str]) -> str:
    return (await client.get("/api/v1/auth/me", headers=headers)).json()["data"]["user_id"]


class TestSoloEntry:
    async def test_fee_drawn_deposit_first(
        self, client: AsyncClient, new_player, admin_headers: dict[str, str]
    ) -> None:
        _, headers = await new_player()
        await client.post("/api/v1/wallet/deposit", json={"amount_cents": 1000}, headers=headers)
        user_id = await _user_id(client, headers)
        await client.post(
            f"/api/v1/admin/users/{user_id}/winnings",
            json={"amount_cents": 500},
            headers=admin_headers,
        )
        t = await _create_tournament(client, admin_headers)

        resp = await client.post(
            "/api/v1/registrations", json={"tournament_id": t["id"]}, headers=headers
        )

        assert resp.status_code == 200, resp.text
        data = resp.json()["data"]
        assert (data["deposit_debited_cents"], data["winnings_debited_cents"]) == (1000, 200)
        assert await _balance(client, headers) == (0, 300)

        again = await client.post(
            "/api/v1/registrations", json={"tournament_id": t["id"]}, headers=headers
        )
        assert again.status_code == 400
        assert again.json()["code"] == 4001

        detail = (await client.get(f"/api/v1/tournaments/{t['id']}")).json()["data"]
        assert detail["current_participants"] == 1

    async def test_insufficient_funds(
        self, client: AsyncClient, new_player, admin_headers: dict[str, str]
    ) -> None:
        _, headers = await new_player()
        t = await _create_tournament(client, admin_headers)
        resp = await client.post(
            "/api/v1/registrations", json={"tournament_id": t["id"]}, headers=headers
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 2001


class TestSquadEntry:
    async def test_leader_pays_for_all_four(
        self, client: AsyncClient, new_player, admin_headers: dict[str, str]
    ) -> None:
        leader, headers = await new_player()
        mates = [(await new_player())[0] for _ in range(3)]
        await client.post("/api/v1/wallet/deposit", json={"amount_cents": 5000}, headers=headers)
        t = await _create_tournament(
            client, admin_headers, team_mode="squad", entry_fee_cents=1000, max_participants=8
        )

        resp = await client.post("/api/v1/registrations", json={
            "tournament_id": t["id"],
            "entry": {
                "registration_type": "squad",
                "team_name": "Night Owls",
                "players": [leader, *mates],
            },
        }, headers=headers)

        assert resp.status_code == 200, resp.text
        assert resp.json()["data"]["entry_fee_cents"] == 4000
        assert await _balance(client, headers) == (1000, 0)
        teams = (await client.get(f"/api/v1/tournaments/{t['id']}/teams")).json()["data"]
        assert [m["username"] for m in teams[0]["members"]] == [leader, *mates]


class TestWithdrawal:
    async def test_reject_refunds_and_second_resolve_fails(
        self, client: AsyncClient, new_player, admin_headers: dict[str, str]
    ) -> None:
        _, headers = await new_player()
        user_id = await _user_id(client, headers)
        await client.post(
            f"/api/v1/admin/users/{user_id}/winnings",
            json={"amount_cents": 5000},
            headers=admin_headers,
        )

        resp = await client.post("/api/v1/payouts", json={"amount_cents": 2500}, headers=headers)
        assert resp.status_code == 201, resp.text
        payout_id = resp.json()["data"]["payout"]["id"]
        assert await _balance(client, headers) == (0, 2500)

        rejected = await client.post(
            f"/api/v1/admin/payouts/{payout_id}/resolve",
            json={"action": "reject", "admin_notes": "bank details missing"},
            headers=admin_headers,
        )
        assert rejected.json()["data"]["status"] == "rejected"
        assert await _balance(client, headers) == (0, 5000)

        again = await client.post(
            f"/api/v1/admin/payouts/{payout_id}/resolve",
            json={"action": "approve"},
            headers=admin_headers,
        )
        assert again.status_code == 400
        assert again.json()["code"] == 5002
        assert await _balance(client, headers) == (0, 5000)


class TestAdminGate:
    async def test_players_cannot_use_admin_routes(self, client: AsyncClient, new_player) -> None:
        _, headers = await new_player()
        resp = await client.get("/api/v1/admin/users", headers=headers)
        assert resp.status_code == 403

    async def test_banned_player_cannot_register(
        self, client: AsyncClient, new_player, admin_headers: dict[str, str]
    ) -> None:
        _, headers = await new_player()
        user_id = await _user_id(client, headers)
        await client.post(
            f"/api/v1/admin/users/{user_id}/ban",
            json={"ban_type": "permanent", "reason": "cheating"},
            headers=admin_headers,
        )
        t = await _create_tournament(client, admin_headers, entry_fee_cents=0)
        resp = await client.post(
            "/api/v1/registrations", json={"tournament_id": t["id"]}, headers=headers
        )
        assert resp.status_code == 403


class TestAdminAudit:
    async def test_prize_award_appears_in_admin_transactions(
        self, client: AsyncClient, new_player, admin_headers: dict[str, str]
    ) -> None:
        username, headers = await new_player()
        user_id = await _user_id(client, headers)
        await client.post(
            f"/api/v1/admin/users/{user_id}/winnings",
            json={"amount_cents": 777},
            headers=admin_headers,
        )

        resp = await client.get("/api/v1/admin/transactions", headers=admin_headers)

        assert resp.status_code == 200, resp.text
        newest = resp.json()["data"]["items"][0]
        assert newest["username"] == username
        assert newest["amount_cents"] == 777
        assert newest["description"] == "Prize winnings added by admin"


class TestLedgerIsAppendOnly:
    async def test_rows_cannot_be_rewritten(
        self, client: AsyncClient, new_player
    ) -> None:
        _, headers = await new_player()
        await client.post("/api/v1/wallet/deposit", json={"amount_cents": 900}, headers=headers)
        user_id = await _user_id(client, headers)

        async with async_session_factory() as session:
            with pytest.raises(DBAPIError, match="append-only"):
                await session.execute(
                    text("UPDATE wallet_transactions SET amount = 1 WHERE user_id = :u"),
                    {"u": user_id},
                )
            await session.rollback()
