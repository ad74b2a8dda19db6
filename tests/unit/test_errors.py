"""Tests for ft_common.errors and ft_common.response."""

from src.ft_common.errors import (
    AlreadyProcessedError,
    AlreadyRegisteredError,
    AppError,
    InsufficientBalanceError,
    StoreFailureError,
    TournamentFullError,
    UserBannedError,
    UserNotFoundError,
    WalletMaintenanceError,
)
from src.ft_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestDomainErrors:
    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError(required=1200, available=500)
        assert err.code == 2001
        assert err.http_status == 400
        assert "1200" in err.message and "500" in err.message

    def test_tournament_full_single_seat(self) -> None:
        err = TournamentFullError(1, 0)
        assert err.code == 3002
        assert err.message == "Tournament is full"

    def test_tournament_full_team(self) -> None:
        err = TournamentFullError(4, 1)
        assert "need 4, 1 left" in err.message

    def test_user_not_found_lists_names(self) -> None:
        err = UserNotFoundError(["ghost", "phantom"])
        assert err.names == ["ghost", "phantom"]
        assert "ghost, phantom" in err.message

    def test_user_banned_self_vs_team(self) -> None:
        assert UserBannedError().http_status == 403
        team = UserBannedError(["bob"])
        assert team.usernames == ["bob"]
        assert "bob" in team.message

    def test_already_registered_with_names(self) -> None:
        assert AlreadyRegisteredError().code == 4001
        assert "carol" in AlreadyRegisteredError(["carol"]).message

    def test_already_processed(self) -> None:
        err = AlreadyProcessedError(7, "approved")
        assert err.code == 5002
        assert "already approved" in err.message

    def test_maintenance_is_service_unavailable(self) -> None:
        assert WalletMaintenanceError("down").http_status == 503

    def test_store_failure_hides_details(self) -> None:
        err = StoreFailureError()
        assert err.http_status == 500
        assert err.message == "Something went wrong. Please try again."


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response({"id": 1})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": 1}
        assert resp.request_id.startswith("req_")

    def test_error_response(self) -> None:
        resp = error_response(3001, "Tournament not found: 9")
        assert resp.code == 3001
        assert resp.data is None

    def test_serialization_keys(self) -> None:
        dumped = ApiResponse().model_dump()
        assert set(dumped) == {"code", "message", "data", "timestamp", "request_id"}
