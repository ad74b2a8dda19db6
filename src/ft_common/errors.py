"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Wallet
  3xxx: Tournament
  4xxx: Registration
  5xxx: Payout
  9xxx: System

Business-rule failures are user-displayable and map to 400; auth and ban
failures map to 401/403; store failures map to 500 with a generic message.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


class UserBannedError(AppError):
    def __init__(self, usernames: list[str] | None = None) -> None:
        if usernames:
            message = f"Users are banned: {', '.join(usernames)}"
        else:
            message = (
                "Your account is banned. You can view the website "
                "but cannot perform this action."
            )
        self.usernames = usernames or []
        super().__init__(1004, message, 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Admin access required", 403)


class UserNotFoundError(AppError):
    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(1007, f"Users not found: {', '.join(names)}", 400)


# --- 2xxx: Wallet ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            400,
        )


class WalletNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Wallet not found for user {user_id}", 404)


class WalletMaintenanceError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(2003, message, 503)


# --- 3xxx: Tournament ---

class TournamentNotFoundError(AppError):
    def __init__(self, tournament_id: int) -> None:
        super().__init__(3001, f"Tournament not found: {tournament_id}", 404)


class TournamentFullError(AppError):
    def __init__(self, seats_needed: int, seats_left: int) -> None:
        if seats_needed == 1:
            message = "Tournament is full"
        else:
            message = (
                f"Not enough spots available for your team: "
                f"need {seats_needed}, {seats_left} left"
            )
        super().__init__(3002, message, 400)


# --- 4xxx: Registration ---

class AlreadyRegisteredError(AppError):
    def __init__(self, usernames: list[str] | None = None) -> None:
        if usernames:
            message = f"Already registered for this tournament: {', '.join(usernames)}"
        else:
            message = "Already registered for this tournament"
        super().__init__(4001, message, 400)


# --- 5xxx: Payout ---

class PayoutNotFoundError(AppError):
    def __init__(self, payout_id: int) -> None:
        super().__init__(5001, f"Payout request not found: {payout_id}", 404)


class AlreadyProcessedError(AppError):
    def __init__(self, payout_id: int, status: str) -> None:
        super().__init__(
            5002, f"Payout request {payout_id} is already {status}", 400
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class InvalidInputError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9003, detail, 400)


class StoreFailureError(AppError):
    def __init__(self) -> None:
        super().__init__(9004, "Something went wrong. Please try again.", 500)
