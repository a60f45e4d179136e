"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Session
  2xxx: Ledger
  3xxx: Project
  4xxx: Voting
  5xxx: Settlement
  9xxx: System
"""

from src.pv_common.enums import ValidationRule


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


# --- 1xxx: Auth/Session ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired credentials", 401)


# --- 2xxx: Ledger ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            2001,
            f"Insufficient points: required {required}, available {available}",
            422,
        )


class InvalidAmountError(AppError):
    def __init__(self, amount: int) -> None:
        super().__init__(2002, f"Point amount must be a non-negative integer, got {amount}", 422)


# --- 3xxx: Project ---

class ProjectNotFoundError(AppError):
    def __init__(self, project_id: str) -> None:
        super().__init__(3001, f"Project not found: {project_id}", 404)


class ForbiddenError(AppError):
    def __init__(self, user_id: str, project_id: str) -> None:
        super().__init__(
            3002, f"User {user_id} is not the creator of project {project_id}", 403
        )


class InputValidationError(AppError):
    """Field-level input rejection; `rule` names the violated constraint."""

    def __init__(self, rule: ValidationRule, detail: str) -> None:
        self.rule = rule
        super().__init__(3003, f"{rule.value}: {detail}", 422)


# --- 4xxx: Voting ---

class VotingClosedError(AppError):
    def __init__(self, project_id: str) -> None:
        super().__init__(4001, f"Voting is closed for project {project_id}", 422)


class PoolExhaustedError(AppError):
    def __init__(self, option: str, requested: int, remaining: int) -> None:
        self.remaining = remaining
        super().__init__(
            4002,
            f"Pool for option '{option}' has {remaining} points left, requested {requested}",
            422,
        )


# --- 5xxx: Settlement ---

class AlreadyPublishedError(AppError):
    def __init__(self, project_id: str) -> None:
        super().__init__(5001, f"Result already published for project {project_id}", 409)


class SettlementRequiredError(AppError):
    def __init__(self, project_id: str) -> None:
        super().__init__(
            5002, f"Project {project_id} has votes; publish the result before deleting", 409
        )


class SettlementNotDoneError(AppError):
    def __init__(self, project_id: str) -> None:
        super().__init__(5003, f"Result of project {project_id} is not published yet", 409)


# --- 9xxx: System ---

class PersistenceError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9001, f"Persistence failed: {detail}", 503)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
