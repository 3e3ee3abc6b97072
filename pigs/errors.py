"""Errors raised by the rules engine.

Every transition works on a copy of the snapshot, so raising one of these
leaves the caller's snapshot exactly as it was.
"""

from enum import StrEnum


class ErrorCode(StrEnum):
    """Error codes for i18n translation on the client."""

    # Precondition errors
    NOT_ENOUGH_CARDS = "error.notEnoughCards"
    INVALID_PLAYER_COUNT = "error.invalidPlayerCount"
    INVALID_ROW_INDEX = "error.invalidRowIndex"
    INVALID_CARD = "error.invalidCard"
    CARD_NOT_IN_HAND = "error.cardNotInHand"
    PLAYER_NOT_FOUND = "error.playerNotFound"
    SELECTIONS_MISSING = "error.selectionsMissing"
    NO_PENDING_ROW_CHOICE = "error.noPendingRowChoice"
    NOT_YOUR_ROW_CHOICE = "error.notYourRowChoice"
    ROUND_NOT_OVER = "error.roundNotOver"

    # Phase errors
    WRONG_PHASE = "error.wrongPhase"
    GAME_FINISHED = "error.gameFinished"

    # Snapshot errors
    INCONSISTENT_SNAPSHOT = "error.inconsistentSnapshot"
    STALE_SNAPSHOT = "error.staleSnapshot"
    GAME_NOT_FOUND = "error.gameNotFound"
    NOT_HOST = "error.notHost"


class GameRuleError(Exception):
    """Base class for rejected operations."""

    default_code = ErrorCode.INCONSISTENT_SNAPSHOT

    def __init__(self, message: str, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.code = code or self.default_code


class PreconditionViolation(GameRuleError):
    """An operation was called with arguments the rules do not allow."""

    default_code = ErrorCode.INVALID_CARD


class InvalidPhaseError(PreconditionViolation):
    """A transition was requested from the wrong phase."""

    default_code = ErrorCode.WRONG_PHASE


class InconsistentSnapshotError(GameRuleError):
    """A snapshot contradicts itself (e.g. a selected card missing from its hand)."""

    default_code = ErrorCode.INCONSISTENT_SNAPSHOT


class StaleSnapshotError(GameRuleError):
    """A conditional save found a newer snapshot than the one it expected."""

    default_code = ErrorCode.STALE_SNAPSHOT


class GameNotFoundError(GameRuleError):
    """No snapshot is stored under the requested game id."""

    default_code = ErrorCode.GAME_NOT_FOUND


class NotHostError(GameRuleError):
    """A non-host client tried to advance a phase."""

    default_code = ErrorCode.NOT_HOST
