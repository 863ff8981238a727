"""Domain errors raised by the progression layer.

Each error carries the HTTP status the API layer renders it with.
"""


class GamificationError(Exception):
    """Base class for progression errors."""

    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(GamificationError):
    """Referenced user, site, restaurant or quest does not exist."""

    status_code = 404


class QuestAlreadyCompletedError(GamificationError):
    """Quest was completed before; no second award."""

    status_code = 400


class MatchStateError(GamificationError):
    """Like/pass not allowed in the pair's current state."""

    status_code = 409


class ReviewValidationError(GamificationError):
    """Review payload outside accepted bounds."""

    status_code = 400
