from __future__ import annotations


class BingoError(Exception):
    """Base class for errors raised by the game core and its stores."""


class UnsupportedAction(BingoError):
    def __init__(self, action: object) -> None:
        self.action = action
        super().__init__(f"Unsupported action: {action!r}")


class BackendFailure(BingoError):
    """A persistence read or write failed. Never retried."""

    def __init__(self, operation: str, room: str, detail: str = "") -> None:
        self.operation = operation
        self.room = room
        message = f"State backend {operation} failed for room {room!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
