from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StateStore(ABC):
    """Keeps one JSON state document per room key.

    Writes are whole-document upserts; the last write wins.
    """

    name = "abstract"

    @abstractmethod
    def load(self, room: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    def save(self, room: str, state: dict[str, Any]) -> None:
        ...
