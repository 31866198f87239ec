from __future__ import annotations

import logging
import random
from typing import Any, Callable, Mapping

from ..errors import UnsupportedAction
from .models import (
    DEFAULT_INTERVAL_MS,
    MIN_INTERVAL_MS,
    PLACEHOLDER_PRIZE,
    RoomState,
    Winner,
    coerce_text,
    create,
    to_int,
)

logger = logging.getLogger(__name__)

Params = Mapping[str, Any]
Handler = Callable[[RoomState, Params, random.Random], RoomState]

_rng = random.Random()


def draw(state: RoomState, rng: random.Random) -> Winner | None:
    """Fill one shape of a randomly chosen cell, in place.

    The pick is a uniform position in the pool, not a uniform number.
    Returns the new winner when the cell reaches the threshold.
    """
    if not state.available_numbers:
        return None

    idx = rng.randrange(len(state.available_numbers))
    number = state.available_numbers[idx]

    filled = min(state.filled_counts[number - 1] + 1, state.num_shapes)
    state.filled_counts[number - 1] = filled
    if filled < state.num_shapes:
        return None

    name = state.names[number - 1] or f"#{number}"
    position = len(state.winners)
    prize = state.prizes[position] if position < len(state.prizes) else PLACEHOLDER_PRIZE

    winner = Winner(name=name, prize=prize, number=number)
    state.winners.append(winner)
    # The pool is not aligned with cell numbers, so remove by value.
    state.available_numbers = [n for n in state.available_numbers if n != number]
    return winner


def _as_index(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return int(number) if number.is_integer() else None


def _generate(state: RoomState, params: Params, rng: random.Random) -> RoomState:
    fresh = create(params.get("n"), params.get("k"), params.get("shape"))
    raw_interval = params.get("intervalMs")
    interval = DEFAULT_INTERVAL_MS if raw_interval is None else to_int(raw_interval, DEFAULT_INTERVAL_MS)
    fresh.interval_ms = max(MIN_INTERVAL_MS, interval)
    return fresh


def _reset(state: RoomState, params: Params, rng: random.Random) -> RoomState:
    fresh = create(state.num_cells, state.num_shapes, state.shape_kind)
    fresh.prizes = list(state.prizes)
    return fresh


def _start(state: RoomState, params: Params, rng: random.Random) -> RoomState:
    state.running = True
    return state


def _stop(state: RoomState, params: Params, rng: random.Random) -> RoomState:
    state.running = False
    return state


def _next(state: RoomState, params: Params, rng: random.Random) -> RoomState:
    winner = draw(state, rng)
    if winner is not None:
        logger.debug("Cell %s completed, prize %r", winner.number, winner.prize)
    return state


def _add_prize(state: RoomState, params: Params, rng: random.Random) -> RoomState:
    prize = coerce_text(params.get("prize")).strip()
    if prize:
        state.prizes.append(prize)
    return state


def _set_prizes(state: RoomState, params: Params, rng: random.Random) -> RoomState:
    prizes = params.get("prizes")
    state.prizes = [coerce_text(p) for p in prizes] if isinstance(prizes, list) else []
    return state


def _remove_prize(state: RoomState, params: Params, rng: random.Random) -> RoomState:
    index = _as_index(params.get("index"))
    if index is not None and 0 <= index < len(state.prizes):
        del state.prizes[index]
    return state


def _set_names(state: RoomState, params: Params, rng: random.Random) -> RoomState:
    names = params.get("names")
    if not isinstance(names, list):
        return state
    for i, name in enumerate(names[: state.num_cells]):
        state.names[i] = coerce_text(name)
    return state


ACTIONS: dict[str, Handler] = {
    "generate": _generate,
    "reset": _reset,
    "start": _start,
    "stop": _stop,
    "next": _next,
    "addPrize": _add_prize,
    "setPrizes": _set_prizes,
    "removePrize": _remove_prize,
    "setNames": _set_names,
}


def apply(
    state: RoomState | None,
    action: Any,
    params: Params | None = None,
    rng: random.Random | None = None,
) -> RoomState:
    """Return the state that results from ``action``; ``state`` is left untouched.

    A missing state is replaced by the default room before the action runs.
    Raises ``UnsupportedAction`` for labels outside ``ACTIONS``.
    """
    handler = ACTIONS.get(action) if isinstance(action, str) else None
    if handler is None:
        raise UnsupportedAction(action)

    current = state.copy() if state is not None else create()
    return handler(current, params or {}, rng or _rng)
