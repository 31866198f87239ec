from __future__ import annotations

import random
from collections import Counter

import pytest

from bingodraw.errors import UnsupportedAction
from bingodraw.game.engine import ACTIONS, apply, draw
from bingodraw.game.models import RoomState, create


class _FixedPick(random.Random):
    """Always picks the same pool position."""

    def __init__(self, position: int) -> None:
        super().__init__(0)
        self.position = position

    def randrange(self, *args, **kwargs) -> int:
        return self.position


def _drain(state, rng, limit=None):
    steps = 0
    while state.available_numbers:
        state = apply(state, "next", rng=rng)
        steps += 1
        if limit is not None and steps > limit:
            raise AssertionError("pool did not empty in time")
    return state, steps


def test_actions_table_lists_every_label() -> None:
    assert set(ACTIONS) == {
        "generate",
        "reset",
        "start",
        "stop",
        "next",
        "addPrize",
        "setPrizes",
        "removePrize",
        "setNames",
    }


def test_missing_state_is_materialized_with_defaults() -> None:
    state = apply(None, "start")
    assert state.running is True
    assert (state.num_cells, state.num_shapes, state.shape_kind) == (20, 2, "star")


def test_apply_does_not_mutate_input(rng: random.Random) -> None:
    original = create(3, 1)
    snapshot = original.to_dict()

    apply(original, "next", rng=rng)
    apply(original, "addPrize", {"prize": "Mug"})
    apply(original, "setNames", {"names": ["Zed"]})

    assert original.to_dict() == snapshot


def test_generate_replaces_state() -> None:
    state = create(3, 1)
    state.prizes = ["A"]
    state.running = True

    new = apply(state, "generate", {"n": 10, "k": 3, "shape": "circle", "intervalMs": 2500})

    assert (new.num_cells, new.num_shapes, new.shape_kind) == (10, 3, "circle")
    assert new.interval_ms == 2500
    assert new.prizes == []
    assert new.running is False
    assert new.winners == []


def test_generate_defaults_and_interval_floor() -> None:
    new = apply(None, "generate", {})
    assert (new.num_cells, new.num_shapes, new.shape_kind, new.interval_ms) == (20, 2, "star", 5000)

    assert apply(None, "generate", {"intervalMs": 10}).interval_ms == 1000
    assert apply(None, "generate", {"intervalMs": "3000"}).interval_ms == 3000
    assert apply(None, "generate", {"intervalMs": "soon"}).interval_ms == 5000
    assert apply(None, "generate", {"n": 1000, "k": 50, "shape": "blob"}).num_cells == 500


def test_start_and_stop_toggle_running() -> None:
    state = apply(create(), "start")
    assert state.running is True
    state = apply(state, "stop")
    assert state.running is False


def test_next_is_not_gated_by_running(rng: random.Random) -> None:
    state = apply(create(2, 2), "next", rng=rng)
    assert sum(state.filled_counts) == 1


def test_next_on_empty_pool_is_a_silent_no_op(rng: random.Random) -> None:
    state, _ = _drain(create(2, 1), rng)
    again = apply(state, "next", rng=rng)
    assert again == state


def test_scenario_three_cells_single_shape(rng: random.Random) -> None:
    state = create(3, 1, "star")
    for _ in range(3):
        state = apply(state, "next", rng=rng)

    assert len(state.winners) == 3
    assert state.available_numbers == []
    assert sorted(w.number for w in state.winners) == [1, 2, 3]


@pytest.mark.parametrize("n,k", [(1, 1), (5, 2), (12, 3), (30, 4)])
def test_draining_produces_one_winner_per_cell(n: int, k: int) -> None:
    rng = random.Random(n * 100 + k)
    state, steps = _drain(create(n, k), rng, limit=n * k)

    assert steps == n * k
    assert len(state.winners) == n
    numbers = [w.number for w in state.winners]
    assert len(set(numbers)) == n
    assert all(1 <= number <= n for number in numbers)
    assert state.filled_counts == [k] * n


def test_partial_cells_stay_in_pool() -> None:
    state = create(3, 2)
    rng = _FixedPick(0)

    state = apply(state, "next", rng=rng)
    assert state.filled_counts == [1, 0, 0]
    assert state.available_numbers == [1, 2, 3]
    assert state.winners == []

    state = apply(state, "next", rng=rng)
    assert state.filled_counts == [2, 0, 0]
    assert state.available_numbers == [2, 3]
    assert [(w.name, w.prize, w.number) for w in state.winners] == [("#1", "Prize", 1)]


def test_winner_removed_by_value_not_position() -> None:
    state = create(5, 1)
    state.available_numbers = [4, 2, 5]
    rng = _FixedPick(1)

    state = apply(state, "next", rng=rng)

    assert state.winners[0].number == 2
    assert state.available_numbers == [4, 5]


def test_stored_finished_cell_cannot_win_twice() -> None:
    state = RoomState.from_dict(
        {
            "numCells": 2,
            "numShapes": 1,
            "filledCounts": [1, 0],
            "availableNumbers": [1, 2],
            "winners": [{"name": "#1", "prize": "A", "number": 1}],
        }
    )

    state = apply(state, "next", rng=_FixedPick(0))

    assert [w.number for w in state.winners] == [1, 2]
    assert state.available_numbers == []


def test_fill_count_never_exceeds_threshold() -> None:
    state = create(2, 2)
    state.filled_counts[0] = 2
    state.available_numbers = [1]
    rng = random.Random(0)

    winner = draw(state, rng)

    assert state.filled_counts[0] == 2
    assert winner is not None and winner.number == 1


def test_prizes_pair_with_winners_in_order(rng: random.Random) -> None:
    state = apply(create(3, 1), "setPrizes", {"prizes": ["A", "B"]})
    for _ in range(3):
        state = apply(state, "next", rng=rng)

    assert [w.prize for w in state.winners] == ["A", "B", "Prize"]


def test_winner_uses_cell_name_with_fallback() -> None:
    state = create(2, 1)
    state.names[0] = ""
    state.names[1] = "Bea"
    rng = _FixedPick(0)

    state = apply(state, "next", rng=rng)
    state = apply(state, "next", rng=rng)

    assert [(w.name, w.number) for w in state.winners] == [("#1", 1), ("Bea", 2)]


def test_first_draw_is_roughly_uniform() -> None:
    rng = random.Random(99)
    base = create(4, 3)
    # Partially filled cells must not skew the pick.
    base.filled_counts = [2, 0, 1, 0]
    trials = 4000

    counts: Counter[int] = Counter()
    for _ in range(trials):
        state = base.copy()
        before = list(state.filled_counts)
        draw(state, rng)
        picked = next(i for i, (a, b) in enumerate(zip(before, state.filled_counts)) if a != b)
        counts[picked + 1] += 1

    for number in range(1, 5):
        assert abs(counts[number] / trials - 0.25) < 0.04


def test_reset_keeps_dimensions_shape_and_prizes(rng: random.Random) -> None:
    state = apply(None, "generate", {"n": 4, "k": 1, "shape": "diamond", "intervalMs": 2000})
    state = apply(state, "setPrizes", {"prizes": ["A", "B"]})
    state = apply(state, "start")
    for _ in range(2):
        state = apply(state, "next", rng=rng)

    reset = apply(state, "reset")

    assert reset.available_numbers == [1, 2, 3, 4]
    assert reset.winners == []
    assert reset.filled_counts == [0, 0, 0, 0]
    assert reset.prizes == ["A", "B"]
    assert (reset.num_cells, reset.num_shapes, reset.shape_kind) == (4, 1, "diamond")
    assert reset.running is False


def test_add_prize_trims_and_skips_blank() -> None:
    state = apply(create(), "addPrize", {"prize": "  Mug  "})
    state = apply(state, "addPrize", {"prize": "   "})
    state = apply(state, "addPrize", {})
    state = apply(state, "addPrize", {"prize": 7})
    assert state.prizes == ["Mug", "7"]


def test_set_prizes_replaces_and_coerces() -> None:
    state = create()
    state.prizes = ["old"]
    assert apply(state, "setPrizes", {"prizes": ["A", 2, 3.5]}).prizes == ["A", "2", "3.5"]
    assert apply(state, "setPrizes", {"prizes": "nope"}).prizes == []


@pytest.mark.parametrize("index", [-1, 3, 10, "x", None, 1.5, True, ""])
def test_remove_prize_out_of_range_is_a_no_op(index) -> None:
    state = create()
    state.prizes = ["A", "B", "C"]
    assert apply(state, "removePrize", {"index": index}).prizes == ["A", "B", "C"]


@pytest.mark.parametrize("index", [1, 1.0, "1"])
def test_remove_prize_removes_exactly_one(index) -> None:
    state = create()
    state.prizes = ["A", "B", "C"]
    assert apply(state, "removePrize", {"index": index}).prizes == ["A", "C"]


def test_set_names_overwrites_prefix_only() -> None:
    state = apply(create(3, 1), "setNames", {"names": ["Alice"]})
    assert state.names == ["Alice", "#2", "#3"]


def test_set_names_ignores_extra_entries_and_coerces() -> None:
    state = apply(create(2, 1), "setNames", {"names": [1, "Bo", "Cy"]})
    assert state.names == ["1", "Bo"]
    assert apply(state, "setNames", {"names": "Alice"}).names == ["1", "Bo"]


@pytest.mark.parametrize("action", ["frobnicate", "", None, 3, "NEXT"])
def test_unsupported_action_is_rejected_without_changes(action) -> None:
    state = create(3, 1)
    snapshot = state.to_dict()

    with pytest.raises(UnsupportedAction) as info:
        apply(state, action)

    assert info.value.action == action
    assert state.to_dict() == snapshot
