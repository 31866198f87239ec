from __future__ import annotations

import copy
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Mapping


ShapeKind = Literal["star", "circle", "diamond"]

SHAPE_KINDS: tuple[str, ...] = ("star", "circle", "diamond")
DEFAULT_SHAPE: ShapeKind = "star"

MIN_CELLS, MAX_CELLS = 1, 500
MIN_SHAPES, MAX_SHAPES = 1, 20
DEFAULT_CELLS = 20
DEFAULT_SHAPES = 2

MIN_INTERVAL_MS = 1000
DEFAULT_INTERVAL_MS = 5000

PLACEHOLDER_PRIZE = "Prize"

# Wire names for the shape kind. Older clients only read "shape".
SHAPE_FIELD = "shapeType"
LEGACY_SHAPE_FIELD = "shape"


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def to_int(value: Any, default: int) -> int:
    """Floor ``value`` to an int, returning ``default`` when it is not numeric."""
    if isinstance(value, bool):
        return int(value)
    try:
        return math.floor(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def coerce_shape(value: Any) -> ShapeKind:
    if isinstance(value, str) and value in SHAPE_KINDS:
        return value  # type: ignore[return-value]
    return DEFAULT_SHAPE


def default_name(index: int) -> str:
    return f"#{index + 1}"


@dataclass
class Winner:
    name: str
    prize: str
    number: int


@dataclass
class RoomState:
    num_cells: int
    num_shapes: int
    shape_kind: ShapeKind = DEFAULT_SHAPE
    running: bool = False
    interval_ms: int = DEFAULT_INTERVAL_MS
    available_numbers: list[int] = field(default_factory=list)
    names: list[str] = field(default_factory=list)
    filled_counts: list[int] = field(default_factory=list)
    prizes: list[str] = field(default_factory=list)
    winners: list[Winner] = field(default_factory=list)

    def copy(self) -> RoomState:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "running": self.running,
            "numCells": self.num_cells,
            "numShapes": self.num_shapes,
            SHAPE_FIELD: self.shape_kind,
            LEGACY_SHAPE_FIELD: self.shape_kind,
            "intervalMs": self.interval_ms,
            "availableNumbers": list(self.available_numbers),
            "names": list(self.names),
            "filledCounts": list(self.filled_counts),
            "prizes": list(self.prizes),
            "winners": [asdict(w) for w in self.winners],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> RoomState:
        """Build a state from a persisted document, repairing what it can.

        Lists shorter than ``numCells`` are padded with defaults and longer ones
        truncated, so the length invariants hold for whatever was stored.
        """
        data = normalize(payload)

        num_cells = clamp(to_int(data.get("numCells"), DEFAULT_CELLS), MIN_CELLS, MAX_CELLS)
        num_shapes = clamp(to_int(data.get("numShapes"), DEFAULT_SHAPES), MIN_SHAPES, MAX_SHAPES)

        names = [coerce_text(x) for x in _as_list(data.get("names"))][:num_cells]
        names.extend(default_name(i) for i in range(len(names), num_cells))

        counts = [clamp(to_int(x, 0), 0, num_shapes) for x in _as_list(data.get("filledCounts"))][:num_cells]
        counts.extend(0 for _ in range(len(counts), num_cells))

        winners = [
            Winner(
                name=coerce_text(w.get("name")),
                prize=coerce_text(w.get("prize", PLACEHOLDER_PRIZE)),
                number=to_int(w.get("number"), 0),
            )
            for w in _as_list(data.get("winners"))
            if isinstance(w, Mapping)
        ]

        # Finished cells never go back into the pool, or they would win twice.
        won = {w.number for w in winners}
        open_numbers = {i + 1 for i, count in enumerate(counts) if count < num_shapes} - won

        if "availableNumbers" in data:
            pool: list[int] = []
            for raw in _as_list(data.get("availableNumbers")):
                number = to_int(raw, 0)
                if number in open_numbers:
                    open_numbers.discard(number)
                    pool.append(number)
        else:
            pool = sorted(open_numbers)

        return cls(
            num_cells=num_cells,
            num_shapes=num_shapes,
            shape_kind=data[SHAPE_FIELD],
            running=bool(data.get("running", False)),
            interval_ms=max(MIN_INTERVAL_MS, to_int(data.get("intervalMs"), DEFAULT_INTERVAL_MS)),
            available_numbers=pool,
            names=names,
            filled_counts=counts,
            prizes=[coerce_text(x) for x in _as_list(data.get("prizes"))],
            winners=winners,
        )


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def create(
    num_cells: Any = DEFAULT_CELLS,
    num_shapes: Any = DEFAULT_SHAPES,
    shape_kind: Any = DEFAULT_SHAPE,
) -> RoomState:
    n = clamp(to_int(num_cells, DEFAULT_CELLS), MIN_CELLS, MAX_CELLS)
    k = clamp(to_int(num_shapes, DEFAULT_SHAPES), MIN_SHAPES, MAX_SHAPES)

    return RoomState(
        num_cells=n,
        num_shapes=k,
        shape_kind=coerce_shape(shape_kind),
        running=False,
        interval_ms=DEFAULT_INTERVAL_MS,
        available_numbers=list(range(1, n + 1)),
        names=[default_name(i) for i in range(n)],
        filled_counts=[0] * n,
        prizes=[],
        winners=[],
    )


def normalize(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of a state document with both shape fields set and equal.

    A set ``shapeType`` wins over ``shape``; anything outside the known
    kinds becomes ``star``.
    """
    data = dict(payload)
    canonical = data.get(SHAPE_FIELD)
    legacy = data.get(LEGACY_SHAPE_FIELD)
    kind = coerce_shape(canonical if canonical not in (None, "") else legacy)
    data[SHAPE_FIELD] = kind
    data[LEGACY_SHAPE_FIELD] = kind
    return data
