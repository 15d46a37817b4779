from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from .interface import Direction

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from lift.car import CarState


def direction_towards(current_floor: int, target_floor: int) -> Direction:
    if target_floor > current_floor:
        return Direction.UP
    if target_floor < current_floor:
        return Direction.DOWN
    return Direction.IDLE


def requested_floors(state: "CarState") -> Iterator[int]:
    """Yield every floor the car still has to stop at, hall calls first."""

    for call in state.pending_calls:
        yield call.origin_floor
    yield from state.car_calls


def has_request_beyond(state: "CarState", direction: Direction) -> bool:
    """True when some request lies strictly ahead of the car in ``direction``."""

    if direction is Direction.UP:
        return any(floor > state.floor for floor in requested_floors(state))
    if direction is Direction.DOWN:
        return any(floor < state.floor for floor in requested_floors(state))
    return False


def nearest_floor(floors: Iterable[int], current_floor: int) -> Optional[int]:
    """Closest floor to ``current_floor``; on a tie the floor seen first wins."""

    best_floor: Optional[int] = None
    best_distance = 0
    for floor in floors:
        distance = abs(floor - current_floor)
        if best_floor is None or distance < best_distance:
            best_floor = floor
            best_distance = distance
    return best_floor
