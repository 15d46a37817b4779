from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .interface import Direction
from .utils import direction_towards, has_request_beyond, nearest_floor

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from lift.car import CarState

logger = logging.getLogger(__name__)


class ScanDirectionPolicy:
    """Implements the elevator SCAN algorithm for a single car.

    The car sweeps in one direction while any request lies ahead of it. It is
    forced off the top and bottom floors whenever anything is outstanding.
    Once nothing lies ahead, an idle car heads for the oldest hall call, or,
    with no hall calls left, for the nearest floor pressed inside the car.
    """

    def next_direction(self, state: "CarState", bottom_floor: int, top_floor: int) -> Direction:
        if state.has_requests():
            if state.floor >= top_floor:
                return Direction.DOWN
            if state.floor <= bottom_floor:
                return Direction.UP

        if state.direction is not Direction.IDLE and has_request_beyond(state, state.direction):
            return state.direction

        return self._idle_direction(state)

    def _idle_direction(self, state: "CarState") -> Direction:
        if state.pending_calls:
            oldest = state.pending_calls[0]
            return direction_towards(state.floor, oldest.origin_floor)

        # Ties go to the destination pressed first.
        target = nearest_floor(state.car_calls, state.floor)
        if target is None:
            return Direction.IDLE
        logger.debug("Car %s heading for nearest car call %s", state.car_id, target)
        return direction_towards(state.floor, target)
