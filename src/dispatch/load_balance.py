from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from .interface import Direction

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from lift.call import Call
    from lift.car import CarState

logger = logging.getLogger(__name__)


class LoadBalancingDispatcher:
    """Sends each hall call to the least busy car that can pick it up on its way.

    A car that already holds a call for the same hall button gets the new
    call outright, so one button never brings two cars. Otherwise only cars
    that are idle, or already travelling the rider's way without having
    passed the rider's floor, are considered, and the one with the fewest
    outstanding requests wins. Ties go to the car created first.

    Calls that have waited ``starvation_ticks`` ticks without a suitable car
    are offered to every car instead. ``None`` turns this off.
    """

    def __init__(self, starvation_ticks: Optional[int] = 10) -> None:
        if starvation_ticks is not None and starvation_ticks < 1:
            raise ValueError("starvation_ticks must be at least 1 or None")
        self.starvation_ticks = starvation_ticks

    def assign(
        self,
        call: "Call",
        cars: Sequence["CarState"],
        current_time: int,
    ) -> Optional[int]:
        for car in cars:
            if car.has_matching_call(call):
                logger.debug("Call %s merged into car %s", call, car.car_id)
                return car.car_id

        candidates = [car for car in cars if self.is_suitable(car, call)]
        if not candidates:
            candidates = self._starvation_candidates(call, cars, current_time)
        chosen = self._least_loaded(candidates)
        return chosen.car_id if chosen is not None else None

    def is_suitable(self, car: "CarState", call: "Call") -> bool:
        if car.direction is Direction.IDLE:
            return True
        if car.direction is not call.direction:
            return False
        if call.direction is Direction.UP:
            return car.floor <= call.origin_floor
        return car.floor >= call.origin_floor

    def is_starving(self, call: "Call", current_time: int) -> bool:
        if self.starvation_ticks is None:
            return False
        return current_time - call.requested_at >= self.starvation_ticks

    def _starvation_candidates(
        self, call: "Call", cars: Sequence["CarState"], current_time: int
    ) -> List["CarState"]:
        if not self.is_starving(call, current_time):
            return []
        logger.warning(
            "Call %s waited %d ticks without a suitable car; offering it to every car",
            call,
            current_time - call.requested_at,
        )
        return list(cars)

    @staticmethod
    def _least_loaded(cars: Sequence["CarState"]) -> Optional["CarState"]:
        if not cars:
            return None
        # min() keeps the first of equal keys, so roster order breaks ties.
        return min(cars, key=lambda car: car.total_requests())


class LoadRankedDispatcher(LoadBalancingDispatcher):
    """Ranks suitable cars by load first and only then looks for a shared hall button.

    A car holding a call for the same button wins only among the least loaded
    suitable cars; an unsuitable or busier car holding one is passed over.
    """

    def assign(
        self,
        call: "Call",
        cars: Sequence["CarState"],
        current_time: int,
    ) -> Optional[int]:
        candidates = [car for car in cars if self.is_suitable(car, call)]
        if not candidates:
            candidates = self._starvation_candidates(call, cars, current_time)
        if not candidates:
            return None
        chosen = min(
            candidates,
            key=lambda car: (car.total_requests(), not car.has_matching_call(call)),
        )
        return chosen.car_id
