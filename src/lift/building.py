from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, List, Optional

from dispatch import Dispatcher, get_dispatcher

from .call import Call
from .car import Car, EventSink
from .config import BuildingConfig

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .simulation import MetricsTracker

logger = logging.getLogger(__name__)


@dataclass
class Building:
    """Roster of cars plus the queue of hall calls no car has accepted yet.

    With a single car there is nothing to dispatch and calls go straight to
    that car. With several cars, calls wait in the queue until the
    dispatcher hands each one to exactly one car.
    """

    config: BuildingConfig = field(default_factory=BuildingConfig)
    listener: Optional[EventSink] = None
    dispatcher: Dispatcher = field(init=False)
    cars: List[Car] = field(init=False)
    queue: List[Call] = field(init=False)

    def __post_init__(self) -> None:
        self.config.validate()
        self.dispatcher = self._build_dispatcher(self.config.dispatcher)
        self.reset()

    @property
    def bottom_floor(self) -> int:
        return self.config.bottom_floor

    @property
    def top_floor(self) -> int:
        return self.config.top_floor

    @property
    def dispatcher_name(self) -> str:
        return self.config.dispatcher

    @property
    def single_car(self) -> bool:
        return len(self.cars) == 1

    def reset(self) -> None:
        self.cars = [
            Car(
                car_id=car_id,
                starting_floor=self.config.starting_floor(car_id),
                bottom_floor=self.bottom_floor,
                top_floor=self.top_floor,
                visit_recording=self.config.visit_recording,
                emit=self._emit,
            )
            for car_id in range(self.config.num_cars)
        ]
        self.queue = []
        self._next_sequence = 0

    def set_dispatcher(self, name: str) -> None:
        self.dispatcher = self._build_dispatcher(name)
        self.config.dispatcher = name

    def get_car(self, car_id: int) -> Optional[Car]:
        for car in self.cars:
            if car.car_id == car_id:
                return car
        return None

    def place_call(self, call: Call, current_time: int) -> Call:
        """Validate a hall call and hand it to the car or the dispatch queue.

        Returns the accepted call, stamped with its arrival order.
        """
        call.validate(self.bottom_floor, self.top_floor)
        call = replace(call, sequence=self._next_sequence)
        self._next_sequence += 1
        self._emit("call-received", {"time": current_time, "call": call.to_dict()})

        if self.single_car:
            self.cars[0].state.add_call(call)
        else:
            self.queue.append(call)
            self.queue.sort(key=lambda queued: queued.order_key)
        return call

    def dispatch(self, current_time: int) -> None:
        states = [car.state for car in self.cars]
        for call in list(self.queue):
            car_id = self.dispatcher.assign(call, states, current_time)
            if car_id is None:
                logger.debug("No car available for call %s at time %s", call, current_time)
                continue
            car = self.get_car(car_id)
            if car is None:
                continue
            self.queue.remove(call)
            car.assign(call, current_time)

    def step(self, current_time: int, metrics: Optional["MetricsTracker"] = None) -> None:
        if not self.single_car:
            self.dispatch(current_time)
        for car in self.cars:
            car.tick(current_time, metrics)

    def is_idle(self) -> bool:
        return not self.queue and not any(car.state.has_requests() for car in self.cars)

    def oldest_queued_age(self, current_time: int) -> int:
        if not self.queue:
            return 0
        return current_time - min(call.requested_at for call in self.queue)

    def snapshot(self) -> dict:
        return {
            "bottom_floor": self.bottom_floor,
            "top_floor": self.top_floor,
            "queue": [call.to_dict() for call in self.queue],
            "cars": [
                {**car.state.snapshot(), "visited": car.visited()}
                for car in self.cars
            ],
        }

    def _build_dispatcher(self, name: str) -> Dispatcher:
        return get_dispatcher(name, starvation_ticks=self.config.starvation_ticks)

    def _emit(self, event: str, payload: dict) -> None:
        if self.listener is not None:
            self.listener(event, payload)
