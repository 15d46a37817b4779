from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, List, Optional

from dispatch.interface import Direction, DirectionPolicy
from dispatch.scan import ScanDirectionPolicy

from .call import Call
from .config import VisitRecording

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .simulation import MetricsTracker

logger = logging.getLogger(__name__)

EventSink = Callable[[str, dict], None]


class CarCallSet:
    """Destination floors pressed inside one car, kept in the order pressed."""

    def __init__(self, floors: Iterable[int] = ()) -> None:
        self._floors: List[int] = []
        for floor in floors:
            self.add(floor)

    def add(self, floor: int) -> bool:
        if floor in self._floors:
            return False
        self._floors.append(floor)
        return True

    def discard(self, floor: int) -> bool:
        if floor not in self._floors:
            return False
        self._floors.remove(floor)
        return True

    def clear(self) -> None:
        self._floors.clear()

    def __contains__(self, floor: object) -> bool:
        return floor in self._floors

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._floors))

    def __len__(self) -> int:
        return len(self._floors)

    def __repr__(self) -> str:
        return f"CarCallSet({self._floors!r})"


@dataclass
class CarState:
    """Everything one car knows about its position and outstanding work."""

    car_id: int
    floor: int
    direction: Direction = Direction.IDLE
    pending_calls: List[Call] = field(default_factory=list)
    car_calls: CarCallSet = field(default_factory=CarCallSet)
    floors_visited: List[int] = field(default_factory=list)
    stops: List[int] = field(default_factory=list)

    def has_requests(self) -> bool:
        return bool(self.pending_calls) or len(self.car_calls) > 0

    def total_requests(self) -> int:
        return len(self.pending_calls) + len(self.car_calls)

    def add_call(self, call: Call) -> None:
        self.pending_calls.append(call)
        self.pending_calls.sort(key=lambda pending: pending.order_key)

    def has_matching_call(self, call: Call) -> bool:
        return any(
            pending.origin_floor == call.origin_floor and pending.direction is call.direction
            for pending in self.pending_calls
        )

    def snapshot(self) -> dict:
        return {
            "id": self.car_id,
            "floor": self.floor,
            "direction": self.direction.value,
            "pending_calls": [call.to_dict() for call in self.pending_calls],
            "car_calls": list(self.car_calls),
        }


def _record_floor(floors: List[int], floor: int) -> None:
    if not floors or floors[-1] != floor:
        floors.append(floor)


class Car:
    """A single elevator car advanced one tick at a time.

    Each tick the car records where it is, lets riders off, lets waiting
    riders on (who press their destinations straight away), asks the
    direction policy where to go, and moves at most one floor.
    """

    def __init__(
        self,
        car_id: int,
        starting_floor: int,
        bottom_floor: int,
        top_floor: int,
        policy: Optional[DirectionPolicy] = None,
        visit_recording: VisitRecording = VisitRecording.EVERY_FLOOR,
        emit: Optional[EventSink] = None,
    ) -> None:
        self.state = CarState(car_id=car_id, floor=starting_floor)
        self.bottom_floor = bottom_floor
        self.top_floor = top_floor
        self.policy: DirectionPolicy = policy or ScanDirectionPolicy()
        self.visit_recording = VisitRecording(visit_recording)
        self._emit_event = emit

    @property
    def car_id(self) -> int:
        return self.state.car_id

    @property
    def floor(self) -> int:
        return self.state.floor

    @property
    def direction(self) -> Direction:
        return self.state.direction

    def visited(self) -> List[int]:
        if self.visit_recording is VisitRecording.SERVICE_STOPS:
            return list(self.state.stops)
        return list(self.state.floors_visited)

    def assign(self, call: Call, current_time: int) -> None:
        """Accept a call from the dispatcher; an idle car sets off at once."""
        self.state.add_call(call)
        self._emit(
            "call-assigned",
            {"time": current_time, "car_id": self.car_id, "call": call.to_dict()},
        )
        logger.info("Car %s was assigned call %s", self.car_id, call)
        if self.state.direction is Direction.IDLE:
            self.update_direction()

    def press_button(self, floor: int, current_time: int) -> None:
        if self.state.car_calls.add(floor):
            self._emit(
                "car-call-pressed",
                {"time": current_time, "car_id": self.car_id, "floor": floor},
            )

    def update_direction(self) -> Direction:
        self.state.direction = self.policy.next_direction(
            self.state, self.bottom_floor, self.top_floor
        )
        return self.state.direction

    def tick(self, current_time: int, metrics: Optional["MetricsTracker"] = None) -> None:
        _record_floor(self.state.floors_visited, self.state.floor)

        self._let_passengers_exit(current_time, metrics)
        self._let_passengers_enter(current_time, metrics)
        # Riders whose destination is this floor leave in the same tick.
        self._let_passengers_exit(current_time, metrics)

        self.update_direction()
        self._emit(
            "status",
            {
                "time": current_time,
                "car_id": self.car_id,
                "floor": self.state.floor,
                "direction": self.state.direction.value,
            },
        )
        logger.debug(
            "Time %s car %s at floor %s heading %s",
            current_time,
            self.car_id,
            self.state.floor,
            self.state.direction.value,
        )

        if self.state.direction is not Direction.IDLE:
            self._move()

    def _let_passengers_exit(self, current_time: int, metrics: Optional["MetricsTracker"]) -> None:
        floor = self.state.floor
        if not self.state.car_calls.discard(floor):
            return
        _record_floor(self.state.stops, floor)
        if metrics is not None:
            metrics.record_alighting()
        self._emit("passenger-exit", {"time": current_time, "car_id": self.car_id, "floor": floor})

    def _let_passengers_enter(self, current_time: int, metrics: Optional["MetricsTracker"]) -> None:
        floor = self.state.floor
        boarding = [call for call in self.state.pending_calls if call.origin_floor == floor]
        if not boarding:
            return
        self.state.pending_calls = [
            call for call in self.state.pending_calls if call.origin_floor != floor
        ]
        _record_floor(self.state.stops, floor)
        for call in boarding:
            if metrics is not None:
                metrics.record_boarding(call, current_time)
            self._emit(
                "passenger-enter",
                {"time": current_time, "car_id": self.car_id, "floor": floor, "call": call.to_dict()},
            )
            self.press_button(call.destination_floor, current_time)

    def _move(self) -> None:
        target = self.state.floor + self.state.direction.step
        self.state.floor = max(self.bottom_floor, min(self.top_floor, target))

    def _emit(self, event: str, payload: dict) -> None:
        if self._emit_event is not None:
            self._emit_event(event, payload)
