from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from .building import Building
from .call import Call
from .config import BuildingConfig

logger = logging.getLogger(__name__)

EVENTS = (
    "call-received",
    "call-assigned",
    "car-call-pressed",
    "passenger-exit",
    "passenger-enter",
    "status",
    "metrics",
)


@dataclass
class MetricsSnapshot:
    time_step: int
    average_wait: float
    wait_p95: float
    max_wait: int
    boardings: int
    alightings: int
    queued_calls: int
    oldest_queued_age: int
    max_queued_age: int


class MetricsTracker:
    def __init__(self) -> None:
        self.wait_times: List[int] = []
        self.boardings: int = 0
        self.alightings: int = 0
        self.queued_calls: int = 0
        self.oldest_queued_age: int = 0
        self.max_queued_age: int = 0

    def record_boarding(self, call: Call, time_step: int) -> None:
        self.wait_times.append(time_step - call.requested_at)
        self.boardings += 1

    def record_alighting(self) -> None:
        self.alightings += 1

    def record_queue(self, building: Building, time_step: int) -> None:
        self.queued_calls = len(building.queue)
        self.oldest_queued_age = building.oldest_queued_age(time_step)
        self.max_queued_age = max(self.max_queued_age, self.oldest_queued_age)

    def _average(self, values: List[int]) -> float:
        if not values:
            return 0.0
        return sum(values) / len(values)

    def _percentile(self, values: List[int], percentile: float) -> float:
        if not values:
            return 0.0
        sorted_vals = sorted(values)
        k = (len(sorted_vals) - 1) * percentile
        f = math.floor(k)
        c = math.ceil(k)
        if f == c:
            return float(sorted_vals[int(k)])
        d0 = sorted_vals[int(f)] * (c - k)
        d1 = sorted_vals[int(c)] * (k - f)
        return float(d0 + d1)

    def snapshot(self, time_step: int) -> MetricsSnapshot:
        return MetricsSnapshot(
            time_step=time_step,
            average_wait=self._average(self.wait_times),
            wait_p95=self._percentile(self.wait_times, 0.95),
            max_wait=max(self.wait_times, default=0),
            boardings=self.boardings,
            alightings=self.alightings,
            queued_calls=self.queued_calls,
            oldest_queued_age=self.oldest_queued_age,
            max_queued_age=self.max_queued_age,
        )


class Simulation:
    """Fixed-tick driver that feeds scheduled calls into a building.

    ``schedule`` maps a tick to the calls placed on it. Each call is stamped
    with the tick it is injected on, in the order listed.
    """

    def __init__(
        self,
        building: Optional[Building] = None,
        schedule: Optional[Mapping[int, Sequence[Call]]] = None,
        metrics_hook_interval: int = 1,
    ) -> None:
        self.building = building or Building()
        self.building.listener = self._emit
        self.schedule: Dict[int, List[Call]] = {}
        self.current_time: int = 0
        self.metrics = MetricsTracker()
        self.event_hooks: Dict[str, List[Callable[[dict], None]]] = {}
        self.metrics_hook_interval = max(1, metrics_hook_interval)
        for tick, calls in (schedule or {}).items():
            for call in calls:
                self.schedule_call(int(tick), call)

    @classmethod
    def from_config(
        cls,
        config: BuildingConfig,
        schedule: Optional[Mapping[int, Sequence[Call]]] = None,
        metrics_hook_interval: int = 1,
    ) -> "Simulation":
        return cls(Building(config=config), schedule, metrics_hook_interval)

    def run(self, duration: int) -> None:
        for _ in range(duration):
            self.step()

    def run_until_idle(self, max_ticks: int = 1000) -> int:
        """Step until every call is served and nothing else is scheduled.

        Returns the number of ticks stepped; stops after ``max_ticks``.
        """
        ticks = 0
        while ticks < max_ticks and not self.is_idle():
            self.step()
            ticks += 1
        if not self.is_idle():
            logger.warning("Simulation still busy after %d ticks", max_ticks)
        return ticks

    def is_idle(self) -> bool:
        pending_schedule = any(tick >= self.current_time for tick in self.schedule)
        return not pending_schedule and self.building.is_idle()

    def step(self) -> None:
        self._inject_scheduled_calls()
        self.building.step(self.current_time, self.metrics)
        self.metrics.record_queue(self.building, self.current_time)

        if self.current_time % self.metrics_hook_interval == 0:
            self._emit_metrics()

        self.current_time += 1

    def schedule_call(self, tick: int, call: Call) -> None:
        if tick < self.current_time:
            raise ValueError(f"Cannot schedule a call at tick {tick}; current time is {self.current_time}")
        call.validate(self.building.bottom_floor, self.building.top_floor)
        self.schedule.setdefault(tick, []).append(call)

    def place_call(self, call: Call) -> Call:
        """Place a call on the current tick, ahead of the next step."""
        return self.building.place_call(replace(call, requested_at=self.current_time), self.current_time)

    def reset(self, config: Optional[BuildingConfig] = None) -> None:
        if config is not None:
            self.building = Building(config=config, listener=self._emit)
        else:
            self.building.reset()
        self.schedule = {}
        self.current_time = 0
        self.metrics = MetricsTracker()

    def floors_visited(self, car_id: int = 0) -> List[int]:
        car = self.building.get_car(car_id)
        if car is None:
            raise KeyError(f"No car with id {car_id}")
        return car.visited()

    def on_event(self, event: str, callback: Callable[[dict], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def _inject_scheduled_calls(self) -> None:
        for call in self.schedule.pop(self.current_time, []):
            self.place_call(call)

    def _emit_metrics(self) -> None:
        snapshot = self.metrics.snapshot(self.current_time)
        self._emit("metrics", {"time": self.current_time, "metrics": snapshot})

    def _emit(self, event: str, payload: dict) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
