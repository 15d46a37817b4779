from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from lift.call import Call
    from lift.car import CarState


class Direction(str, Enum):
    """Travel direction of a car, or the direction a rider asked for."""

    UP = "up"
    DOWN = "down"
    IDLE = "idle"

    @property
    def step(self) -> int:
        """Return +1 for up, -1 for down and 0 when idle."""
        if self is Direction.UP:
            return 1
        if self is Direction.DOWN:
            return -1
        return 0

    @classmethod
    def parse(cls, value: object) -> "Direction":
        if isinstance(value, Direction):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if value > 0:
                return cls.UP
            if value < 0:
                return cls.DOWN
            return cls.IDLE
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Unknown direction {value!r}. Expected one of: up, down, idle")


class DirectionPolicy(Protocol):
    """Decides which way a car travels on the current tick."""

    def next_direction(self, state: "CarState", bottom_floor: int, top_floor: int) -> Direction:
        """
        Return the direction for ``state`` without mutating it.

        Called once per car per tick, after riders have left and boarded
        at the current floor.
        """
        ...


class Dispatcher(Protocol):
    """Strategy interface for routing queued hall calls to cars."""

    def assign(
        self,
        call: "Call",
        cars: Sequence["CarState"],
        current_time: int,
    ) -> Optional[int]:
        """
        Return the id of the car that should take ``call``.

        ``cars`` is the roster in creation order. Returning ``None`` leaves
        the call queued so it is offered again on the next tick.
        """
        ...
