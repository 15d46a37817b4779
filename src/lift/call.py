from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from dispatch.interface import Direction

from .errors import InvalidCallDirection, InvalidFloorRequest

__all__ = ["Call", "Direction"]


@dataclass(frozen=True, eq=False)
class Call:
    """A rider's hall-button press together with the floor they want.

    Calls compare by identity: two riders asking for the same trip are two
    calls. ``requested_at`` is the tick the call was placed and ``sequence``
    its arrival order, which breaks ties between calls of the same tick.
    """

    origin_floor: int
    direction: Direction
    destination_floor: int
    requested_at: int = 0
    sequence: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", Direction.parse(self.direction))

    @property
    def order_key(self) -> Tuple[int, int]:
        return (self.requested_at, self.sequence)

    @property
    def is_degenerate(self) -> bool:
        return self.origin_floor == self.destination_floor

    def validate(self, bottom_floor: int, top_floor: int) -> None:
        for floor in (self.origin_floor, self.destination_floor):
            if not bottom_floor <= floor <= top_floor:
                raise InvalidFloorRequest(floor, bottom_floor, top_floor)
        if self.direction is Direction.IDLE and not self.is_degenerate:
            raise InvalidCallDirection(
                f"Call from floor {self.origin_floor} to {self.destination_floor} needs an up or down direction"
            )

    def to_dict(self) -> dict:
        return {
            "origin_floor": self.origin_floor,
            "direction": self.direction.value,
            "destination_floor": self.destination_floor,
            "requested_at": self.requested_at,
            "sequence": self.sequence,
        }

    def __str__(self) -> str:
        return f"{self.origin_floor}{self.direction.value.upper()}->{self.destination_floor}@{self.requested_at}"
