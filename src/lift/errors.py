from __future__ import annotations


class LiftError(ValueError):
    """Base class for calls the building refuses to accept."""


class InvalidFloorRequest(LiftError):
    """A call names a floor the building does not have."""

    def __init__(self, floor: int, bottom_floor: int, top_floor: int) -> None:
        super().__init__(f"Floor {floor} is outside the served range [{bottom_floor}, {top_floor}]")
        self.floor = floor
        self.bottom_floor = bottom_floor
        self.top_floor = top_floor


class InvalidCallDirection(LiftError):
    """A hall call without a travel direction that still goes somewhere."""
