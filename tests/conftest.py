from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from lift import BuildingConfig, Call, Simulation

CallSpec = Tuple[int, str, int]


def make_simulation(
    schedule: Dict[int, Sequence[CallSpec]],
    starting_floors: Optional[List[int]] = None,
    num_cars: int = 1,
    **config,
) -> Simulation:
    building_cfg = BuildingConfig(
        num_floors=10,
        bottom_floor=1,
        num_cars=num_cars,
        starting_floors=starting_floors,
        **config,
    )
    calls = {
        tick: [Call(origin, direction, destination) for origin, direction, destination in specs]
        for tick, specs in schedule.items()
    }
    return Simulation.from_config(building_cfg, schedule=calls)


@pytest.fixture
def events():
    """Collects ``(event, payload)`` pairs from a simulation or car."""
    recorded: List[Tuple[str, dict]] = []

    def sink(event: str, payload: dict) -> None:
        recorded.append((event, payload))

    sink.recorded = recorded
    return sink


@pytest.fixture
def build_simulation():
    return make_simulation
