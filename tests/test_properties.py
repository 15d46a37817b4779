"""Invariants that must hold on every tick of a randomly loaded building."""

import random

import pytest

from lift import BuildingConfig, Call, Simulation


def random_schedule(rng, bottom_floor, top_floor, ticks, calls):
    schedule = {}
    for _ in range(calls):
        origin = rng.randint(bottom_floor, top_floor)
        destination = rng.choice([f for f in range(bottom_floor, top_floor + 1) if f != origin])
        direction = "up" if destination > origin else "down"
        schedule.setdefault(rng.randrange(ticks), []).append(Call(origin, direction, destination))
    return schedule


@pytest.mark.parametrize("seed", [3, 17, 2024])
@pytest.mark.parametrize("dispatcher", ["load_balance", "load_ranked"])
def test_random_load_keeps_cars_honest(seed, dispatcher):
    rng = random.Random(seed)
    config = BuildingConfig(
        num_floors=12,
        num_cars=3,
        starting_floors=[1, 6, 12],
        dispatcher=dispatcher,
    )
    schedule = random_schedule(rng, config.bottom_floor, config.top_floor, ticks=40, calls=60)
    total_calls = sum(len(calls) for calls in schedule.values())
    simulation = Simulation.from_config(config, schedule=schedule)
    building = simulation.building
    last_status = {}

    def check_status(payload):
        car = building.get_car(payload["car_id"])
        floor, direction = payload["floor"], payload["direction"]
        assert config.bottom_floor <= floor <= config.top_floor
        if car.state.has_requests():
            assert not (floor == config.top_floor and direction == "up")
            assert not (floor == config.bottom_floor and direction == "down")
        assert floor not in car.state.car_calls
        assert all(call.origin_floor != floor for call in car.state.pending_calls)
        previous = last_status.get(car.car_id)
        if previous is not None and previous["direction"] != "idle":
            step = 1 if previous["direction"] == "up" else -1
            assert floor == previous["floor"] + step
        elif previous is not None:
            assert floor == previous["floor"]
        last_status[car.car_id] = payload

    simulation.on_event("status", check_status)

    for _ in range(400):
        simulation.step()
        held = [id(call) for call in building.queue]
        for car in building.cars:
            held.extend(id(call) for call in car.state.pending_calls)
        assert len(held) == len(set(held))
        if simulation.is_idle():
            break

    assert simulation.is_idle()
    assert simulation.metrics.boardings == total_calls
