import json

import pytest

from lift import (
    Building,
    BuildingConfig,
    Call,
    Direction,
    InvalidCallDirection,
    InvalidFloorRequest,
)


def test_single_car_takes_calls_directly():
    building = Building(BuildingConfig(num_cars=1))
    accepted = building.place_call(Call(4, Direction.UP, 7), current_time=0)

    assert building.queue == []
    assert building.cars[0].state.pending_calls == [accepted]


def test_multi_car_calls_wait_for_dispatch():
    building = Building(BuildingConfig(num_cars=2))
    accepted = building.place_call(Call(4, Direction.UP, 7), current_time=0)

    assert building.queue == [accepted]
    building.dispatch(current_time=0)
    assert building.queue == []
    assert building.cars[0].state.pending_calls == [accepted]
    assert building.cars[0].direction is Direction.UP


@pytest.mark.parametrize("origin, destination", [(0, 5), (5, 11), (-3, 2), (12, 12)])
def test_out_of_range_calls_are_rejected(origin, destination):
    building = Building(BuildingConfig(num_cars=2))
    with pytest.raises(InvalidFloorRequest):
        building.place_call(Call(origin, Direction.UP, destination), current_time=0)
    assert building.queue == []


def test_invalid_floor_request_is_a_value_error():
    building = Building(BuildingConfig(num_floors=5, bottom_floor=0))
    with pytest.raises(ValueError, match=r"\[0, 4\]"):
        building.place_call(Call(2, Direction.DOWN, 5), current_time=0)


def test_idle_direction_only_for_same_floor_requests():
    building = Building()
    building.place_call(Call(5, Direction.IDLE, 5), current_time=0)
    with pytest.raises(InvalidCallDirection):
        building.place_call(Call(5, Direction.IDLE, 6), current_time=0)


def test_calls_are_stamped_in_arrival_order():
    building = Building(BuildingConfig(num_cars=3))
    first = building.place_call(Call(2, Direction.UP, 5, requested_at=4), current_time=4)
    second = building.place_call(Call(3, Direction.UP, 5, requested_at=4), current_time=4)
    earlier = building.place_call(Call(9, Direction.DOWN, 1, requested_at=1), current_time=4)

    assert (first.sequence, second.sequence, earlier.sequence) == (0, 1, 2)
    assert building.queue == [earlier, first, second]


def test_unknown_dispatcher_is_rejected():
    with pytest.raises(ValueError):
        Building(BuildingConfig(num_cars=2, dispatcher="round_robin"))
    building = Building(BuildingConfig(num_cars=2))
    building.set_dispatcher("load_ranked")
    assert building.dispatcher_name == "load_ranked"


def test_each_call_is_assigned_to_exactly_one_car():
    building = Building(BuildingConfig(num_cars=3, starting_floors=[1, 5, 10]))
    placed = [
        building.place_call(Call(origin, Direction.UP, 10), current_time=0)
        for origin in (2, 2, 3, 4, 4, 6)
    ]
    building.dispatch(current_time=0)

    holders = {
        id(call): [car.car_id for car in building.cars if call in car.state.pending_calls]
        for call in placed
    }
    assert all(len(cars) == 1 for cars in holders.values())
    # Calls for the same hall button end up in the same car.
    assert holders[id(placed[0])] == holders[id(placed[1])]
    assert holders[id(placed[3])] == holders[id(placed[4])]


def test_reset_restores_starting_state():
    building = Building(BuildingConfig(num_cars=2, starting_floors=[3, 8]))
    building.place_call(Call(4, Direction.UP, 7), current_time=0)
    building.step(current_time=0)

    building.reset()

    assert building.queue == []
    assert [car.floor for car in building.cars] == [3, 8]
    assert all(not car.state.has_requests() for car in building.cars)
    assert building.place_call(Call(4, Direction.UP, 7), current_time=0).sequence == 0


def test_snapshot_is_json_serialisable():
    building = Building(BuildingConfig(num_cars=2))
    building.place_call(Call(4, Direction.UP, 7), current_time=0)
    building.step(current_time=0)
    data = json.loads(json.dumps(building.snapshot()))
    assert data["cars"][0]["pending_calls"][0]["origin_floor"] == 4
    assert data["cars"][0]["direction"] == "up"
