import pytest

from lift import BuildingConfig, VisitRecording


def test_defaults():
    config = BuildingConfig()
    assert config.top_floor == 10
    assert config.visit_recording is VisitRecording.EVERY_FLOOR
    assert config.dispatcher == "load_balance"
    assert config.starvation_ticks == 10


def test_top_floor_follows_bottom_floor():
    config = BuildingConfig(num_floors=6, bottom_floor=-2)
    assert config.top_floor == 3
    assert config.contains(-2)
    assert config.contains(3)
    assert not config.contains(4)


def test_starting_floors_cycle_over_cars():
    config = BuildingConfig(num_cars=5, starting_floors=[1, 4])
    assert [config.starting_floor(car_id) for car_id in range(5)] == [1, 4, 1, 4, 1]
    assert BuildingConfig(bottom_floor=3).starting_floor(2) == 3


def test_visit_recording_accepts_strings():
    config = BuildingConfig(visit_recording="service_stops")
    assert config.visit_recording is VisitRecording.SERVICE_STOPS
    with pytest.raises(ValueError):
        BuildingConfig(visit_recording="sometimes")


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"num_floors": 1}, "two floors"),
        ({"num_cars": 0}, "at least one car"),
        ({"starting_floors": [11]}, "Starting floor 11"),
        ({"starvation_ticks": 0}, "starvation_ticks"),
    ],
)
def test_validate_rejects_bad_buildings(overrides, message):
    with pytest.raises(ValueError, match=message):
        BuildingConfig(**overrides).validate()


def test_from_dict_fills_defaults_and_validates():
    config = BuildingConfig.from_dict({"num_cars": 3, "visit_recording": "service_stops"})
    assert config.num_cars == 3
    assert config.num_floors == 10
    assert config.visit_recording is VisitRecording.SERVICE_STOPS

    with pytest.raises(ValueError):
        BuildingConfig.from_dict({"num_floors": 5, "starting_floors": [6]})


def test_to_dict_round_trips_through_from_dict():
    config = BuildingConfig(num_floors=8, num_cars=2, starting_floors=[1, 8], starvation_ticks=None)
    data = config.to_dict()
    assert data["visit_recording"] == "every_floor"
    assert BuildingConfig.from_dict(data) == config
