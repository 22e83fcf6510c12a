from __future__ import annotations

import pytest

from acc_director.core.cars import CarLocation, CarTable, DriverInfo
from acc_director.core.track import Track
from acc_director.errors import MissingTrackError, UnknownCarError

from tests.helpers import car_update, entry


def test_entry_list_creates_and_refreshes_cars() -> None:
    table = CarTable()

    table.upsert_entry(entry(7, race_number=88, short_name="VER"))
    table.apply_realtime(car_update(7, 0.42, position=3))
    table.upsert_entry(entry(7, race_number=88, short_name="LEC"))

    car = table[7]
    assert car.label == "#88 LEC"
    assert car.spline_position == 0.42
    assert car.position == 3
    assert len(table) == 1


def test_realtime_update_for_unknown_car_raises() -> None:
    table = CarTable()

    with pytest.raises(UnknownCarError) as excinfo:
        table.apply_realtime(car_update(3, 0.1))

    assert excinfo.value.car_index == 3
    assert str(excinfo.value) == "Unknown car index 3"
    assert 3 not in table


def test_labels_fall_back_to_number_and_index() -> None:
    table = CarTable()
    table.upsert_entry(entry(1, race_number=12))
    table.upsert_entry(entry(2))

    assert table[1].label == "#12"
    assert table[2].label == "car 2"
    assert table[2].driver is None


def test_driver_uses_current_driver_index() -> None:
    table = CarTable()
    car = table.upsert_entry(entry(1))
    car.drivers = (DriverInfo(last_name="Rossi"), DriverInfo(short_name="VAL"))
    car.current_driver_index = 1

    assert car.driver == DriverInfo(short_name="VAL")


def test_mark_focused_flags_a_single_car() -> None:
    table = CarTable()
    for index in (1, 2, 3):
        table.upsert_entry(entry(index))

    table.mark_focused(2)

    assert [car.focused for car in table] == [False, True, False]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("pitlane", CarLocation.PITLANE), ("Pit Entry", CarLocation.PIT_ENTRY), (4, CarLocation.PIT_EXIT)],
)
def test_location_coercion(raw, expected: CarLocation) -> None:
    assert CarLocation.coerce(raw) is expected


def test_track_length_requirement() -> None:
    assert Track("spa", "Spa", 7004.0).require_length() == 7004.0
    with pytest.raises(MissingTrackError):
        Track("unknown", "", 0.0).require_length()


def test_track_cameras_are_frozen() -> None:
    track = Track("spa", "Spa", 7004.0).with_broadcast_options({"set1": ["cam1"]}, None)

    assert track.has_camera("set1", "cam1")
    assert not track.has_camera("set1", "cam2")
    with pytest.raises(TypeError):
        track.camera_sets["set2"] = ("cam3",)  # type: ignore[index]
