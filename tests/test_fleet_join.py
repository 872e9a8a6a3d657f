from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from pyreefer.ingestion.fleet import is_time_ordered, join, latest_positions
from pyreefer.models.device import Device
from pyreefer.models.position import Position


def _device(device_id: int = 1, **kwargs: object) -> Device:
    payload: dict[str, object] = {
        "id": device_id,
        "name": f"ABC-{device_id:04d}",
        "uniqueId": f"35{device_id:013d}",
        "status": "online",
        "lastUpdate": "2025-09-30T18:00:00.000+00:00",
    }
    payload.update(kwargs)
    return Device.model_validate(payload)


def _position(device_id: int = 1, fix_time: str = "2025-09-30T18:10:00.000+00:00", **attributes: object) -> Position:
    return Position.model_validate({"deviceId": device_id, "fixTime": fix_time, "attributes": attributes})


class TestModels:
    def test_device_camel_case_mapping(self) -> None:
        device = _device(7, attributes={"door": 1})
        assert device.unique_id == "350000000000007"
        assert device.last_update == datetime(2025, 9, 30, 18, 0, tzinfo=UTC)
        assert device.attributes == {"door": 1}

    def test_device_label_falls_back_to_unique_id(self) -> None:
        assert _device(3, name="").label == "350000000000003"

    def test_non_dict_attributes_become_empty(self) -> None:
        assert _device(attributes="broken").attributes == {}
        assert _device(attributes=None).attributes == {}

    def test_position_timestamp_fallback(self) -> None:
        position = Position.model_validate({"deviceId": 1, "serverTime": "2025-09-30T18:10:00Z"})
        assert position.timestamp == datetime(2025, 9, 30, 18, 10, tzinfo=UTC)


class TestJoin:
    def test_single_device_with_position(self) -> None:
        items = join([_device(1)], [_position(1, temp1=-12)])

        assert len(items) == 1
        item = items[0]
        assert item.id == 1
        assert item.label == "ABC-0001"
        assert item.temp_c == -12.0
        assert item.door == 0
        assert item.setpoint == -15.0
        assert item.last_seen == datetime(2025, 9, 30, 18, 10, tzinfo=UTC)

    def test_device_without_position_uses_device_attributes(self) -> None:
        device = _device(1, attributes={"temp1": "-9.5", "door": 1, "setpoint": -18})
        items = join([device], [])

        item = items[0]
        assert item.temp_c == -9.5
        assert item.door == 1
        assert item.setpoint == -18.0
        assert item.last_seen == device.last_update

    def test_device_without_any_temperature_is_unresolved(self) -> None:
        items = join([_device(1)], [])
        assert items[0].temp_c is None
        assert not items[0].has_temperature

    def test_device_attributes_fill_door_and_setpoint(self) -> None:
        device = _device(1, attributes={"io2": 1, "targetTemp": -20})
        items = join([device], [_position(1, temp1=-15)])
        assert items[0].door == 1
        assert items[0].setpoint == -20.0

    def test_one_item_per_device_in_device_order(self) -> None:
        devices = [_device(3), _device(1), _device(2)]
        positions = [_position(1, temp1=-10), _position(2, temp1=-11), _position(3, temp1=-12)]
        items = join(devices, positions)
        assert [item.id for item in items] == [3, 1, 2]
        assert [item.temp_c for item in items] == [-12.0, -10.0, -11.0]

    def test_positions_for_unknown_devices_are_ignored(self) -> None:
        items = join([_device(1)], [_position(99, temp1=5)])
        assert len(items) == 1
        assert items[0].temp_c is None

    def test_last_position_in_feed_wins(self) -> None:
        positions = [
            _position(1, "2025-09-30T18:00:00Z", temp1=-10),
            _position(1, "2025-09-30T18:05:00Z", temp1=-11),
        ]
        assert join([_device(1)], positions)[0].temp_c == -11.0

    def test_malformed_values_never_raise(self) -> None:
        items = join([_device(1, attributes={"door": "??"})], [_position(1, temp1="n/a", setpoint="x")])
        assert items[0].temp_c is None
        assert items[0].door == 0
        assert items[0].setpoint == -15.0

    def test_join_is_idempotent(self) -> None:
        devices = [_device(1), _device(2)]
        positions = [_position(1, temp1=-12), _position(2, bleTemp1=3)]
        assert join(devices, positions) == join(devices, positions)


class TestOrdering:
    def test_latest_positions_last_write_wins(self) -> None:
        first = _position(1, "2025-09-30T18:10:00Z", temp1=-10)
        second = _position(1, "2025-09-30T18:00:00Z", temp1=-20)
        assert latest_positions([first, second])[1] is second

    def test_latest_positions_tie_goes_to_later_entry(self) -> None:
        first = _position(1, "2025-09-30T18:10:00Z", temp1=-10)
        second = _position(1, "2025-09-30T18:10:00Z", temp1=-11)
        assert latest_positions([first, second])[1] is second
        assert join([_device(1)], [first, second])[0].temp_c == -11.0

    def test_is_time_ordered(self) -> None:
        ordered = [_position(1, "2025-09-30T18:00:00Z"), _position(1, "2025-09-30T18:05:00Z")]
        assert is_time_ordered(ordered)
        assert not is_time_ordered(list(reversed(ordered)))

    def test_interleaved_devices_are_checked_per_device(self) -> None:
        positions = [
            _position(1, "2025-09-30T18:10:00Z"),
            _position(2, "2025-09-30T18:00:00Z"),
            _position(1, "2025-09-30T18:20:00Z"),
        ]
        assert is_time_ordered(positions)

    def test_unordered_feed_is_logged_not_reordered(self, caplog: pytest.LogCaptureFixture) -> None:
        positions = [
            _position(1, "2025-09-30T18:10:00Z", temp1=-10),
            _position(1, "2025-09-30T18:00:00Z", temp1=-20),
        ]
        with caplog.at_level(logging.WARNING, logger="pyreefer.ingestion.fleet"):
            items = join([_device(1)], positions)

        assert items[0].temp_c == -20.0
        assert "not time-ordered" in caplog.text
