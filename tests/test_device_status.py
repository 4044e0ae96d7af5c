"""Tests for the device status model."""

import dataclasses

import pytest

from nec_projector import DeviceStatus, DeviceState, StatusDelta, OperationStatus


def test_defaults_are_conservative():
    status = DeviceStatus()
    assert not status.power_on
    assert not status.cooling
    assert not status.power_transition
    assert status.operation_status == OperationStatus.STANDBY
    assert not status.picture_mute
    assert not status.picture_freeze
    assert not status.sound_mute
    assert not status.onscreen_mute
    assert status.is_stable


def test_operation_status_strings():
    assert str(OperationStatus.STANDBY) == "Standby (Sleep)"
    assert str(OperationStatus.NETWORK_STANDBY) == "Network standby"
    assert OperationStatus.from_code(0x0F) == OperationStatus.STANDBY_POWER_SAVING
    assert OperationStatus.from_code(0x99) == OperationStatus.NOT_SUPPORTED


def test_delta_changes_then_toggles():
    delta = StatusDelta(changes={"power_on": True}, toggles=("picture_freeze",))
    status = delta.apply_to(DeviceStatus())
    assert status == DeviceStatus(power_on=True, picture_freeze=True)
    assert delta.apply_to(status) == DeviceStatus(power_on=True, picture_freeze=False)


def test_delta_rejects_unknown_fields():
    with pytest.raises(ValueError):
        StatusDelta(changes={"brightness": 5})
    with pytest.raises(ValueError):
        StatusDelta(toggles=("operation_status",))


def test_status_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DeviceStatus().power_on = True


def test_device_state_merge_and_identity():
    state = DeviceState()
    assert state.identity is None
    state.set_identity(0x01, 0x0B)
    new_status = state.merge(StatusDelta(changes={"sound_mute": True}))
    assert new_status is state.status
    assert state.status.sound_mute
    assert state.identity == (0x01, 0x0B)
    assert state.as_jsonable() == {
        "control_id": 0x01,
        "model_code": 0x0B,
        "status": {
            "power_on": False,
            "cooling": False,
            "power_transition": False,
            "operation_status": "Standby (Sleep)",
            "picture_mute": False,
            "picture_freeze": False,
            "sound_mute": True,
            "onscreen_mute": False,
        },
    }
