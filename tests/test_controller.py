"""Tests for the protocol controller facade."""

import dataclasses
import logging

import pytest

from nec_projector import (
    Action,
    Applied,
    Failed,
    Unrecognized,
    Truncated,
    DeviceStatus,
    OperationStatus,
    UnknownActionError,
    get_all_commands,
)

ACK_CODES = [0x00, 0x01, 0x10, 0x11, 0x12, 0x13, 0x14, 0x15]


def changed_fields(before: DeviceStatus, after: DeviceStatus) -> set:
    before_dict = dataclasses.asdict(before)
    after_dict = dataclasses.asdict(after)
    return {name for name in before_dict if before_dict[name] != after_dict[name]}


@pytest.mark.parametrize("meta", get_all_commands(), ids=lambda m: m.name)
def test_build_command_returns_table_frame(controller, meta):
    frame = controller.build_command(meta.name)
    assert frame == meta.raw_data
    assert frame[-1] == sum(frame[:-1]) & 0xFF


def test_build_command_accepts_action(controller):
    assert controller.build_command(Action.PICTURE_MUTE_OFF) == bytes([0x02, 0x11, 0x00, 0x00, 0x00, 0x13])


def test_build_command_unknown_action(controller):
    with pytest.raises(UnknownActionError):
        controller.build_command("power.toggle")


def test_build_suspect_command_warns(controller, caplog):
    with caplog.at_level(logging.WARNING, logger="nec_projector"):
        controller.build_command(Action.SOUND_MUTE_OFF)
    assert "sound_mute.off" in caplog.text


@pytest.mark.parametrize("code", ACK_CODES)
def test_ack_changes_exactly_one_field(controller, code):
    # start from the opposite of what the ack sets, so the change is visible
    controller.handle_incoming(bytes([0x22, code ^ 0x01, 0x01, 0x01]))
    before = controller.status
    result = controller.handle_incoming(bytes([0x22, code, 0x01, 0x01]))
    assert isinstance(result, Applied)
    assert len(changed_fields(before, controller.status)) == 1


@pytest.mark.parametrize("code", ACK_CODES)
def test_ack_is_idempotent(controller, code):
    frame = bytes([0x22, code, 0x01, 0x01, 0x00, (0x24 + code) & 0xFF])
    controller.handle_incoming(frame)
    once = controller.status
    controller.handle_incoming(frame)
    assert controller.status == once


@pytest.mark.parametrize("frame", [
    bytes([0x22, 0x02, 0x07, 0x08]),
    bytes([0x22, 0x99, 0x07, 0x08]),
    bytes([0x20, 0x85, 0x07, 0x08, 0x20, 0x00]),
    bytes([0x21, 0x00, 0x07, 0x08, 0x00]),
])
def test_unrecognized_leaves_status_untouched_but_records_identity(controller, frame):
    controller.handle_incoming(bytes([0x22, 0x00, 0x05, 0x06]))
    before = controller.status
    result = controller.handle_incoming(frame)
    assert isinstance(result, Unrecognized)
    assert result.identity == (0x07, 0x08)
    assert controller.status is before
    assert controller.identity == (0x07, 0x08)


def test_unknown_origin_keeps_identity(controller):
    controller.handle_incoming(bytes([0x22, 0x00, 0x05, 0x06]))
    before = controller.status
    result = controller.handle_incoming(bytes([0xFF, 0x00, 0x07, 0x08]))
    assert isinstance(result, Unrecognized)
    assert result.identity is None
    assert controller.status is before
    assert controller.identity == (0x05, 0x06)


def test_truncated_leaves_status_untouched(controller):
    before = controller.status
    result = controller.handle_incoming(bytes([0x20, 0x85, 0x01, 0x01, 0x10, 0x00]))
    assert isinstance(result, Truncated)
    assert controller.status is before
    assert controller.identity is None


def test_running_status_updates_status(controller):
    result = controller.handle_incoming(bytes([0x20, 0x85, 0x01, 0x01, 0x10, 0x00, 0x00, 0x01, 0x00, 0x00, 0x04]))
    assert isinstance(result, Applied)
    assert controller.status.power_on
    assert not controller.status.cooling
    assert not controller.status.power_transition
    assert controller.status.operation_status == OperationStatus.POWER_ON
    assert controller.status.operation_status_str == "Power on"
    assert controller.control_id == 0x01
    assert controller.model_code == 0x01


def test_failure_reply_keeps_status_and_records_identity(controller, caplog):
    controller.handle_incoming(bytes([0x22, 0x00, 0x01, 0x01]))
    before = controller.status
    with caplog.at_level(logging.WARNING, logger="nec_projector"):
        result = controller.handle_incoming(bytes([0xA2, 0x12, 0x03, 0x04, 0x02, 0x02, 0x02]))
    assert isinstance(result, Failed)
    assert result.error.message == "Memory in use"
    assert result.error.context == "Sound mute on failed"
    assert controller.status == before
    assert controller.identity == (0x03, 0x04)
    assert "Memory in use" in caplog.text


def test_freeze_success_toggles(controller):
    frame = bytes([0x21, 0x98, 0x01, 0x01, 0x01, 0x00, 0xBC])
    controller.handle_incoming(frame)
    assert controller.status.picture_freeze
    controller.handle_incoming(frame)
    assert not controller.status.picture_freeze


def test_controller_state_is_per_instance(controller):
    from nec_projector import NecProjectorController
    controller.handle_incoming(bytes([0x22, 0x10, 0x01, 0x01]))
    assert controller.status.picture_mute
    assert NecProjectorController().status == DeviceStatus()
