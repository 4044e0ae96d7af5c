"""End-to-end tests of the TCP client against the projector emulator."""

import asyncio

import pytest

from nec_projector import (
    Action,
    Failed,
    Unrecognized,
    OperationStatus,
    NecProjectorClient,
    NecProjectorError,
    NecProjectorCommandError,
    TcpNecProjectorClientTransport,
)


async def test_power_on_and_running_status(client, emulator):
    status = await client.cmd_power_on()
    assert status.power_on
    assert emulator.power_on

    status = await client.cmd_running_status()
    assert status.power_on
    assert status.operation_status == OperationStatus.POWER_ON
    assert client.controller.identity == (0x01, 0x0B)


async def test_running_status_in_standby(client):
    status = await client.cmd_running_status()
    assert not status.power_on
    assert status.operation_status == OperationStatus.STANDBY


async def test_mutes_follow_projector(client, emulator):
    await client.cmd_power_on()
    status = await client.cmd_picture_mute(True)
    assert status.picture_mute
    assert emulator.picture_mute
    status = await client.cmd_onscreen_mute(True)
    assert status.onscreen_mute
    status = await client.cmd_onscreen_mute(False)
    assert not status.onscreen_mute
    assert not emulator.onscreen_mute
    status = await client.cmd_sound_mute(True)
    assert status.sound_mute
    assert emulator.sound_mute


async def test_freeze_toggles_tracked_state(client, emulator):
    await client.cmd_power_on()
    status = await client.cmd_freeze(True)
    assert status.picture_freeze
    assert emulator.picture_freeze
    status = await client.cmd_freeze(False)
    assert not status.picture_freeze
    assert not emulator.picture_freeze


async def test_command_rejected_in_standby(client):
    before = client.status
    with pytest.raises(NecProjectorCommandError) as exc_info:
        await client.cmd_picture_mute(True)
    result = exc_info.value.result
    assert isinstance(result, Failed)
    assert result.origin == 0xA2
    assert result.error.error_code == (0x02, 0x0D)
    assert result.error.message == "The command cannot be accepted because the power is off"
    assert result.error.context == "Picture mute on failed"
    assert client.status == before


async def test_transact_returns_failures(client):
    result = await client.transact(Action.FREEZE_ON)
    assert isinstance(result, Failed)
    assert result.origin == 0xA1
    assert result.error.context == "Picture freeze failed"


async def test_read_settings_is_unrecognized(client):
    before = client.status
    result = await client.cmd_read_settings()
    assert isinstance(result, Unrecognized)
    assert client.status == before


async def test_power_on_wait_and_off_wait(client, emulator):
    status = await client.power_on_wait(stable_power_timeout=2.0)
    assert status.power_on
    assert emulator.power_on
    status = await client.power_off_wait(stable_power_timeout=2.0)
    assert not status.power_on
    assert not emulator.power_on


async def test_power_off_goes_through_cooling(client, emulator):
    await client.cmd_power_on()
    status = await client.cmd_running_status()
    assert status.power_on
    assert status.power_transition
    assert not status.is_stable

    await client.power_status_wait(stable_power_timeout=2.0)
    await client.cmd_power_off()
    status = await client.cmd_running_status()
    assert not status.power_on
    assert status.cooling
    assert status.operation_status == OperationStatus.COOLING

    with pytest.raises(NecProjectorCommandError) as exc_info:
        await client.cmd_power_on()
    assert exc_info.value.result.error.error_code == (0x02, 0x0E)

    status = await client.power_status_wait(stable_power_timeout=2.0)
    assert not status.power_on
    assert not status.cooling
    assert status.operation_status == OperationStatus.STANDBY


async def test_power_off_wait_waits_out_cooling(client, emulator):
    await client.power_on_wait(stable_power_timeout=2.0)
    status = await client.power_off_wait(stable_power_timeout=2.0)
    assert not status.power_on
    assert not status.cooling
    assert not emulator.cooling


async def test_power_status_wait_times_out(client, emulator):
    emulator.cooling = True
    with pytest.raises(NecProjectorError):
        await client.power_status_wait(stable_power_timeout=0.2)
    assert client.status.cooling
    assert client.status.operation_status == OperationStatus.COOLING


async def test_sequential_commands_on_one_connection(client):
    await client.cmd_power_on()
    results = [await client.transact(Action.RUNNING_STATUS) for _ in range(5)]
    assert all(result.is_success for result in results)


async def test_concurrent_transactions_are_serialized(client):
    await client.cmd_power_on()
    results = await asyncio.gather(
        client.transact(Action.PICTURE_MUTE_ON),
        client.transact(Action.RUNNING_STATUS),
        client.transact(Action.ONSCREEN_MUTE_ON),
    )
    assert [result.command_code for result in results] == [0x10, 0x85, 0x14]


async def test_timeout_shuts_transport_down(emulator):
    emulator.silent = True
    client = await NecProjectorClient.create("127.0.0.1", port=emulator.port, timeout_secs=0.2)
    with pytest.raises(NecProjectorError):
        await client.cmd_power_on()
    with pytest.raises(NecProjectorError):
        await client.aclose()


async def test_unknown_action_does_not_touch_transport(client):
    with pytest.raises(NecProjectorError):
        await client.transact("power.toggle")
    # the connection is still usable
    status = await client.cmd_running_status()
    assert not status.power_on


async def test_transport_context_manager(emulator):
    transport = await TcpNecProjectorClientTransport.create(f"127.0.0.1:{emulator.port}")
    async with transport:
        reply = await transport.transact(bytes([0x00, 0x85, 0x00, 0x00, 0x01, 0x01, 0x87]))
    assert reply[0] == 0x20
    assert len(reply) == 5 + 0x10 + 1
    assert reply[-1] == sum(reply[:-1]) & 0xFF


async def test_connect_failure_raises():
    with pytest.raises(NecProjectorError):
        await TcpNecProjectorClientTransport.create("127.0.0.1", port=1, timeout_secs=1.0)


async def test_emulator_rejects_bad_checksum(emulator):
    transport = await TcpNecProjectorClientTransport.create("127.0.0.1", port=emulator.port)
    async with transport:
        reply = await transport.transact(bytes([0x02, 0x00, 0x00, 0x00, 0x00, 0x07]))
    assert reply[0] == 0xA2
    assert reply[5:7] == bytes([0x00, 0x00])
    assert not emulator.power_on
