# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
NEC Projector emulator.

Provides a simple emulation of an NEC projector on TCP/IP.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    Packet,
    CommandMeta,
    CommandHeader,
    OperationStatus,
    SUCCESS_ORIGIN_BASE,
    FAILURE_ORIGIN_BASE,
    HEADER_LENGTH,
    frame_length_from_header,
    bytes_to_command_meta,
  )
from ..protocol.error_catalog import COMMAND_ERRORS, OPERATION_ERRORS
from ..constants import DEFAULT_PORT

ERROR_UNRECOGNIZED = (COMMAND_ERRORS, 0x00)
ERROR_POWER_OFF = (OPERATION_ERRORS, 0x0D)
ERROR_EXECUTION_FAILED = (OPERATION_ERRORS, 0x0E)

class NecProjectorEmulatorSession(asyncio.Protocol):
    """A single client connection to the emulator"""
    emulator: NecProjectorEmulator
    session_id: int
    transport: Optional[asyncio.Transport] = None
    buffer: bytearray

    def __init__(self, emulator: NecProjectorEmulator):
        self.emulator = emulator
        self.session_id = emulator.alloc_session_id(self)
        self.buffer = bytearray()

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        assert isinstance(transport, asyncio.Transport)
        self.transport = transport
        logger.debug(f"{self}: Connection made")

    def data_received(self, data: bytes) -> None:
        self.buffer.extend(data)
        while len(self.buffer) >= HEADER_LENGTH:
            frame_length = frame_length_from_header(self.buffer)
            if len(self.buffer) < frame_length:
                break
            packet = Packet(self.buffer[:frame_length])
            del self.buffer[:frame_length]
            self.emulator.on_packet_received(self, packet)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        logger.debug(f"{self}: Connection lost, exc={exc}")
        self.transport = None
        self.emulator.free_session_id(self.session_id)

    def write(self, data: bytes) -> None:
        if self.transport is not None:
            self.transport.write(data)

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()

    def __str__(self) -> str:
        return f"NecProjectorEmulatorSession({self.session_id})"

    def __repr__(self) -> str:
        return str(self)

class NecProjectorEmulator(AsyncContextManager['NecProjectorEmulator']):
    """Emulates a single projector: power, mute and freeze state, running status
    replies, and the errors a real projector returns for commands it cannot accept."""
    control_id: int
    model_code: int
    bind_addr: str
    port: int
    sessions: Dict[int, NecProjectorEmulatorSession]
    next_session_id: int = 0
    requests: asyncio.Queue[Optional[Tuple[NecProjectorEmulatorSession, Packet]]]
    server: Optional[asyncio.Server] = None
    handler_task: Optional[asyncio.Task[None]] = None
    final_result: asyncio.Future[None]

    power_on: bool = False
    cooling: bool = False
    power_transition: bool = False
    picture_mute: bool = False
    sound_mute: bool = False
    onscreen_mute: bool = False
    picture_freeze: bool = False

    silent: bool = False
    """If True, commands are consumed but never answered (for timeout tests)."""

    transition_secs: float
    """How long warming up after power on and cooling after power off last. 0 skips both."""

    _transition_handle: Optional[asyncio.TimerHandle] = None

    def __init__(
            self,
            control_id: int = 0x01,
            model_code: int = 0x0B,
            bind_addr: Optional[str] = None,
            port: int = DEFAULT_PORT,
            power_on: bool = False,
            transition_secs: float = 0.0,
          ):
        self.control_id = control_id
        self.model_code = model_code
        self.bind_addr = '127.0.0.1' if bind_addr is None else bind_addr
        self.port = port
        self.power_on = power_on
        self.transition_secs = transition_secs
        self.sessions = {}
        self.requests = asyncio.Queue()
        self.final_result = asyncio.get_running_loop().create_future()

    def alloc_session_id(self, session: NecProjectorEmulatorSession) -> int:
        result = self.next_session_id
        self.next_session_id += 1
        self.sessions[result] = session
        return result

    def free_session_id(self, session_id: int) -> None:
        self.sessions.pop(session_id, None)

    def on_packet_received(self, session: NecProjectorEmulatorSession, packet: Packet) -> None:
        """Called when a complete frame is received from a session."""
        self.requests.put_nowait((session, packet))

    @property
    def operation_status(self) -> OperationStatus:
        if self.cooling:
            return OperationStatus.COOLING
        return OperationStatus.POWER_ON if self.power_on else OperationStatus.STANDBY

    def create_ack_packet(self, header: CommandHeader, command_code: int, data: bytes=b'') -> Packet:
        return Packet.create(
            SUCCESS_ORIGIN_BASE + header, command_code, data, self.control_id, self.model_code)

    def create_failure_packet(self, header: int, command_code: int, error: Tuple[int, int]) -> Packet:
        return Packet.create(
            FAILURE_ORIGIN_BASE + (header & 0x0F), command_code, bytes(error), self.control_id, self.model_code)

    def running_status_data(self) -> bytes:
        data = bytearray(16)
        data[2] = 0x01 if self.power_on else 0x00
        data[3] = 0x01 if self.cooling else 0x00
        data[4] = 0x01 if self.power_transition else 0x00
        data[5] = self.operation_status.value
        return bytes(data)

    def start_transition(self, cooling: bool) -> None:
        """Enters the warm-up (or, if cooling, the cooling) phase for transition_secs."""
        self.cancel_transition()
        if self.transition_secs <= 0:
            return
        self.power_transition = True
        self.cooling = cooling
        self._transition_handle = asyncio.get_running_loop().call_later(
            self.transition_secs, self.end_transition)

    def end_transition(self) -> None:
        self._transition_handle = None
        self.power_transition = False
        self.cooling = False
        logger.debug(f"{self}: Power transition complete; power_on={self.power_on}")

    def cancel_transition(self) -> None:
        if self._transition_handle is not None:
            self._transition_handle.cancel()
            self._transition_handle = None

    def setting_data(self) -> bytes:
        data = bytearray(32)
        data[0] = self.model_code
        data[1] = 0x01   # sound function available
        return bytes(data)

    def handle_command(
            self,
            session: NecProjectorEmulatorSession,
            command_meta: CommandMeta,
          ) -> Packet:
        """Handle a single recognized command, and return the reply frame."""
        header = command_meta.header
        code = command_meta.command_code
        name = command_meta.name

        if name == 'status.running_status':
            return self.create_ack_packet(header, code, self.running_status_data())
        if name == 'settings.read_state':
            return self.create_ack_packet(header, code, self.setting_data())
        if name == 'power.on':
            if self.cooling:
                logger.debug(f"{session}: Rejecting power on while cooling")
                return self.create_failure_packet(header, code, ERROR_EXECUTION_FAILED)
            if not self.power_on:
                self.power_on = True
                self.start_transition(cooling=False)
            return self.create_ack_packet(header, code)
        if name == 'power.off':
            if self.power_on:
                self.power_on = False
                self.picture_freeze = False
                self.start_transition(cooling=True)
            return self.create_ack_packet(header, code)

        if not self.power_on:
            logger.debug(f"{session}: Rejecting {name} while in standby")
            return self.create_failure_packet(header, code, ERROR_POWER_OFF)

        group_name = command_meta.command_group.name
        value = command_meta.short_name == 'on'
        if group_name == 'freeze':
            self.picture_freeze = value
            return self.create_ack_packet(header, code, b'\x00')
        if group_name in ('picture_mute', 'sound_mute', 'onscreen_mute'):
            setattr(self, group_name, value)
            return self.create_ack_packet(header, code)

        return self.create_failure_packet(header, code, ERROR_UNRECOGNIZED)

    def handle_request_packet(
            self,
            session: NecProjectorEmulatorSession,
            packet: Packet
          ) -> Optional[Packet]:
        """Handle a single request frame, and return the reply frame, if any."""
        if not packet.is_valid:
            logger.debug(f"{session}: Invalid request frame: {packet}")
            return self.create_failure_packet(packet.header, packet.command_code, ERROR_UNRECOGNIZED)
        command_metas = bytes_to_command_meta(packet.raw_data)
        if len(command_metas) == 0:
            logger.debug(f"{session}: Unrecognized command: {packet}")
            return self.create_failure_packet(packet.header, packet.command_code, ERROR_UNRECOGNIZED)
        if len(command_metas) > 1:
            logger.debug(f"{session}: Multiple command metas found for command packet; using first: {packet}")
        command_meta = command_metas[0]
        logger.debug(f"{session}: Received command: {command_meta}")
        if self.silent:
            return None
        return self.handle_command(session, command_meta)

    async def handle_requests(self) -> None:
        """Handle requests from sessions."""
        while True:
            session_and_packet = await self.requests.get()
            try:
                if session_and_packet is None:
                    logger.debug("Emulator handler: Received EOF; exiting")
                    break
                session, packet = session_and_packet
                try:
                    logger.debug(f"{session}: Emulator handler: received packet: {packet}")
                    response_packet = self.handle_request_packet(session, packet)
                    if not response_packet is None:
                        logger.debug(f"{session}: Emulator handler: Sending response packet: {response_packet}")
                        session.write(response_packet.raw_data)
                except Exception as e:
                    logger.exception(f"{session}: Handler task: Exception while handling request; killing session: {e}")
                    session.close()
            finally:
                self.requests.task_done()

    async def start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            self.handler_task = asyncio.create_task(self.handle_requests())
            self.server = await loop.create_server(
                lambda: NecProjectorEmulatorSession(self),
                host=self.bind_addr,
                port=self.port)
            if self.port == 0:
                self.port = self.server.sockets[0].getsockname()[1]
            logger.debug(f"Emulator: Listening on {self.bind_addr}:{self.port}")
            await self.server.start_serving()
        except BaseException as e:
            self.set_final_result(e)
            try:
                await self.wait_closed()
            except BaseException:
                logger.debug("Emulator: Exception while cleaning up after failed start", exc_info=True)
            raise

    async def run(self) -> None:
        """Runs the Emulator until it is closed."""
        async with self:
            await self.final_result

    def close(self, exc: Optional[BaseException]=None) -> None:
        """Stops the Emulator."""
        self.set_final_result(exc)

    async def wait_closed(self) -> None:
        """Waits for the emulator to be fully closed. Does not initiate shutdown.
           Raises the final exception, if any."""
        try:
            await self.final_result
        finally:
            try:
                if self.server is not None:
                    try:
                        self.server.close()
                        for session in list(self.sessions.values()):
                            session.close()
                    finally:
                        await self.server.wait_closed()
            finally:
                self.server = None
                self.cancel_transition()
                if self.handler_task is not None:
                    try:
                        await self.handler_task
                    finally:
                        self.handler_task = None

    def set_final_result(self, exc: Optional[BaseException]=None) -> None:
        if not self.final_result.done():
            if exc is None:
                logger.debug(f"Emulator: Setting final result to success")
                self.final_result.set_result(None)
            else:
                logger.debug(f"Emulator: Setting final exception: {exc}")
                self.final_result.set_exception(exc)
            self.requests.put_nowait(None)
            if self.server is not None:
                self.server.close()

    async def __aenter__(self) -> NecProjectorEmulator:
        await self.start()
        return self

    async def __aexit__(self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> None:
        self.set_final_result()
        await self.wait_closed()

    def __str__(self) -> str:
        return f"NecProjectorEmulator({self.bind_addr}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
