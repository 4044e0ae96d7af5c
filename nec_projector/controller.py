# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
NEC Projector protocol controller.

Combines the command table, the response decoder and the device state of a single
projector connection. The controller owns no socket and performs no I/O; whoever
owns the connection calls build_command() for each request and handle_incoming()
for each reply frame, one exchange at a time.

A new controller should be created for each new connection.
"""

from __future__ import annotations

from .internal_types import *
from .pkg_logging import logger
from .protocol import (
    Action,
    CommandMeta,
    name_to_command_meta,
    DeviceState,
    DeviceStatus,
    DecodeResult,
    Applied,
    Failed,
    Unrecognized,
    decode_response,
  )

class NecProjectorController:
    """Protocol state machine for one projector connection."""

    state: DeviceState

    def __init__(self) -> None:
        self.state = DeviceState()

    def get_command_meta(self, action: Union[Action, str]) -> CommandMeta:
        """Returns the command table entry for an action.

        Raises UnknownActionError if the action is not in the command table.
        """
        return name_to_command_meta(action)

    def build_command(self, action: Union[Action, str]) -> bytes:
        """Returns the exact frame to transmit for an action.

        Raises UnknownActionError if the action is not in the command table.
        """
        command_meta = self.get_command_meta(action)
        if command_meta.suspect:
            logger.warning(f"{self}: Command {command_meta.name} is suspect: {command_meta.description}")
        return command_meta.raw_data

    def handle_incoming(self, data: bytes | bytearray | memoryview) -> DecodeResult:
        """Decodes one reply frame, merges a successful result into the device state,
        and returns the result.

        Failure replies, unrecognized frames and truncated frames leave the device
        status unchanged. The control ID and model code are recorded from every
        frame long enough to carry them.
        """
        result = decode_response(data)
        if isinstance(result, Applied):
            self.state.set_identity(result.control_id, result.model_code)
            new_status = self.state.merge(result.delta)
            logger.debug(f"{self}: Applied reply [{result.raw_data.hex(' ')}]: {new_status}")
        elif isinstance(result, Failed):
            self.state.set_identity(result.control_id, result.model_code)
            logger.warning(f"{self}: Projector reported failure: {result.error}")
        else:
            if isinstance(result, Unrecognized) and not result.identity is None:
                self.state.set_identity(*result.identity)
            logger.debug(f"{self}: Could not decode reply: {result}")
        return result

    @property
    def status(self) -> DeviceStatus:
        return self.state.status

    @property
    def control_id(self) -> Optional[int]:
        return self.state.control_id

    @property
    def model_code(self) -> Optional[int]:
        return self.state.model_code

    @property
    def identity(self) -> Optional[Tuple[int, int]]:
        return self.state.identity

    def __str__(self) -> str:
        return f"NecProjectorController(identity={self.identity})"

    def __repr__(self) -> str:
        return str(self)
