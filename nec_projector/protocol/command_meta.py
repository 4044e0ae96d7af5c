#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
NEC Projector known commands and metadata.

Every command is stored as the exact frame to transmit, including its checksum
trailer. Frames are never assembled at send time; the table is checked once, when
this module is imported, so a command with a wrong checksum fails immediately
rather than on the wire.

There is no protocol implementation here; only metadata about the protocol.
"""
from __future__ import annotations

from enum import Enum

from ..internal_types import *
from ..exceptions import NecProjectorError, UnknownActionError
from .packet import Packet, compute_checksum
from .constants import CommandHeader

class CommandGroupMeta:
    """Metadata for a group of related commands (e.g., "power")"""
    name: str
    """Name of the command group"""

    description: Optional[str]

    commands: Dict[str, CommandMeta]
    """Set of commands in this group, indexed by command name unique within the group."""

    def __init__(
            self,
            name: str,
            commands: List[CommandMeta],
            description: Optional[str]=None,
          ):
        self.name = name
        self.description = description
        self.commands = {}
        assert len(commands) > 0
        for command in commands:
            assert not command.short_name in self.commands
            command.command_group = self
            self.commands[command.short_name] = command
_G = CommandGroupMeta

class CommandMeta:
    """Metadata for a single command in a command group"""
    command_group: CommandGroupMeta
    short_name: str
    raw_data: bytes
    """The complete command frame, including the checksum trailer"""
    description: Optional[str]
    suspect: bool
    """True if the frame is known to be questionable (e.g., it duplicates another command's frame)"""

    def __init__(
            self,
            short_name: str,
            raw_data: bytes,
            description: Optional[str]=None,
            suspect: bool=False,
          ):
        self.short_name = short_name
        self.raw_data = raw_data
        self.description = description
        self.suspect = suspect

    @property
    def name(self) -> str:
        """The fully qualified "<group>.<command>" name"""
        return f"{self.command_group.name}.{self.short_name}"

    @property
    def header(self) -> CommandHeader:
        return CommandHeader(self.raw_data[0])

    @property
    def command_code(self) -> int:
        return self.raw_data[1]

    @property
    def packet(self) -> Packet:
        return Packet(self.raw_data)

    def __str__(self) -> str:
        return f"CommandMeta({self.name}: [{self.raw_data.hex(' ')}])"

    def __repr__(self) -> str:
        return str(self)

_C = CommandMeta

# The following is the list of all supported commands. Frames are taken verbatim
# from the vendor's command reference.
_group_metas: List[CommandGroupMeta] = [
    _G("power", [
        _C("on", b'\x02\x00\x00\x00\x00\x02', "Power - On"),
        _C("off", b'\x02\x01\x00\x00\x00\x03', "Power - Off"),
      ]),
    _G("picture_mute", [
        _C("on", b'\x02\x10\x00\x00\x00\x12', "Picture Mute - On"),
        _C("off", b'\x02\x11\x00\x00\x00\x13', "Picture Mute - Off"),
      ]),
    # The reference lists the same frame for sound mute on and off. 0x13 is the
    # sound mute off ack code, but until that is confirmed against the vendor
    # documentation the listed frame is kept and flagged.
    _G("sound_mute", [
        _C("on", b'\x02\x12\x00\x00\x00\x14', "Sound Mute - On"),
        _C("off", b'\x02\x12\x00\x00\x00\x14', "Sound Mute - Off (duplicates sound_mute.on)", suspect=True),
      ]),
    _G("onscreen_mute", [
        _C("on", b'\x02\x14\x00\x00\x00\x16', "Onscreen Mute - On"),
        _C("off", b'\x02\x15\x00\x00\x00\x17', "Onscreen Mute - Off"),
      ]),
    _G("freeze", [
        _C("on", b'\x01\x98\x00\x00\x01\x01\x9b', "Picture Freeze - On"),
        _C("off", b'\x01\x98\x00\x00\x01\x02\x9c', "Picture Freeze - Off"),
      ]),
    _G("status", [
        _C("running_status", b'\x00\x85\x00\x00\x01\x01\x87', "Running Status Request"),
      ]),
    _G("settings", [
        _C("read_state", b'\x00\x85\x00\x00\x01\x00\x86', "Setting Request"),
      ]),
  ]

class Action(str, Enum):
    """Logical actions that have an entry in the command table"""
    POWER_ON = "power.on"
    POWER_OFF = "power.off"
    PICTURE_MUTE_ON = "picture_mute.on"
    PICTURE_MUTE_OFF = "picture_mute.off"
    SOUND_MUTE_ON = "sound_mute.on"
    SOUND_MUTE_OFF = "sound_mute.off"
    ONSCREEN_MUTE_ON = "onscreen_mute.on"
    ONSCREEN_MUTE_OFF = "onscreen_mute.off"
    FREEZE_ON = "freeze.on"
    FREEZE_OFF = "freeze.off"
    RUNNING_STATUS = "status.running_status"
    READ_SETTINGS = "settings.read_state"

command_metas: Dict[str, CommandMeta] = {}
for _group in _group_metas:
    for _command in _group.commands.values():
        _cmd_name = _command.name
        assert not _cmd_name in command_metas
        if len(_command.raw_data) < 2 or compute_checksum(_command.raw_data[:-1]) != _command.raw_data[-1]:
            raise NecProjectorError(
                f"Command {_cmd_name} has a bad checksum trailer: [{_command.raw_data.hex(' ')}]")
        if not _command.raw_data[0] in set(CommandHeader):
            raise NecProjectorError(
                f"Command {_cmd_name} has an unknown header byte: [{_command.raw_data.hex(' ')}]")
        command_metas[_cmd_name] = _command

for _action in Action:
    if not _action.value in command_metas:
        raise NecProjectorError(f"Action {_action.value} has no command table entry")

def get_all_commands() -> List[CommandMeta]:
    """Returns a list of all known commands"""
    return list(command_metas.values())

def name_to_command_meta(name: Union[str, Action]) -> CommandMeta:
    """Returns the command metadata for a "<group>.<command>" name or Action.

    Raises UnknownActionError if the name is not in the command table.
    """
    key = name.value if isinstance(name, Action) else name
    result = command_metas.get(key)
    if result is None:
        raise UnknownActionError(f"Unknown NEC projector command: '{key}'")
    return result

def bytes_to_command_meta(raw_data: bytes) -> List[CommandMeta]:
    """Returns all commands whose frame is exactly raw_data.

    More than one command may match (see sound_mute.off).
    """
    return [meta for meta in command_metas.values() if meta.raw_data == raw_data]
