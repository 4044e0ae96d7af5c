# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Frame layout constants for the NEC projector control protocol.

Every frame, in either direction, has the raw form:

    <header> <command_code> <id1> <id2> <data_length> <data...> <checksum>

In command frames id1/id2 are zero placeholders. In response frames they carry
the projector's control ID and model code. The checksum is the sum of all
preceding bytes, truncated to one byte.
"""

from __future__ import annotations

from enum import IntEnum

class CommandHeader(IntEnum):
    """The first byte of a command frame, selecting the command class."""
    QUERY = 0x00
    ADJUST = 0x01
    CONTROL = 0x02

class ResponseOrigin(IntEnum):
    """The first byte of a response frame, identifying its family.

    Success replies are 0x20 + the command header; failure replies are 0xA0 + the
    command header.
    """
    SETTING_REPLY = 0x20
    FREEZE_REPLY = 0x21
    ACK_REPLY = 0x22
    QUERY_FAILED = 0xA0
    ADJUST_FAILED = 0xA1
    CONTROL_FAILED = 0xA2

SUCCESS_ORIGIN_BASE = 0x20
"""Added to a command header to form the origin byte of a successful reply."""

FAILURE_ORIGIN_BASE = 0xA0
"""Added to a command header to form the origin byte of a failure reply."""

HEADER_LENGTH = 5
"""Length of the fixed frame header: header/origin, command code, id1, id2, data length."""

CHECKSUM_LENGTH = 1

MIN_FRAME_LENGTH = HEADER_LENGTH + CHECKSUM_LENGTH

STATUS_CODE = 0x85
"""Command code of the setting/running status requests."""

RUNNING_STATUS_MARKER = 0x10
"""Data length byte of a running status reply (16 data bytes)."""

FREEZE_CODE = 0x98
"""Command code of the picture freeze command."""

ERROR_MARKER = 0x02
"""Data length byte of a failure reply (error category + error detail)."""
