# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Raw protocol frames and checksum helpers.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import NecProjectorError
from .constants import (
    HEADER_LENGTH,
    CHECKSUM_LENGTH,
    MIN_FRAME_LENGTH,
  )

def compute_checksum(data: bytes | bytearray | Iterable[int]) -> int:
    """Returns the protocol checksum of data: the sum of all bytes, truncated to one byte."""
    return sum(data) & 0xFF

def append_checksum(data: bytes | bytearray) -> bytes:
    """Returns data with its checksum byte appended."""
    return bytes(data) + bytes([compute_checksum(data)])

def frame_length_from_header(header: bytes | bytearray) -> int:
    """Returns the total length in bytes of a frame, given at least its fixed header.

    Transports use this to know how many more bytes to read after the header.
    """
    if len(header) < HEADER_LENGTH:
        raise NecProjectorError(f"Frame header too short ({len(header)} bytes): {bytes(header).hex(' ')}")
    return HEADER_LENGTH + header[HEADER_LENGTH - 1] + CHECKSUM_LENGTH

class Packet:
    """
    A single raw frame sent to or received from the projector, of the form:

        <header> <command_code> <id1> <id2> <data_length> <data...> <checksum>
    """

    raw_data: bytes
    """The raw frame data, including the trailing checksum byte"""

    def __init__(self, raw_data: bytes | bytearray):
        self.raw_data = bytes(raw_data)

    def __str__(self) -> str:
        return f"Packet({self.raw_data.hex(' ')})"

    def __repr__(self) -> str:
        return str(self)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Packet) and other.raw_data == self.raw_data

    def __hash__(self) -> int:
        return hash(self.raw_data)

    def __len__(self) -> int:
        return len(self.raw_data)

    @classmethod
    def create(
            cls,
            header: int,
            command_code: int,
            data: bytes=b'',
            id1: int=0x00,
            id2: int=0x00,
          ) -> Self:
        """Creates a frame with a computed checksum."""
        if len(data) > 0xFF:
            raise NecProjectorError(f"Frame data too long ({len(data)} bytes)")
        body = bytes([header, command_code, id1, id2, len(data)]) + data
        return cls(append_checksum(body))

    @property
    def header(self) -> int:
        """The first byte of the frame: the command header, or the origin byte of a response."""
        return self.raw_data[0]

    @property
    def command_code(self) -> int:
        return self.raw_data[1]

    @property
    def id1(self) -> int:
        return self.raw_data[2]

    @property
    def id2(self) -> int:
        return self.raw_data[3]

    @property
    def data_length(self) -> int:
        """The data length byte from the header"""
        return self.raw_data[HEADER_LENGTH - 1]

    @property
    def data(self) -> bytes:
        """The data bytes between the header and the checksum"""
        return self.raw_data[HEADER_LENGTH:-CHECKSUM_LENGTH]

    @property
    def checksum(self) -> int:
        return self.raw_data[-1]

    @property
    def is_complete(self) -> bool:
        """True iff the frame is at least as long as its header says it should be"""
        return (
            len(self.raw_data) >= MIN_FRAME_LENGTH and
            len(self.raw_data) == frame_length_from_header(self.raw_data)
          )

    @property
    def is_checksum_valid(self) -> bool:
        return len(self.raw_data) >= 2 and compute_checksum(self.raw_data[:-1]) == self.checksum

    @property
    def is_valid(self) -> bool:
        return self.is_complete and self.is_checksum_valid
