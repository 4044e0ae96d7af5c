# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Decoding of response frames received from the projector.

decode_response() turns the raw bytes of one reply into exactly one of:

    Applied       a success reply; carries the StatusDelta to merge into DeviceStatus
    Failed        a failure reply (origin 0xA0, 0xA1 or 0xA2); carries an ErrorRecord
    Unrecognized  an origin/command code combination that is not understood
    Truncated     the frame ended before the fields its family requires

Bytes are consumed strictly left to right through a FrameCursor. Nothing in
this module raises on frame content, and nothing here mutates device state.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..internal_types import *
from ..pkg_logging import logger
from .constants import (
    ResponseOrigin,
    STATUS_CODE,
    RUNNING_STATUS_MARKER,
    FREEZE_CODE,
    ERROR_MARKER,
  )
from .device_status import OperationStatus, StatusDelta
from .error_catalog import (
    describe_error,
    failure_context,
    MALFORMED_ERROR_CONTEXT,
  )

FREEZE_DATA_LENGTH = 0x01
"""Data length byte that may precede the result byte of a freeze reply."""

FREEZE_SUCCESS = 0x00

class FrameTruncated(Exception):
    """Raised internally by FrameCursor when a read runs past the end of the frame."""
    needed: int

    def __init__(self, needed: int):
        super().__init__(f"Frame truncated; at least {needed} bytes required")
        self.needed = needed

class FrameCursor:
    """A read position over an immutable frame buffer"""
    data: bytes
    position: int

    def __init__(self, data: bytes):
        self.data = data
        self.position = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.position

    def read_byte(self) -> int:
        if self.remaining < 1:
            raise FrameTruncated(self.position + 1)
        result = self.data[self.position]
        self.position += 1
        return result

    def read_bytes(self, length: int) -> bytes:
        if self.remaining < length:
            raise FrameTruncated(self.position + length)
        result = self.data[self.position:self.position + length]
        self.position += length
        return result

    def read_flag(self) -> bool:
        """Reads one byte; 0x01 means True, anything else False"""
        return self.read_byte() == 0x01

@dataclass(frozen=True)
class ErrorRecord:
    """An error reported by the projector in a failure reply"""
    error_category: int
    error_detail: int
    message: str
    """Diagnostic resolved from the error catalog; the canonical description of the error"""
    context: str
    """Command-specific supplementary text (e.g., "Sound mute on failed")"""

    @property
    def error_code(self) -> Tuple[int, int]:
        return (self.error_category, self.error_detail)

    def __str__(self) -> str:
        return f"{self.context}: [{self.error_category:02x} {self.error_detail:02x}] {self.message}"

    def as_jsonable(self) -> JsonableDict:
        return {
            "error_category": self.error_category,
            "error_detail": self.error_detail,
            "message": self.message,
            "context": self.context,
          }

@dataclass(frozen=True)
class DecodeResult:
    """Base class for the outcome of decoding one response frame"""
    raw_data: bytes

    @property
    def is_success(self) -> bool:
        return False

    @property
    def kind(self) -> str:
        return self.__class__.__name__.lower()

    def as_jsonable(self) -> JsonableDict:
        return {
            "result": self.kind,
            "raw_data": self.raw_data.hex(' '),
          }

@dataclass(frozen=True)
class Applied(DecodeResult):
    """A recognized success reply"""
    origin: int
    command_code: int
    control_id: int
    model_code: int
    delta: StatusDelta

    @property
    def is_success(self) -> bool:
        return True

    def as_jsonable(self) -> JsonableDict:
        result = super().as_jsonable()
        result.update(command_code=self.command_code, control_id=self.control_id, model_code=self.model_code)
        return result

@dataclass(frozen=True)
class Failed(DecodeResult):
    """A failure reply reported by the projector"""
    origin: int
    command_code: int
    control_id: int
    model_code: int
    error: ErrorRecord

    def as_jsonable(self) -> JsonableDict:
        result = super().as_jsonable()
        result.update(
            command_code=self.command_code,
            control_id=self.control_id,
            model_code=self.model_code,
            error=self.error.as_jsonable(),
          )
        return result

@dataclass(frozen=True)
class Unrecognized(DecodeResult):
    """A frame whose origin byte or command code is not understood"""
    reason: str
    control_id: Optional[int] = None
    """Control ID, if the frame was long enough to carry one"""
    model_code: Optional[int] = None

    @property
    def identity(self) -> Optional[Tuple[int, int]]:
        if self.control_id is None or self.model_code is None:
            return None
        return (self.control_id, self.model_code)

    def as_jsonable(self) -> JsonableDict:
        result = super().as_jsonable()
        result.update(reason=self.reason, control_id=self.control_id, model_code=self.model_code)
        return result

@dataclass(frozen=True)
class Truncated(DecodeResult):
    """A frame that ended before all the fields of its family could be read"""
    needed: int
    """Minimum frame length required to read the next field"""

    @property
    def available(self) -> int:
        return len(self.raw_data)

    def as_jsonable(self) -> JsonableDict:
        result = super().as_jsonable()
        result.update(needed=self.needed, available=self.available)
        return result

ack_changes: Dict[int, Tuple[str, bool]] = {
    0x00: ("power_on", True),
    0x01: ("power_on", False),
    0x10: ("picture_mute", True),
    0x11: ("picture_mute", False),
    0x12: ("sound_mute", True),
    0x13: ("sound_mute", False),
    0x14: ("onscreen_mute", True),
    0x15: ("onscreen_mute", False),
  }
"""Command code of an 0x22 ack reply -> (DeviceStatus field, value it is set to)."""

_Decoder = Callable[[bytes, int, FrameCursor], DecodeResult]

def _decode_setting_reply(raw_data: bytes, origin: int, cursor: FrameCursor) -> DecodeResult:
    command_code = cursor.read_byte()
    control_id = cursor.read_byte()
    model_code = cursor.read_byte()
    if command_code != STATUS_CODE:
        return Unrecognized(
            raw_data, f"Unknown setting reply command code 0x{command_code:02x}", control_id, model_code)
    marker = cursor.read_byte()
    if marker != RUNNING_STATUS_MARKER:
        return Unrecognized(
            raw_data, f"Unsupported setting reply data marker 0x{marker:02x}", control_id, model_code)
    cursor.read_bytes(2)   # system reserved
    power_on = cursor.read_flag()
    cooling = cursor.read_flag()
    power_transition = cursor.read_flag()
    operation_status = OperationStatus.from_code(cursor.read_byte())
    delta = StatusDelta(changes=dict(
        power_on=power_on,
        cooling=cooling,
        power_transition=power_transition,
        operation_status=operation_status,
      ))
    return Applied(raw_data, origin, command_code, control_id, model_code, delta)

def _decode_freeze_reply(raw_data: bytes, origin: int, cursor: FrameCursor) -> DecodeResult:
    command_code = cursor.read_byte()
    control_id = cursor.read_byte()
    model_code = cursor.read_byte()
    if command_code != FREEZE_CODE:
        return Unrecognized(
            raw_data, f"Unknown freeze reply command code 0x{command_code:02x}", control_id, model_code)
    result_code = cursor.read_byte()
    if result_code == FREEZE_DATA_LENGTH and cursor.remaining > 0:
        # full wire form: <length=01> <result>
        result_code = cursor.read_byte()
    if result_code == FREEZE_SUCCESS:
        delta = StatusDelta(toggles=("picture_freeze",))
    else:
        delta = StatusDelta()
    return Applied(raw_data, origin, command_code, control_id, model_code, delta)

def _decode_ack_reply(raw_data: bytes, origin: int, cursor: FrameCursor) -> DecodeResult:
    command_code = cursor.read_byte()
    control_id = cursor.read_byte()
    model_code = cursor.read_byte()
    change = ack_changes.get(command_code)
    if change is None:
        return Unrecognized(
            raw_data, f"Unknown ack reply command code 0x{command_code:02x}", control_id, model_code)
    field_name, value = change
    delta = StatusDelta(changes={field_name: value})
    return Applied(raw_data, origin, command_code, control_id, model_code, delta)

def _decode_failure_reply(raw_data: bytes, origin: int, cursor: FrameCursor) -> DecodeResult:
    command_code = cursor.read_byte()
    control_id = cursor.read_byte()
    model_code = cursor.read_byte()
    marker = cursor.read_byte()
    if marker != ERROR_MARKER:
        logger.debug(f"Failure reply with unexpected marker 0x{marker:02x}: {raw_data.hex(' ')}")
        context = MALFORMED_ERROR_CONTEXT
    else:
        context = failure_context(origin, command_code)
    error_category = cursor.read_byte()
    error_detail = cursor.read_byte()
    error = ErrorRecord(
        error_category=error_category,
        error_detail=error_detail,
        message=describe_error(error_category, error_detail),
        context=context,
      )
    return Failed(raw_data, origin, command_code, control_id, model_code, error)

_family_decoders: Dict[int, _Decoder] = {
    ResponseOrigin.SETTING_REPLY: _decode_setting_reply,
    ResponseOrigin.FREEZE_REPLY: _decode_freeze_reply,
    ResponseOrigin.ACK_REPLY: _decode_ack_reply,
    ResponseOrigin.QUERY_FAILED: _decode_failure_reply,
    ResponseOrigin.ADJUST_FAILED: _decode_failure_reply,
    ResponseOrigin.CONTROL_FAILED: _decode_failure_reply,
  }

def decode_response(data: bytes | bytearray | memoryview) -> DecodeResult:
    """Decodes one response frame. Never raises for malformed or unknown frames."""
    raw_data = bytes(data)
    cursor = FrameCursor(raw_data)
    try:
        origin = cursor.read_byte()
        decoder = _family_decoders.get(origin)
        if decoder is None:
            return Unrecognized(raw_data, f"Unknown origin byte 0x{origin:02x}")
        return decoder(raw_data, origin, cursor)
    except FrameTruncated as e:
        return Truncated(raw_data, e.needed)
