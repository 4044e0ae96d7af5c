# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Low-level protocol definitions for NEC projectors.

Contains the command table, the error catalog, the response frame decoder and
the device status model. Nothing in this subpackage performs I/O.
"""

from .constants import (
    CommandHeader,
    ResponseOrigin,
    SUCCESS_ORIGIN_BASE,
    FAILURE_ORIGIN_BASE,
    HEADER_LENGTH,
    CHECKSUM_LENGTH,
    MIN_FRAME_LENGTH,
    STATUS_CODE,
    RUNNING_STATUS_MARKER,
    FREEZE_CODE,
    ERROR_MARKER,
  )

from .packet import (
    Packet,
    compute_checksum,
    append_checksum,
    frame_length_from_header,
  )

from .command_meta import (
    Action,
    CommandGroupMeta,
    CommandMeta,
    get_all_commands,
    name_to_command_meta,
    bytes_to_command_meta,
  )

from .error_catalog import (
    UNKNOWN_ERROR,
    MALFORMED_ERROR_CONTEXT,
    error_catalog,
    describe_error,
    failure_context,
  )

from .device_status import (
    OperationStatus,
    operation_status_map,
    DeviceStatus,
    StatusDelta,
    DeviceState,
  )

from .response import (
    ErrorRecord,
    DecodeResult,
    Applied,
    Failed,
    Unrecognized,
    Truncated,
    decode_response,
  )
