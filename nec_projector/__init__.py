# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package nec_projector provides an API for controlling NEC projectors via
their proprietary binary TCP/IP protocol.
"""

from .version import __version__

from .pkg_logging import logger

from .internal_types import Jsonable, JsonableDict

from .exceptions import NecProjectorError, UnknownActionError, NecProjectorCommandError

from .constants import DEFAULT_PORT, DEFAULT_TIMEOUT, STABLE_POWER_TIMEOUT

from .protocol import (
    Packet,
    Action,
    CommandMeta,
    get_all_commands,
    name_to_command_meta,
    bytes_to_command_meta,
    compute_checksum,
    describe_error,
    UNKNOWN_ERROR,
    OperationStatus,
    DeviceStatus,
    DeviceState,
    StatusDelta,
    ErrorRecord,
    DecodeResult,
    Applied,
    Failed,
    Unrecognized,
    Truncated,
    decode_response,
  )

from .controller import NecProjectorController

from .client import (
    NecProjectorClient,
    NecProjectorClientConfig,
    NecProjectorClientTransport,
    TcpNecProjectorClientTransport,
    resolve_projector_tcp_host,
  )
