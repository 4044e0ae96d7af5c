# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
NEC Projector client.

Provides an asyncio client that talks to a projector over TCP/IP.
"""

from .resolve_host import resolve_projector_tcp_host
from .client_config import NecProjectorClientConfig
from .client_transport import NecProjectorClientTransport
from .tcp_client_transport import TcpNecProjectorClientTransport
from .client_impl import (
    NecProjectorClient,
  )
