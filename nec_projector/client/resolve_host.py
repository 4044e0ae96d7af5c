# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
NEC Projector host IP/Port resolver.

Resolves host strings and environment variables into a projector address and port.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import NecProjectorError
from ..constants import DEFAULT_PORT

def resolve_projector_tcp_host(
        host: Optional[str]=None,
        default_port: Optional[int]=None,
      ) -> Tuple[str, int]:
    """Resolves a projector host string into a hostname and port.

        Args:
            host: The hostname or IPV4 address of the projector.
                    may optionally be prefixed with "tcp://".
                    May be suffixed with ":<port>" to specify a
                    non-default port, which will override the default_port argument.
                    If None, the host will be taken from the
                    NEC_PROJECTOR_HOST environment variable.
            default_port: The default TCP/IP port number to use. If None, the port
                    will be taken from NEC_PROJECTOR_PORT. If that
                    environment variable is not found, the default NEC
                    projector port (7142) will be used.

        Returns:
            A tuple of (hostname: str, port: int)
    """
    if host is None or host == '':
        host = os.environ.get('NEC_PROJECTOR_HOST')
        if host is None or host == '':
            raise NecProjectorError("No projector host specified, and NEC_PROJECTOR_HOST is not set")

    if default_port is None or default_port <= 0:
        default_port_str = os.environ.get('NEC_PROJECTOR_PORT')
        if default_port_str is None or default_port_str == '':
            default_port = DEFAULT_PORT
        else:
            default_port = int(default_port_str)

    if '://' in host:
        if not host.startswith('tcp://'):
            raise NecProjectorError(f"Invalid host protocol specifier for TCP transport: '{host}'")
        host = host[6:]

    port: int
    if ':' in host:
        host, port_str = host.rsplit(':', 1)
        try:
            port = int(port_str)
        except ValueError as e:
            raise NecProjectorError(f"Invalid port in projector host specifier: '{port_str}'") from e
    else:
        port = default_port

    if host == '':
        raise NecProjectorError("Empty projector hostname")

    return (host, port)
