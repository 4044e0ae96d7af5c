# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
NEC Projector client configuration.

Provides a general config object for an NecProjectorClient.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import NecProjectorError
from ..constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_PORT,
    STABLE_POWER_TIMEOUT,
  )

class NecProjectorClientConfig:
    """NEC Projector client configuration."""
    default_host: Optional[str]
    default_port: int
    timeout_secs: float
    stable_power_timeout_secs: float

    def __init__(
            self,
            default_host: Optional[str]=None,
            *,
            default_port: Optional[int]=None,
            timeout_secs: Optional[float] = None,
            stable_power_timeout_secs: Optional[float] = None,
            base_config: Optional[NecProjectorClientConfig]=None
          ) -> None:
        """Creates a configuration for an NEC Projector client.

           Args:
             default_host: The default hostname or IPV4 address of the projector.
                   may optionally be prefixed with "tcp://".
                   May be suffixed with ":<port>" to specify a
                   non-default port, which will override the default_port argument.
                   If None, the default host will be taken from the
                     NEC_PROJECTOR_HOST environment variable.
             default_port: The default TCP/IP port number to use.
                    If None, the default port will be taken from NEC_PROJECTOR_PORT.
                    If that environment variable is not found, the default NEC
                    projector port (7142) will be used.
             timeout_secs:
                   The timeout for all client operations, in seconds.
                   If None, the timeout will be taken from the
                   NEC_PROJECTOR_TIMEOUT environment variable.
                   If the environment variable is not found, the
                   default timeout will be used.
             stable_power_timeout_secs:
                   The timeout for the projector to finish cooling or a
                   power on/off transition, in seconds. If None, a default
                   of 60 seconds is used.
             base_config:
                     An optional base configuration to use.
        """
        if base_config is None:
            self.init_from_defaults()
        else:
            self.init_from_base_config(base_config)

        if default_host is not None and default_host != '':
            self.default_host = default_host

        if default_port is not None and default_port > 0:
            self.default_port = default_port

        if timeout_secs is not None:
            self.timeout_secs = timeout_secs

        if stable_power_timeout_secs is not None:
            self.stable_power_timeout_secs = stable_power_timeout_secs

    def init_from_defaults(self) -> None:
        """Initializes the configuration from environment variables and defaults."""
        default_host: Optional[str] = os.environ.get('NEC_PROJECTOR_HOST')
        if default_host == '':
            default_host = None
        self.default_host = default_host
        default_port_str = os.environ.get('NEC_PROJECTOR_PORT')
        if default_port_str is None or default_port_str == '':
            self.default_port = DEFAULT_PORT
        else:
            try:
                self.default_port = int(default_port_str)
            except ValueError as e:
                raise NecProjectorError(f"Invalid NEC_PROJECTOR_PORT: '{default_port_str}'") from e
        timeout_str = os.environ.get('NEC_PROJECTOR_TIMEOUT')
        if timeout_str is None or timeout_str == '':
            self.timeout_secs = DEFAULT_TIMEOUT
        else:
            try:
                self.timeout_secs = float(timeout_str)
            except ValueError as e:
                raise NecProjectorError(f"Invalid NEC_PROJECTOR_TIMEOUT: '{timeout_str}'") from e
        self.stable_power_timeout_secs = STABLE_POWER_TIMEOUT

    def init_from_base_config(self, base_config: NecProjectorClientConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.default_host = base_config.default_host
        self.default_port = base_config.default_port
        self.timeout_secs = base_config.timeout_secs
        self.stable_power_timeout_secs = base_config.stable_power_timeout_secs

    @classmethod
    def from_jsonable(cls, jsonable: JsonableDict, base_config: Optional[NecProjectorClientConfig]=None) -> Self:
        """Creates a configuration from a JSON-compatible dict.

        Recognized keys are "host", "port", "timeout_secs" and "stable_power_timeout_secs".
        Missing keys fall back to the base configuration, environment and defaults.
        """
        host = jsonable.get('host')
        port = jsonable.get('port')
        timeout_secs = jsonable.get('timeout_secs')
        stable_power_timeout_secs = jsonable.get('stable_power_timeout_secs')
        if host is not None and not isinstance(host, str):
            raise NecProjectorError(f"Config 'host' must be a string: {host!r}")
        if port is not None and not isinstance(port, int):
            raise NecProjectorError(f"Config 'port' must be an integer: {port!r}")
        if timeout_secs is not None and not isinstance(timeout_secs, (int, float)):
            raise NecProjectorError(f"Config 'timeout_secs' must be a number: {timeout_secs!r}")
        if stable_power_timeout_secs is not None and not isinstance(stable_power_timeout_secs, (int, float)):
            raise NecProjectorError(
                f"Config 'stable_power_timeout_secs' must be a number: {stable_power_timeout_secs!r}")
        return cls(
            default_host=host,
            default_port=port,
            timeout_secs=None if timeout_secs is None else float(timeout_secs),
            stable_power_timeout_secs=(
                None if stable_power_timeout_secs is None else float(stable_power_timeout_secs)),
            base_config=base_config,
          )

    def __str__(self) -> str:
        return (
            f"NecProjectorClientConfig("
            f"default_host={self.default_host}, "
            f"default_port={self.default_port}, "
            f"timeout_secs={self.timeout_secs!r})"
          )

    def __repr__(self) -> str:
        return str(self)
