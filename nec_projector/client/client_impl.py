# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
NEC Projector client.

Drives an NecProjectorController over an NecProjectorClientTransport.
"""

from __future__ import annotations

import asyncio
import time

from ..internal_types import *
from ..exceptions import NecProjectorError, NecProjectorCommandError
from ..constants import STABLE_POWER_TIMEOUT, POWER_POLL_INTERVAL
from ..pkg_logging import logger
from ..controller import NecProjectorController
from ..protocol import (
    Action,
    DeviceStatus,
    DecodeResult,
    Applied,
    Failed,
  )

from .client_config import NecProjectorClientConfig
from .client_transport import NecProjectorClientTransport
from .tcp_client_transport import TcpNecProjectorClientTransport

class NecProjectorClient:
    """NEC Projector client."""

    transport: NecProjectorClientTransport
    controller: NecProjectorController
    stable_power_timeout: float

    def __init__(
            self,
            transport: NecProjectorClientTransport,
            controller: Optional[NecProjectorController]=None,
            stable_power_timeout: float=STABLE_POWER_TIMEOUT,
          ):
        self.transport = transport
        self.controller = NecProjectorController() if controller is None else controller
        self.stable_power_timeout = stable_power_timeout

    @property
    def status(self) -> DeviceStatus:
        """The last known device status"""
        return self.controller.status

    async def transact(
            self,
            action: Union[Action, str],
          ) -> DecodeResult:
        """Sends the command for an action and decodes the reply.

        Device-reported failures and undecodable replies are returned, not raised.
        Raises UnknownActionError for an action not in the command table, and
        NecProjectorError for transport failures.
        """
        command_data = self.controller.build_command(action)
        reply_data = await self.transport.transact(command_data)
        return self.controller.handle_incoming(reply_data)

    async def run_action(
            self,
            action: Union[Action, str],
          ) -> DeviceStatus:
        """Sends the command for an action and returns the updated device status.

        Raises NecProjectorCommandError if the reply is not a success reply.
        """
        result = await self.transact(action)
        if isinstance(result, Applied):
            return self.controller.status
        if isinstance(result, Failed):
            raise NecProjectorCommandError(f"{self}: {action}: {result.error}", result)
        raise NecProjectorCommandError(f"{self}: {action}: undecodable reply: {result}", result)

    async def cmd_power_on(self) -> DeviceStatus:
        """Send a power on command.

        Does not wait for the power to stabilize either before or after sending the command.
        For that, use power_on_wait().
        """
        return await self.run_action(Action.POWER_ON)

    async def cmd_power_off(self) -> DeviceStatus:
        """Send a power off command.

        Does not wait for the projector to finish cooling. For that, use power_off_wait().
        """
        return await self.run_action(Action.POWER_OFF)

    async def cmd_picture_mute(self, on: bool) -> DeviceStatus:
        return await self.run_action(Action.PICTURE_MUTE_ON if on else Action.PICTURE_MUTE_OFF)

    async def cmd_sound_mute(self, on: bool) -> DeviceStatus:
        return await self.run_action(Action.SOUND_MUTE_ON if on else Action.SOUND_MUTE_OFF)

    async def cmd_onscreen_mute(self, on: bool) -> DeviceStatus:
        return await self.run_action(Action.ONSCREEN_MUTE_ON if on else Action.ONSCREEN_MUTE_OFF)

    async def cmd_freeze(self, on: bool) -> DeviceStatus:
        """Send a picture freeze command.

        The projector's reply does not say which way the freeze went, so a successful
        reply toggles the tracked freeze flag.
        """
        return await self.run_action(Action.FREEZE_ON if on else Action.FREEZE_OFF)

    async def cmd_running_status(self) -> DeviceStatus:
        """Send a running status request and return the refreshed device status."""
        return await self.run_action(Action.RUNNING_STATUS)

    async def cmd_read_settings(self) -> DecodeResult:
        """Send a setting request and return the raw decode result.

        Setting replies are not decoded into device status, so a healthy projector
        produces an Unrecognized result here.
        """
        return await self.transact(Action.READ_SETTINGS)

    async def power_status_wait(self, stable_power_timeout: Optional[float]=None) -> DeviceStatus:
        """Waits for power to stabilize (i.e., not cooling and not in a power on/off
           transition) and returns the final stable status.

           raises NecProjectorError if the power status does not stabilize within
              stable_power_timeout seconds. If stable_power_timeout is None, then
              the timeout provided at construction is used.
        """
        if stable_power_timeout is None:
            stable_power_timeout = self.stable_power_timeout
        first = True
        start_time = time.monotonic()
        while True:
            status = await self.cmd_running_status()
            if status.is_stable:
                return status
            if first:
                logger.debug(f"{self}: Waiting for projector power to stabilize: {status.operation_status_str}")
                first = False
            remaining_timeout = stable_power_timeout - (time.monotonic() - start_time)
            if remaining_timeout <= 0:
                raise NecProjectorError(f"{self}: Power status did not stabilize within {stable_power_timeout} seconds")
            await asyncio.sleep(min(POWER_POLL_INTERVAL, remaining_timeout))

    async def power_on_wait(self, stable_power_timeout: Optional[float]=None) -> DeviceStatus:
        """Turns the projector on if it is not already on, and waits for power to stabilize.

        If the projector is cooling down, waits for it to finish cooling down first.
        """
        status = await self.power_status_wait(stable_power_timeout=stable_power_timeout)
        if not status.power_on:
            await self.cmd_power_on()
            status = await self.power_status_wait(stable_power_timeout=stable_power_timeout)
        if not status.power_on:
            raise NecProjectorError(f"{self}: Projector did not power on: {status.operation_status_str}")
        return status

    async def power_off_wait(self, stable_power_timeout: Optional[float]=None) -> DeviceStatus:
        """Turns the projector off if it is not already off, and waits for cooling to finish."""
        status = await self.power_status_wait(stable_power_timeout=stable_power_timeout)
        if status.power_on:
            await self.cmd_power_off()
            status = await self.power_status_wait(stable_power_timeout=stable_power_timeout)
        if status.power_on:
            raise NecProjectorError(f"{self}: Projector did not power off: {status.operation_status_str}")
        return status

    async def _async_dispose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> NecProjectorClient:
        logger.debug(f"{self}: Entering async context manager")
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType]
          ) -> None:
        logger.debug(f"{self}: Exiting async context manager, exc={exc_val}")
        await self._async_dispose()

    @classmethod
    async def create(
            cls,
            host: Optional[str]=None,
            port: Optional[int]=None,
            timeout_secs: Optional[float]=None,
            config: Optional[NecProjectorClientConfig]=None,
          ) -> Self:
        """Connects to a projector over TCP/IP and returns a client for it.

        Arguments override the corresponding values in config (see NecProjectorClientConfig).
        """
        config = NecProjectorClientConfig(
            default_host=host,
            default_port=port,
            timeout_secs=timeout_secs,
            base_config=config,
          )
        transport = await TcpNecProjectorClientTransport.create(
                config.default_host,
                port=config.default_port,
                timeout_secs=config.timeout_secs,
              )
        try:
            self = cls(transport, stable_power_timeout=config.stable_power_timeout_secs)
        except BaseException:
            await transport.aclose()
            raise
        return self

    def __str__(self) -> str:
        return f"NecProjectorClient(transport={self.transport})"

    def __repr__(self) -> str:
        return str(self)

    async def aclose(self) -> None:
        await self._async_dispose()
