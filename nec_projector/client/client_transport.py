# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
NEC Projector client abstract transport interface.

A transport moves whole frames: it writes one command frame and returns the one
reply frame the projector sends back, without interpreting either. Decoding and
device status live in NecProjectorController.

The projector answers commands strictly in order and will not accept a new
command before replying to the previous one, so implementations serialize
transact() calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..internal_types import *
from ..pkg_logging import logger


class NecProjectorClientTransport(ABC):
    @abstractmethod
    async def transact(
            self,
            command_data: bytes,
          ) -> bytes:
        """Writes one command frame and returns the complete reply frame."""
        raise NotImplementedError()

    @abstractmethod
    async def shutdown(self, exc: Optional[BaseException] = None) -> None:
        """Begins closing the transport without waiting for it to finish.

        The first call fixes the final status: exc if provided, otherwise success.
        Later calls do nothing. Never raises the final status.
        """
        raise NotImplementedError()

    @abstractmethod
    async def wait(self) -> None:
        """Waits until the transport is fully closed, then raises the final
        status if it is an exception. Does not begin closing by itself.
        """
        raise NotImplementedError()

    async def aclose(self, exc: Optional[BaseException] = None) -> None:
        """Shuts the transport down and waits for it to close.

        Raises the final status if it is an exception.
        """
        await self.shutdown(exc)
        await self.wait()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        try:
            await self.aclose(exc)
        except Exception:
            if exc is None:
                raise
            # the body's exception is already propagating
            logger.debug(f"{self}: Exception while closing after error {exc!r}", exc_info=True)
