# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
NEC Projector TCP/IP client transport.

Provides an implementation of NecProjectorClientTransport over an asyncio
stream connection to the projector's control port.
"""

from __future__ import annotations

import asyncio
from asyncio import Future

from ..internal_types import *
from ..exceptions import NecProjectorError
from ..constants import DEFAULT_TIMEOUT, DEFAULT_PORT
from ..pkg_logging import logger
from ..protocol import HEADER_LENGTH, frame_length_from_header

from .client_transport import NecProjectorClientTransport
from .resolve_host import resolve_projector_tcp_host

class TcpNecProjectorClientTransport(NecProjectorClientTransport):
    """NEC Projector TCP/IP client transport."""

    reader: Optional[asyncio.StreamReader] = None
    writer: Optional[asyncio.StreamWriter] = None
    host: str
    port: int
    timeout_secs: float
    final_status: Future[None]
    reader_closed: bool = False
    writer_closed: bool = False

    _transaction_lock: asyncio.Lock
    """Held for a whole command/reply exchange."""

    def __init__(
            self,
            host: str,
            port: int=DEFAULT_PORT,
            timeout_secs: float = DEFAULT_TIMEOUT
          ) -> None:
        super().__init__()
        self.host = host
        self.port = port
        self.timeout_secs = timeout_secs
        self.final_status = asyncio.get_running_loop().create_future()
        self._transaction_lock = asyncio.Lock()

    async def _read_exactly(self, length: int) -> bytes:
        """Reads exactly length bytes, with timeout. Any failure shuts the transport down."""
        if self.reader is None:
            raise NecProjectorError(f"{self}: Transport is not connected")

        try:
            return await asyncio.wait_for(self.reader.readexactly(length), self.timeout_secs)
        except asyncio.IncompleteReadError as e:
            err = NecProjectorError(
                f"Connection closed by projector with partial reply: [{e.partial.hex(' ')}]")
            await self.shutdown(err)
            raise err from e
        except asyncio.TimeoutError as e:
            err = NecProjectorError(f"Timed out after {self.timeout_secs} seconds waiting for projector reply")
            await self.shutdown(err)
            raise err from e
        except OSError as e:
            err = NecProjectorError(f"Error reading from projector: {e}")
            await self.shutdown(err)
            raise err from e
        except Exception as e:
            await self.shutdown(e)
            raise

    async def _read_reply(self) -> bytes:
        """Reads one reply frame: the fixed header, then the data length byte's worth
        of data plus the checksum."""
        header = await self._read_exactly(HEADER_LENGTH)
        remainder = await self._read_exactly(frame_length_from_header(header) - HEADER_LENGTH)
        reply = header + remainder
        logger.debug(f"{self}: Read reply [{reply.hex(' ')}]")
        return reply

    async def _write_frame(self, data: bytes) -> None:
        if self.writer is None:
            raise NecProjectorError(f"{self}: Transport is not connected")

        try:
            logger.debug(f"{self}: Writing command [{data.hex(' ')}]")
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), self.timeout_secs)
        except asyncio.TimeoutError as e:
            err = NecProjectorError(f"Timed out after {self.timeout_secs} seconds writing to projector")
            await self.shutdown(err)
            raise err from e
        except OSError as e:
            err = NecProjectorError(f"Error writing to projector: {e}")
            await self.shutdown(err)
            raise err from e
        except Exception as e:
            await self.shutdown(e)
            raise

    async def transact_no_lock(
            self,
            command_data: bytes,
          ) -> bytes:
        """Writes a command frame and reads its reply. The caller must hold the
        transaction lock; ordinary users should call transact()."""
        await self._write_frame(command_data)
        return await self._read_reply()

    async def transact(
            self,
            command_data: bytes,
          ) -> bytes:
        """Writes a command frame and reads its reply.

        On any error the transport is shut down and every later call fails.
        """
        async with self._transaction_lock:
            if self.final_status.done():
                raise NecProjectorError(f"{self}: Transport is closed")
            return await self.transact_no_lock(command_data)

    async def shutdown(self, exc: Optional[BaseException] = None) -> None:
        if not self.final_status.done():
            if exc is not None:
                self.final_status.set_exception(exc)
            else:
                self.final_status.set_result(None)
        try:
            if not self.reader_closed:
                self.reader_closed = True
                if self.reader is not None:
                    self.reader.feed_eof()
        except Exception:
            logger.debug(f"{self}: Exception while closing reader", exc_info=True)
        finally:
            try:
                if not self.writer_closed:
                    self.writer_closed = True
                    if self.writer is not None:
                        self.writer.close()
            except Exception:
                logger.debug(f"{self}: Exception while closing writer", exc_info=True)

    async def wait(self) -> None:
        try:
            if self.writer is not None:
                await self.writer.wait_closed()
        except Exception as e:
            logger.debug(f"{self}: Exception while waiting for writer to close", exc_info=True)
            await self.shutdown(e)
        finally:
            if not self.final_status.done():
                await self.shutdown()
        await self.final_status

    async def connect(self) -> None:
        """Opens the connection, with timeout.

        The protocol has no greeting or authentication; the connection is usable
        as soon as it is open. On failure the transport is closed.
        """
        try:
            async with self._transaction_lock:
                if self.reader is not None or self.writer is not None:
                    raise NecProjectorError(f"{self}: Already connected")
                logger.debug(f"{self}: Connecting")
                try:
                    self.reader, self.writer = await asyncio.wait_for(
                        asyncio.open_connection(self.host, self.port), self.timeout_secs)
                except asyncio.TimeoutError as e:
                    raise NecProjectorError(
                        f"Timed out connecting to projector at {self.host}:{self.port}") from e
                except OSError as e:
                    raise NecProjectorError(
                        f"Could not connect to projector at {self.host}:{self.port}: {e}") from e
                logger.info(f"{self}: connected")
        except BaseException as e:
            await self.aclose(e)
            raise

    @classmethod
    async def create(
            cls,
            host: Optional[str]=None,
            port: Optional[int]=None,
            timeout_secs: float=DEFAULT_TIMEOUT
          ) -> Self:
        """Creates and connects a transport.

        host and port are resolved by resolve_projector_tcp_host(), so host may be
        "tcp://name:port" and either may come from NEC_PROJECTOR_HOST and
        NEC_PROJECTOR_PORT.
        """
        final_host, final_port = resolve_projector_tcp_host(host, port)
        transport = cls(final_host, port=final_port, timeout_secs=timeout_secs)
        await transport.connect()
        return transport

    def __str__(self) -> str:
        return f"TcpNecProjectorClientTransport({self.host}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
