#!/usr/bin/env python3
"""IntesisBox - the line transport (a persistent TCP connection).

Operates at the line layer of: app (gateway) - msg (protocol) - line (transport)

Each line is terminated by CRLF. As soon as the connection is open, the limits of all
functions are requested (LIMITS:*), so that the limits registry is repopulated before
any commands are sent.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any, Final

from . import exceptions as exc
from .command import Command
from .const import (
    DEFAULT_CONNECT_TIMEOUT,
    LINE_ENCODING,
    LINE_TERMINATOR,
    SZ_PEERNAME,
    SZ_READER_TASK,
)

if TYPE_CHECKING:
    from .protocol import IntesisProtocol

#
# NOTE: All debug flags should be False for deployment to end-users
_DBG_FORCE_LINE_LOGGING: Final[bool] = False

_LOGGER = logging.getLogger(__name__)


def _log_line(direction: str, line: str) -> None:
    if _DBG_FORCE_LINE_LOGGING:
        _LOGGER.warning("%s: %s", direction, line)
    elif _LOGGER.getEffectiveLevel() == logging.INFO:  # log for INFO not DEBUG
        _LOGGER.info("%s: %s", direction, line)
    else:
        _LOGGER.debug("%s: %s", direction, line)


class TcpTransport:
    """Send/receive lines to/from an IntesisBox via a TCP stream.

    The reader task is the only consumer of the stream. It ends when the connection
    is closed (by either end), after which the protocol is informed only once.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        protocol: IntesisProtocol,
        /,
        *,
        extra: dict[str, Any] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._stream_reader = reader
        self._stream_writer = writer
        self._protocol = protocol
        self._loop = loop or asyncio.get_running_loop()

        self._extra: dict[str, Any] = {} if extra is None else extra
        self._extra[SZ_PEERNAME] = writer.get_extra_info(SZ_PEERNAME)

        self._write_lock = asyncio.Lock()
        self._closing: bool = False
        self._is_made: bool = False

        self._reader_task: asyncio.Task[None] | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._extra[SZ_PEERNAME]})"

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def get_extra_info(self, name: str, default: Any = None) -> Any:
        return self._extra.get(name, default)

    def is_closing(self) -> bool:
        """Return True if the transport is closing or has closed."""
        return self._closing

    def _make_connection(self) -> None:
        """Bind to the protocol, then start reading lines."""

        self._is_made = True
        self._protocol.connection_made(self)

        self._extra[SZ_READER_TASK] = self._reader_task = self._loop.create_task(
            self._start_reader(), name="TcpTransport._start_reader()"
        )

    async def _start_reader(self) -> None:
        try:
            await self._reader()
        except exc.TransportError as err:
            self._close(err)
        else:
            self._close()

    # NOTE: self._line_read() invoked from here
    async def _reader(self) -> None:
        """Read lines from the stream until EOF (or an error)."""

        overrun = False  # if True, the rest of the current line is to be discarded

        while not self._closing:
            try:
                data = await self._stream_reader.readuntil(b"\n")
            except asyncio.IncompleteReadError as err:  # EOF
                if err.partial:
                    _LOGGER.warning("%s < Incomplete line (ignored)", err.partial)
                _LOGGER.warning("%s: Connection closed by the IntesisBox", self)
                return
            except asyncio.LimitOverrunError as err:  # a malformed line, not a failure
                if not overrun:
                    _LOGGER.warning("%s < Line is too long (discarding)", self)
                overrun = True
                await self._stream_reader.readexactly(err.consumed)  # already buffered
                continue
            except OSError as err:
                raise exc.TransportError(f"Unable to read from {self}: {err}") from err

            if overrun:  # the tail of a line that was too long
                overrun = False
                continue

            try:
                line = data.decode(LINE_ENCODING, errors="strict").rstrip("\r\n")
            except UnicodeDecodeError:
                _LOGGER.warning("%s < Cant decode bytestream (ignoring)", data)
                continue

            _log_line("Rx", line)
            self._line_read(line)

    # NOTE: all protocol callbacks should be invoked from here
    def _line_read(self, line: str) -> None:
        """Pass the line to the protocol; an exception fails only this line."""

        if self._closing:  # no lines from a closed connection
            return

        try:
            self._protocol.line_received(line)
        except Exception as err:  # protect from upper layers
            _LOGGER.exception("%s < exception from protocol layer: %s", line, err)

    async def write_line(self, line: str) -> None:
        """Transmit the line (adding the line terminator).

        Will close the transport, and raise TransportError, if the write fails.
        """

        async with self._write_lock:
            if self._closing:
                raise exc.TransportClosed("Transport is closing or has closed")

            _log_line("Tx", line)

            try:
                self._stream_writer.write(
                    bytes(line + LINE_TERMINATOR, LINE_ENCODING)
                )
                await self._stream_writer.drain()
            except OSError as err:
                self._close(err)
                raise exc.TransportError(f"Unable to write to {self}: {err}") from err

    def _close(self, err: Exception | None = None) -> None:
        """Close the transport, and inform the protocol (if bound) that it closed."""

        if self._closing:
            return
        self._closing = True

        if err:
            _LOGGER.warning("%s: Connection lost: %s", self, err)

        self._stream_writer.close()

        if self._reader_task and self._reader_task is not asyncio.current_task():
            self._reader_task.cancel()

        if self._is_made:
            self._protocol.connection_lost(err)

    def close(self) -> None:
        """Close the transport (is idempotent)."""
        self._close()

    async def aclose(self) -> None:
        """Close the transport, but not while a line is being written."""

        async with self._write_lock:
            self._close()

        if self._reader_task and self._reader_task is not asyncio.current_task():
            await asyncio.gather(self._reader_task, return_exceptions=True)

        with contextlib.suppress(OSError):
            await self._stream_writer.wait_closed()


async def transport_factory(
    protocol: IntesisProtocol,
    /,
    *,
    host: str,
    port: int,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    extra: dict[str, Any] | None = None,
    loop: asyncio.AbstractEventLoop | None = None,
) -> TcpTransport:
    """Open a connection to the IntesisBox, and return a bound transport.

    Will raise TransportConnectFailed if the connection (or the initial LIMITS:*
    query) fails, in which case the protocol is not bound.
    """

    try:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port), timeout=connect_timeout
        )
    except TimeoutError as err:
        raise exc.TransportConnectFailed(
            f"Unable to connect to {host}:{port} within {connect_timeout} secs"
        ) from err
    except OSError as err:  # incl. socket.gaierror (unknown host)
        raise exc.TransportConnectFailed(
            f"Unable to connect to {host}:{port}: {err}"
        ) from err

    transport = TcpTransport(reader, writer, protocol, extra=extra, loop=loop)

    try:
        await transport.write_line(str(Command.get_limits()))
    except exc.TransportError as err:
        raise exc.TransportConnectFailed(
            f"Unable to query the limits of {host}:{port}: {err}"
        ) from err
    except asyncio.CancelledError:
        transport.close()
        raise

    transport._make_connection()
    return transport
