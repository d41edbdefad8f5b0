#!/usr/bin/env python3
"""IntesisBox - the line protocol (decode lines, maintain the connection state)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Final, TypeAlias

from . import exceptions as exc
from .command import Command
from .const import (
    DEFAULT_CONNECT_TIMEOUT,
    UNIT_IDX,
    Cmd,
    ConnectionState,
    Function,
)
from .limits import LimitsRegistry
from .message import Message, decode
from .transport import transport_factory

if TYPE_CHECKING:
    from .transport import TcpTransport

MsgHandlerT: TypeAlias = Callable[[Message], None]
StateHandlerT: TypeAlias = Callable[[ConnectionState], None]

#
# NOTE: All debug flags should be False for deployment to end-users
_DBG_FORCE_LOG_MESSAGES: Final[bool] = False

_LOGGER = logging.getLogger(__name__)


class IntesisProtocol:
    """A protocol that receives Messages and sends Commands via a TcpTransport.

    Owns the connection state, and the limits registry (which is rebuilt from the
    LIMITS lines received after each new connection).

    State transitions:
      DISCONNECTED -> CONNECTING    connect() is invoked
      CONNECTING   -> CONNECTED     the transport is bound (connection_made)
      CONNECTING   -> DISCONNECTED  the connect attempt failed
      CONNECTED    -> DISCONNECTED  the transport is lost/closed (connection_lost)
    """

    def __init__(
        self,
        msg_handler: MsgHandlerT | None = None,
        state_handler: StateHandlerT | None = None,
    ) -> None:
        self._msg_handler = msg_handler
        self._state_handler = state_handler

        self._state = ConnectionState.DISCONNECTED
        self._transport: TcpTransport | None = None
        self._limits = LimitsRegistry()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(state={self._state})"

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state == ConnectionState.CONNECTED

    @property
    def limits(self) -> LimitsRegistry:
        return self._limits

    def _set_state(self, state: ConnectionState) -> None:
        if state == self._state:
            return

        _LOGGER.debug("%s: State changed: %s -> %s", self, self._state, state)
        self._state = state

        if self._state_handler:
            self._state_handler(state)

    async def connect(
        self,
        host: str,
        port: int,
        /,
        *,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ) -> TcpTransport:
        """Open a connection to the IntesisBox (from the DISCONNECTED state only).

        Will raise TransportConnectFailed if the attempt fails.
        """

        if self._state != ConnectionState.DISCONNECTED:
            raise exc.ProtocolError(f"{self}: Cannot connect unless disconnected")

        self._set_state(ConnectionState.CONNECTING)
        _LOGGER.debug("%s: Connecting to %s:%s", self, host, port)

        try:  # will invoke self.connection_made()
            return await transport_factory(
                self, host=host, port=port, connect_timeout=connect_timeout
            )
        except exc.TransportConnectFailed:
            self._set_state(ConnectionState.DISCONNECTED)
            raise
        except BaseException:  # e.g. CancelledError during stop()
            if self._state == ConnectionState.CONNECTING:
                self._set_state(ConnectionState.DISCONNECTED)
            raise

    async def close(self) -> None:
        """Close the connection, if any (a write in progress will complete first)."""

        if self._transport:
            await self._transport.aclose()

    def connection_made(self, transport: TcpTransport) -> None:
        """Called by the transport when the connection is established."""

        self._transport = transport
        self._limits.clear()  # the limits are valid only for this connection

        _LOGGER.info("%s: Connected to %s", self, transport)
        self._set_state(ConnectionState.CONNECTED)

    def connection_lost(self, err: Exception | None) -> None:
        """Called by the transport when the connection is lost or closed.

        The argument is an exception object or None (the latter meaning a regular EOF
        is received or the connection was aborted or closed).
        """

        if self._transport is None:
            return
        self._transport = None

        if err:
            _LOGGER.warning("%s: Disconnected: %s", self, err)
        else:
            _LOGGER.info("%s: Disconnected", self)
        self._set_state(ConnectionState.DISCONNECTED)

    async def send_cmd(self, cmd: Command) -> None:
        """Send a Command, or raise ProtocolSendFailed.

        A failed write leaves the protocol DISCONNECTED (there are no retries).
        """

        if not self._transport or self._state != ConnectionState.CONNECTED:
            raise exc.ProtocolSendFailed(f"Failed to send {cmd}: not connected")

        try:
            await self._transport.write_line(str(cmd))
        except exc.TransportError as err:
            raise exc.ProtocolSendFailed(f"Failed to send {cmd}: {err}") from err

        _LOGGER.debug("%s: Sent: %s", self, cmd)

    def line_received(self, line: str) -> None:
        """Called by the transport when a line is received.

        Invalid lines are logged and discarded (the connection remains open).
        """

        try:
            msg = decode(line)
        except exc.MessageInvalid as err:
            _LOGGER.warning("%s < MessageInvalid(%s)", line, err)
            return

        if msg is None:  # is an ACK (or an empty line)
            return

        if _DBG_FORCE_LOG_MESSAGES:
            _LOGGER.warning("Recv'd: %s", msg)
        else:
            _LOGGER.debug("Recv'd: %s", msg)

        self._msg_received(msg)

    def _msg_received(self, msg: Message) -> None:
        if msg.unit_idx not in (None, UNIT_IDX):
            _LOGGER.debug("%s < Ignored: not for unit %s", msg, UNIT_IDX)

        elif msg.command == Cmd.LIMITS:
            self._limits_received(msg)

        elif msg.command == Cmd.CHN:
            if self._msg_handler:
                self._msg_handler(msg)

        else:  # ID, INFO, SET/GET echos, LOGIN/LOGOUT, CFG, DISCOVER
            _LOGGER.debug("%s < Ignored: %s has no effect", msg, msg.command)

    def _limits_received(self, msg: Message) -> None:
        """Update the limits registry; invalid limits are logged and discarded."""

        try:
            self._limits.apply_limits(msg.function, msg.limits)
        except exc.LimitsInvalid as err:
            _LOGGER.warning("%s < LimitsInvalid(%s)", msg, err)
            return

        if msg.function == Function.SETPTEMP:
            _LOGGER.info(
                "%s: Setpoint limits are: %s-%s",
                self,
                self._limits.min_setpoint,
                self._limits.max_setpoint,
            )


def protocol_factory(
    msg_handler: MsgHandlerT | None = None,
    /,
    *,
    state_handler: StateHandlerT | None = None,
) -> IntesisProtocol:
    """Create and return an IntesisBox protocol."""
    return IntesisProtocol(msg_handler, state_handler)
