#!/usr/bin/env python3
"""IntesisBox - the gateway (i.e. the client of a single IntesisBox, and its AC unit).

Operates at the app layer of: app (gateway) - msg (protocol) - line (transport)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any, TypeAlias

from . import exceptions as exc
from .command import Command
from .const import (
    DEFAULT_PORT,
    ENUMERATED_FUNCTIONS,
    READ_ONLY_FUNCTIONS,
    SZ_HOST,
    SZ_MAC_ADDRESS,
    SZ_PORT,
    Cmd,
    ConnectionState,
    Function,
)
from .helpers import (
    AttributeValueT,
    bool_from_str,
    temp_to_tenths,
    value_from_wire,
    value_to_wire,
)
from .limits import LimitsRegistry
from .message import Message
from .protocol import IntesisProtocol, protocol_factory
from .schemas import validate_config

AttributeHandlerT: TypeAlias = Callable[[Function, AttributeValueT], None]
ConnectivityHandlerT: TypeAlias = Callable[[bool], None]

_LOGGER = logging.getLogger(__name__)


class Gateway:
    """The gateway class.

    A single periodic task (the poller) drives both reconnection and the keepalive: on
    each tick, it connects if disconnected, and then sends a keepalive query.

    Commands issued while offline (or that are not valid) are dropped, and logged.

    The (optional) mac_address is informational only: it is shown by repr(), but is
    never sent to the device.
    """

    def __init__(
        self,
        host: str | None,
        port: int = DEFAULT_PORT,
        **kwargs: Any,
    ) -> None:
        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        self.config = SimpleNamespace(  # will raise ConfigError if invalid
            **validate_config({SZ_HOST: host, SZ_PORT: port, **kwargs})
        )

        self._protocol: IntesisProtocol = protocol_factory(
            self._msg_handler, state_handler=self._state_handler
        )

        self._attr_handlers: list[AttributeHandlerT] = []
        self._conn_handlers: list[ConnectivityHandlerT] = []

        self.attributes: dict[Function, AttributeValueT] = {}  # last known values

        self._is_online: bool = False
        self._connected = asyncio.Event()

        self._tick_lock = asyncio.Lock()  # no overlapping connect attempts
        self._poller: asyncio.Task[None] | None = None

    def __repr__(self) -> str:
        if mac_address := getattr(self.config, SZ_MAC_ADDRESS, None):
            return f"{self.__class__.__name__}({self}, {mac_address})"
        return f"{self.__class__.__name__}({self})"

    def __str__(self) -> str:
        return f"{self.config.host}:{self.config.port}"

    @property
    def is_online(self) -> bool:
        return self._is_online

    @property
    def state(self) -> ConnectionState:
        return self._protocol.state

    @property
    def limits(self) -> LimitsRegistry:
        return self._protocol.limits

    def add_attribute_handler(self, handler: AttributeHandlerT) -> Callable[[], None]:
        """Add a callback for attribute changes, e.g. handler(Function.MODE, "HEAT").

        Returns a callback that can be used to subsequently remove the handler.
        """

        def del_handler() -> None:
            if handler in self._attr_handlers:
                self._attr_handlers.remove(handler)

        if handler not in self._attr_handlers:
            self._attr_handlers.append(handler)

        return del_handler

    def add_connectivity_handler(
        self, handler: ConnectivityHandlerT
    ) -> Callable[[], None]:
        """Add a callback for connectivity changes, e.g. handler(False) when offline.

        Returns a callback that can be used to subsequently remove the handler.
        """

        def del_handler() -> None:
            if handler in self._conn_handlers:
                self._conn_handlers.remove(handler)

        if handler not in self._conn_handlers:
            self._conn_handlers.append(handler)

        return del_handler

    async def start(self) -> None:
        """Report offline, make the first connection attempt, then start the poller.

        A failure to connect is not fatal: the next tick will try again.
        """

        if self._poller:
            raise exc.IntesisException(f"{self}: The gateway is already started")

        self._connectivity_changed(False)

        await self.tick()
        self._poller = asyncio.create_task(
            self._poll_loop(), name=f"Gateway({self})._poll_loop()"
        )

    async def stop(self) -> None:
        """Cancel the poller, and close the connection (will report offline)."""

        if self._poller:
            self._poller.cancel()
            await asyncio.gather(self._poller, return_exceptions=True)
            self._poller = None

        await self._protocol.close()

    shutdown = stop

    async def wait_for_connection(self, timeout: float | None = None) -> None:
        """Wait until the gateway is online (will raise TimeoutError)."""
        await asyncio.wait_for(self._connected.wait(), timeout)

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.poll_interval)
            try:
                await self.tick()
            except Exception as err:  # the poller must survive
                _LOGGER.exception("%s: Tick failed: %s", self, err)

    async def tick(self) -> None:
        """Connect if disconnected, and then (regardless) send a keepalive."""

        async with self._tick_lock:
            if self._protocol.state == ConnectionState.DISCONNECTED:
                try:
                    await self._protocol.connect(
                        self.config.host,
                        self.config.port,
                        connect_timeout=self.config.connect_timeout,
                    )
                except exc.TransportConnectFailed as err:
                    _LOGGER.error("%s: Unable to connect: %s", self, err)

            try:
                await self._protocol.send_cmd(Command.keepalive())
            except exc.ProtocolSendFailed as err:
                _LOGGER.debug("%s: Keepalive not sent: %s", self, err)
            else:
                _LOGGER.debug("%s: Keepalive sent", self)

    async def handle_command(
        self, function: Function | str, value: AttributeValueT | None = None
    ) -> Command | None:
        """Handle a command from the host; a value of None is a refresh request."""

        if value is None:
            return await self.async_refresh_attribute(function)
        return await self.async_set_attribute(function, value)

    async def async_refresh_attribute(self, function: Function | str) -> Command | None:
        """Query the current value of a function (it will arrive as a CHN line).

        Return the Command that was sent, or None if it was dropped.
        """

        try:
            cmd = Command.get_value(_function(function))
            await self._protocol.send_cmd(cmd)
        except (exc.CommandInvalid, exc.ProtocolSendFailed) as err:
            _LOGGER.warning("%s: Refresh dropped: %s", self, err)
            return None
        return cmd

    async def async_set_attribute(
        self, function: Function | str, value: AttributeValueT
    ) -> Command | None:
        """Set the value of a function, after validating it against the limits.

        Return the Command that was sent, or None if it was dropped.
        """

        if not self._protocol.is_connected:
            _LOGGER.warning(
                "%s: Command dropped (offline): %s=%s", self, function, value
            )
            return None

        try:
            cmd = self._create_set_cmd(_function(function), value)
            await self._protocol.send_cmd(cmd)
        except (exc.CommandInvalid, exc.ValueInvalid, exc.ProtocolSendFailed) as err:
            _LOGGER.warning("%s: Command dropped: %s", self, err)
            return None
        return cmd

    def _create_set_cmd(self, function: Function, value: AttributeValueT) -> Command:
        """Return a SET Command, or raise CommandInvalid/ValueInvalid."""

        if function in READ_ONLY_FUNCTIONS:
            raise exc.CommandInvalid(f"{function} is read-only")

        if function == Function.ONOFF:  # always sent
            if isinstance(value, str):
                value = bool_from_str(value.upper())
            return Command.set_value(function, value_to_wire(function, value))

        if function == Function.SETPTEMP:  # always sent, once clamped
            if isinstance(value, str):
                try:
                    value = float(value)
                except ValueError as err:
                    raise exc.ValueInvalid(f"Invalid temp: {value}") from err
            tenths = temp_to_tenths(value)  # type: ignore[arg-type]
            tenths = self.limits.clamp_setpoint(tenths)
            return Command.set_value(function, str(tenths))

        assert function in ENUMERATED_FUNCTIONS  # mypy hint

        if not isinstance(value, str):
            raise exc.ValueInvalid(f"Invalid value: {value}, is not a str")
        if not self.limits.is_allowed(function, value.upper()):
            raise exc.CommandInvalid(
                f"{value} is not allowed for {function}"
                f" (allowed: {self.limits.allowed_values(function)})"
            )
        return Command.set_value(function, value.upper())

    def _msg_handler(self, msg: Message) -> None:
        """Update the attribute cache, and inform the host (CHN messages only)."""

        if msg.command != Cmd.CHN:
            return

        assert msg.value is not None  # mypy hint, CHN always has a value

        try:
            value = value_from_wire(msg.function, msg.value)
        except exc.ValueInvalid as err:
            _LOGGER.warning("%s < ValueInvalid(%s)", msg, err)
            return

        self.attributes[msg.function] = value

        for handler in list(self._attr_handlers):
            handler(msg.function, value)

    def _state_handler(self, state: ConnectionState) -> None:
        """Report a change of online-ness (not every change of state)."""

        if state == ConnectionState.CONNECTED:
            self._connected.set()
        else:
            self._connected.clear()

        is_online = state == ConnectionState.CONNECTED
        if is_online != self._is_online:
            self._connectivity_changed(is_online)

    def _connectivity_changed(self, is_online: bool) -> None:
        self._is_online = is_online
        _LOGGER.info("%s: Is now %s", self, "online" if is_online else "offline")

        for handler in list(self._conn_handlers):
            handler(is_online)


def _function(function: Function | str) -> Function:
    """Return the Function, or raise CommandInvalid if there is no such function."""
    try:
        return Function(str(function).upper())
    except ValueError as err:
        raise exc.CommandInvalid(f"Unknown function: {function}") from err
