#!/usr/bin/env python3
"""IntesisBox - a client for the IntesisBox WMP (ASCII) protocol."""

from __future__ import annotations

from .command import Command
from .const import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_PORT,
    SZ_CONNECT_TIMEOUT,
    SZ_HOST,
    SZ_MAC_ADDRESS,
    SZ_POLL_INTERVAL,
    SZ_PORT,
    Cmd,
    ConnectionState,
    Function,
)
from .exceptions import (
    CommandInvalid,
    ConfigError,
    IntesisException,
    LimitsInvalid,
    MessageInvalid,
    ProtocolError,
    ProtocolSendFailed,
    TransportConnectFailed,
    TransportError,
    ValueInvalid,
)
from .gateway import AttributeHandlerT, ConnectivityHandlerT, Gateway
from .helpers import AttributeValueT, value_from_wire, value_to_wire
from .limits import LimitsRegistry
from .logger import set_logging
from .message import Message, decode, is_ack
from .protocol import IntesisProtocol, protocol_factory
from .schemas import SCH_GATEWAY_CONFIG, GatewayConfigT, validate_config
from .transport import TcpTransport, transport_factory
from .version import VERSION

__all__ = [
    "VERSION",
    "Gateway",
    #
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_PORT",
    "SZ_CONNECT_TIMEOUT",
    "SZ_HOST",
    "SZ_MAC_ADDRESS",
    "SZ_POLL_INTERVAL",
    "SZ_PORT",
    #
    "Cmd",
    "ConnectionState",
    "Function",
    #
    "AttributeHandlerT",
    "AttributeValueT",
    "ConnectivityHandlerT",
    "GatewayConfigT",
    #
    "Command",
    "IntesisProtocol",
    "LimitsRegistry",
    "Message",
    "TcpTransport",
    #
    "SCH_GATEWAY_CONFIG",
    "decode",
    "is_ack",
    "protocol_factory",
    "set_logging",
    "transport_factory",
    "validate_config",
    "value_from_wire",
    "value_to_wire",
    #
    "CommandInvalid",
    "ConfigError",
    "IntesisException",
    "LimitsInvalid",
    "MessageInvalid",
    "ProtocolError",
    "ProtocolSendFailed",
    "TransportConnectFailed",
    "TransportError",
    "ValueInvalid",
]
