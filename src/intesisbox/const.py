#!/usr/bin/env python3
"""IntesisBox - a client for the IntesisBox WMP (ASCII) protocol."""

from __future__ import annotations

from enum import StrEnum
from typing import Final

DEFAULT_PORT: Final[int] = 3310
DEFAULT_POLL_INTERVAL: Final[float] = 30.0  # keepalive & reconnect, seconds
DEFAULT_CONNECT_TIMEOUT: Final[float] = 10.0  # seconds

LINE_TERMINATOR: Final = "\r\n"
LINE_ENCODING: Final = "ascii"

UNIT_IDX: Final[int] = 1  # only one AC unit per gateway is supported
UNIT_ALL: Final = "*"  # wildcard, as in: LIMITS:*

ACK: Final = "ACK"

SZ_HOST: Final = "host"
SZ_PORT: Final = "port"
SZ_POLL_INTERVAL: Final = "poll_interval"
SZ_CONNECT_TIMEOUT: Final = "connect_timeout"
SZ_MAC_ADDRESS: Final = "mac_address"

SZ_PEERNAME: Final = "peername"
SZ_READER_TASK: Final = "reader_task"


class Cmd(StrEnum):
    ID = "ID"
    INFO = "INFO"
    SET = "SET"
    CHN = "CHN"
    GET = "GET"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    CFG = "CFG"
    LIMITS = "LIMITS"
    DISCOVER = "DISCOVER"


class Function(StrEnum):
    ONOFF = "ONOFF"
    MODE = "MODE"
    SETPTEMP = "SETPTEMP"
    FANSP = "FANSP"
    VANEUD = "VANEUD"
    VANELR = "VANELR"
    AMBTEMP = "AMBTEMP"
    ERRSTATUS = "ERRSTATUS"
    ERRCODE = "ERRCODE"


class ConnectionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


# these commands must carry a payload (value), the others may omit it
COMMANDS_WITH_VALUE: Final = (Cmd.SET, Cmd.CHN, Cmd.LIMITS)

# values are validated against the device's LIMITS before being sent
ENUMERATED_FUNCTIONS: Final = (
    Function.MODE,
    Function.FANSP,
    Function.VANEUD,
    Function.VANELR,
)

TEMPERATURE_FUNCTIONS: Final = (Function.SETPTEMP, Function.AMBTEMP)

READ_ONLY_FUNCTIONS: Final = (
    Function.AMBTEMP,
    Function.ERRSTATUS,
    Function.ERRCODE,
)

WRITABLE_FUNCTIONS: Final = (
    Function.ONOFF,
    Function.SETPTEMP,
    *ENUMERATED_FUNCTIONS,
)
